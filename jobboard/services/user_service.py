"""
用户服务

账号视图组装、资料更新、账号设置、学生搜索
"""
from typing import List, Optional
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.exceptions import NotFoundException, ConflictException, ForbiddenException
from jobboard.core.response import paged_data
from jobboard.crud import user_crud
from jobboard.models.user import User
from jobboard.schemas.user import (
    ProfileUpdate, SettingsUpdate,
    StudentProfileResponse, BusinessProfileResponse,
    UserResponse, PublicProfileResponse,
)
from jobboard.schemas.application import ApplicantBrief

# 各角色可更新的资料字段
STUDENT_PROFILE_FIELDS = (
    "first_name", "last_name", "age", "career", "university", "semester",
    "skills", "experience", "availability", "preferred_location",
)
BUSINESS_PROFILE_FIELDS = (
    "company_name", "contact_name", "phone", "address", "city", "state",
    "zip_code", "business_type", "website", "description",
)


# ========== 视图组装 ==========

def profile_view(user: User) -> Optional[dict]:
    if user.is_student and user.student_profile is not None:
        return StudentProfileResponse.model_validate(user.student_profile).model_dump()
    if user.is_business and user.business_profile is not None:
        return BusinessProfileResponse.model_validate(user.business_profile).model_dump()
    return None


def user_view(user: User) -> dict:
    """当前用户视图（含邮箱等私有字段，不含密码哈希）"""
    return UserResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        is_active=bool(user.is_active),
        email_verified=bool(user.email_verified),
        notifications=bool(user.notifications),
        last_login=user.last_login,
        created_at=user.created_at,
        full_name=user.full_name,
        profile_complete=user.profile_complete,
        profile=profile_view(user),
    ).model_dump()


def public_profile_view(user: User) -> dict:
    """公开资料：学生给出资料，企业只给出名称、类型、城市、认证状态"""
    data = {"id": user.id, "role": user.role, "full_name": user.full_name}
    if user.is_student:
        if user.student_profile is not None:
            data["profile"] = StudentProfileResponse.model_validate(user.student_profile)
    else:
        p = user.business_profile
        data.update(
            company_name=p.company_name if p else None,
            business_type=p.business_type if p else None,
            city=p.city if p else None,
            verified=bool(p.verified) if p else False,
        )
    return PublicProfileResponse.model_validate(data).model_dump()


def applicant_view(user: Optional[User]) -> Optional[dict]:
    """申请学生简介（企业查看申请时使用）"""
    if user is None:
        return None
    p = user.student_profile
    data = {"id": user.id, "email": user.email, "full_name": user.full_name}
    if p is not None:
        data.update(
            first_name=p.first_name,
            last_name=p.last_name,
            age=p.age,
            career=p.career,
            university=p.university,
            semester=p.semester,
            skills=p.skills or [],
            experience=p.experience or [],
            cv_path=p.cv_path or "",
            availability=p.availability,
        )
    return ApplicantBrief.model_validate(data).model_dump()


# ========== 资料与设置 ==========

async def update_profile(db: AsyncSession, user: User, data: ProfileUpdate) -> User:
    """只应用当前角色对应的字段"""
    allowed = STUDENT_PROFILE_FIELDS if user.is_student else BUSINESS_PROFILE_FIELDS
    values = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if k in allowed
    }
    user = await user_crud.update_profile(db, user=user, data=values)
    logger.info(f"Profile updated: {user.id} fields={sorted(values)}")
    return user


async def update_settings(db: AsyncSession, user: User, data: SettingsUpdate) -> User:
    if data.email and data.email != user.email:
        existing = await user_crud.get_by_email(db, data.email)
        if existing is not None and existing.id != user.id:
            raise ConflictException("An account with this email already exists")
        user.email = data.email

    if data.notifications is not None:
        user.notifications = data.notifications

    if data.is_active is not None:
        if not user.is_business:
            raise ForbiddenException("Only business accounts can change account status")
        user.is_active = data.is_active

    await db.flush()
    await db.refresh(user)
    return user


async def deactivate(db: AsyncSession, user: User) -> None:
    user.is_active = False
    await db.flush()
    logger.info(f"Account deactivated: {user.id}")


async def get_public_profile(db: AsyncSession, user_id: str) -> dict:
    user = await user_crud.get(db, user_id)
    if user is None or not user.is_active:
        raise NotFoundException("User not found")
    return public_profile_view(user)


async def search_students(
    db: AsyncSession,
    *,
    q: Optional[str] = None,
    career: Optional[str] = None,
    skills: Optional[List[str]] = None,
    page: int = 1,
    limit: int = 20
) -> dict:
    users, total = await user_crud.search_students(
        db, q=q, career=career, skills=skills,
        skip=(page - 1) * limit, limit=limit,
    )
    return paged_data([public_profile_view(u) for u in users], total, page, limit)
