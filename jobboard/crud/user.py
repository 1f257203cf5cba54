"""
用户 CRUD 操作
"""
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import select, or_, func
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.user import User, StudentProfile, BusinessProfile, UserRole
from jobboard.models.base import utcnow
from .base import CRUDBase


class CRUDUser(CRUDBase[User]):
    """用户 CRUD 操作类"""

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        """按邮箱获取（邮箱统一小写存储）"""
        result = await db.execute(
            select(self.model).where(self.model.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def create_with_profile(
        self,
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        role: str
    ) -> User:
        """创建账号并挂载对应角色的空资料"""
        user = User(email=email.lower(), password_hash=password_hash, role=role)
        if role == UserRole.STUDENT.value:
            user.student_profile = StudentProfile(skills=[], experience=[])
        else:
            user.business_profile = BusinessProfile()

        db.add(user)
        await db.flush()
        await db.refresh(user)
        return user

    async def update_profile(
        self,
        db: AsyncSession,
        *,
        user: User,
        data: Dict[str, Any]
    ) -> User:
        """更新当前角色的资料字段"""
        profile = user.profile
        if profile is None:
            profile = StudentProfile(skills=[], experience=[]) if user.is_student else BusinessProfile()
            if user.is_student:
                user.student_profile = profile
            else:
                user.business_profile = profile

        for field, value in data.items():
            setattr(profile, field, value)

        await db.flush()
        await db.refresh(profile)
        return user

    async def get_by_cv(self, db: AsyncSession, filename: str) -> Optional[User]:
        """按 CV 文件名查找所属学生"""
        result = await db.execute(
            select(User)
            .join(StudentProfile, StudentProfile.user_id == User.id)
            .where(StudentProfile.cv_path == filename)
        )
        return result.scalar_one_or_none()

    async def touch_last_login(self, db: AsyncSession, *, user: User) -> User:
        user.last_login = utcnow()
        await db.flush()
        return user

    async def search_students(
        self,
        db: AsyncSession,
        *,
        q: Optional[str] = None,
        career: Optional[str] = None,
        skills: Optional[List[str]] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[User], int]:
        """
        搜索启用中的学生

        技能存储为 JSON 列表，按技能过滤在 Python 侧完成（任一匹配，忽略大小写）
        """
        query = (
            select(User)
            .join(StudentProfile, StudentProfile.user_id == User.id)
            .where(User.role == UserRole.STUDENT.value, User.is_active.is_(True))
        )
        if q:
            pattern = f"%{q}%"
            query = query.where(or_(
                StudentProfile.first_name.ilike(pattern),
                StudentProfile.last_name.ilike(pattern),
                StudentProfile.career.ilike(pattern),
                StudentProfile.university.ilike(pattern),
            ))
        if career:
            query = query.where(StudentProfile.career.ilike(f"%{career}%"))
        query = query.order_by(User.created_at.desc())

        if not skills:
            total = (await db.execute(
                select(func.count()).select_from(query.subquery())
            )).scalar() or 0
            result = await db.execute(query.offset(skip).limit(limit))
            return list(result.scalars().all()), total

        wanted = {s.lower() for s in skills}
        result = await db.execute(query)
        matched = [
            user for user in result.scalars().all()
            if wanted & {s.lower() for s in (user.student_profile.skills or [])}
        ]
        return matched[skip:skip + limit], len(matched)


user_crud = CRUDUser(User)
