"""
仪表盘统计服务
"""
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.crud import application_crud, job_crud
from jobboard.models.job import JobCategory
from jobboard.models.user import User
from .application_service import compose
from .job_service import public_views

# 技能关键词 -> 推荐职位分类
SKILL_CATEGORY_MAP = {
    "javascript": JobCategory.TECHNOLOGY.value,
    "python": JobCategory.TECHNOLOGY.value,
    "react": JobCategory.TECHNOLOGY.value,
    "node": JobCategory.TECHNOLOGY.value,
    "programming": JobCategory.TECHNOLOGY.value,
    "design": JobCategory.MARKETING.value,
    "photoshop": JobCategory.MARKETING.value,
    "marketing": JobCategory.MARKETING.value,
    "sales": JobCategory.SALES.value,
    "customer service": JobCategory.CUSTOMER_SERVICE.value,
    "teaching": JobCategory.EDUCATION.value,
    "tutoring": JobCategory.TUTORING.value,
    "cooking": JobCategory.FOOD_SERVICE.value,
    "food": JobCategory.FOOD_SERVICE.value,
}

RECOMMENDED_LIMIT = 5
RECENT_APPLICATIONS_LIMIT = 5


def recommended_categories(skills: List[str]) -> List[str]:
    """根据技能推导推荐分类（去重，保持顺序）"""
    categories = []
    for skill in skills or []:
        category = SKILL_CATEGORY_MAP.get(skill.strip().lower())
        if category and category not in categories:
            categories.append(category)
    return categories


async def recommended_jobs(db: AsyncSession, user: User) -> List[dict]:
    """标签命中技能或分类命中推荐分类的公开职位"""
    skills = (user.student_profile.skills if user.student_profile else None) or []
    if not skills:
        return []

    wanted_tags = {s.strip().lower() for s in skills}
    categories = set(recommended_categories(skills))
    matched = [
        job for job in await job_crud.get_open(db)
        if job.category in categories or wanted_tags & set(job.tags or [])
    ][:RECOMMENDED_LIMIT]
    return await public_views(db, matched)


async def student_dashboard(db: AsyncSession, user: User) -> dict:
    return {
        "applications": await application_crud.status_counts(db, applicant_id=user.id),
        "profile_complete": user.profile_complete,
        "missing_fields": user.missing_profile_fields(),
        "recommended_jobs": await recommended_jobs(db, user),
    }


async def business_dashboard(db: AsyncSession, user: User) -> dict:
    recent = await application_crud.recent_for_company(db, user.id, limit=RECENT_APPLICATIONS_LIMIT)
    return {
        "jobs": await job_crud.company_totals(db, user.id),
        "applications": await application_crud.status_counts(db, company_id=user.id),
        "profile_complete": user.profile_complete,
        "missing_fields": user.missing_profile_fields(),
        "recent_applications": await compose(db, recent, with_applicant=True),
    }


async def dashboard_stats(db: AsyncSession, user: User) -> dict:
    if user.is_student:
        return await student_dashboard(db, user)
    return await business_dashboard(db, user)
