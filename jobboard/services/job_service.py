"""
职位服务

负责职位的创建 / 更新 / 删除、公开搜索，
以及把 Job 行组装成公开或企业视图（企业信息批量查询后拼装）
"""
from typing import Iterable, List, Optional
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.auth import ensure_owner
from jobboard.core.exceptions import NotFoundException, BadRequestException
from jobboard.core.response import paged_data
from jobboard.crud import job_crud, user_crud, application_crud
from jobboard.models.job import Job, CATEGORY_LABELS
from jobboard.models.user import User
from jobboard.schemas.job import (
    JobCreate, JobUpdate, flatten_job_fields,
    CompanyContact, JobPublicResponse, JobOwnerResponse,
)


# ========== 视图组装 ==========

def company_contact(user: Optional[User]) -> Optional[dict]:
    """企业用户 -> 公开联系信息"""
    if user is None or user.business_profile is None:
        return None
    p = user.business_profile
    return CompanyContact(
        id=user.id,
        company_name=p.company_name,
        verified=bool(p.verified),
        city=p.city,
        contact_name=p.contact_name,
        phone=p.phone,
        website=p.website,
        description=p.description,
        business_type=p.business_type,
    ).model_dump()


def _nested_fields(job: Job) -> dict:
    return {
        "location": {
            "address": job.address,
            "city": job.city,
            "state": job.state,
            "zip_code": job.zip_code,
            "is_remote": bool(job.is_remote),
            "is_hybrid": bool(job.is_hybrid),
        },
        "schedule": {
            "start_time": job.start_time,
            "end_time": job.end_time,
            "days": job.days or [],
            "flexible": bool(job.flexible),
        },
        "salary": {
            "min": job.salary_min,
            "max": job.salary_max,
            "currency": job.salary_currency,
            "period": job.salary_period,
            "is_negotiable": bool(job.salary_negotiable),
        },
    }


def _base_fields(job: Job) -> dict:
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "requirements": job.requirements or [],
        "responsibilities": job.responsibilities or [],
        "benefits": job.benefits or [],
        "tags": job.tags or [],
        "employment_type": job.employment_type,
        "category": job.category,
        "application_deadline": job.application_deadline,
        "start_date": job.start_date,
        "views": job.views or 0,
        "is_featured": bool(job.is_featured),
        "requires_cover_letter": bool(job.requires_cover_letter),
        "created_at": job.created_at,
        "updated_at": job.updated_at,
        **_nested_fields(job),
    }


def job_public_view(
    job: Job,
    company: Optional[User] = None,
    has_applied: Optional[bool] = None
) -> dict:
    """公开视图：不含 company_id / status / 计数与投递设置"""
    return JobPublicResponse.model_validate({
        **_base_fields(job),
        "company": company_contact(company),
        "has_applied": has_applied,
    }).model_dump()


def job_owner_view(job: Job) -> dict:
    """发布企业视图：公开字段 + 内部字段"""
    return JobOwnerResponse.model_validate({
        **_base_fields(job),
        "company_id": job.company_id,
        "status": job.status,
        "applications_count": job.applications_count or 0,
        "allow_applications": bool(job.allow_applications),
        "max_applications": job.max_applications,
    }).model_dump()


async def public_views(db: AsyncSession, jobs: Iterable[Job]) -> List[dict]:
    """批量查询发布企业后组装公开视图"""
    jobs = list(jobs)
    companies = await user_crud.get_many(db, (j.company_id for j in jobs))
    return [job_public_view(j, companies.get(j.company_id)) for j in jobs]


# ========== 查询 ==========

async def search_jobs(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 12,
    **filters
) -> dict:
    jobs, total = await job_crud.search(db, skip=(page - 1) * limit, limit=limit, **filters)
    return paged_data(await public_views(db, jobs), total, page, limit)


async def featured_jobs(db: AsyncSession, limit: int = 6) -> List[dict]:
    jobs = await job_crud.get_featured(db, limit=limit)
    return await public_views(db, jobs)


async def job_categories(db: AsyncSession) -> List[dict]:
    """分类、显示名称、公开职位数（数量倒序）"""
    return [
        {"value": category, "label": CATEGORY_LABELS.get(category, category), "count": count}
        for category, count in await job_crud.category_counts(db)
    ]


async def company_jobs(
    db: AsyncSession,
    user: User,
    *,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10
) -> dict:
    jobs, total = await job_crud.get_by_company(
        db, user.id, status=status, skip=(page - 1) * limit, limit=limit
    )
    return paged_data([job_owner_view(j) for j in jobs], total, page, limit)


async def get_job_or_404(db: AsyncSession, job_id: str) -> Job:
    job = await job_crud.get(db, job_id)
    if job is None:
        raise NotFoundException("Job not found")
    return job


async def job_detail(db: AsyncSession, job_id: str, viewer: Optional[User] = None) -> dict:
    """
    职位详情

    浏览量原子 +1；携带有效令牌的学生附带 has_applied
    """
    job = await get_job_or_404(db, job_id)
    await job_crud.increment_views(db, job.id)
    await db.refresh(job)

    has_applied = None
    if viewer is not None and viewer.is_student:
        has_applied = await application_crud.exists(db, job.id, viewer.id)

    company = await user_crud.get(db, job.company_id)
    return job_public_view(job, company, has_applied)


# ========== 写操作 ==========

# 部分更新时显式传 null 即清空的可空列
CLEARABLE_JOB_FIELDS = (
    "application_deadline", "start_date", "zip_code",
    "salary_min", "salary_max", "start_time", "end_time",
)


def _check_salary_range(job: Job) -> None:
    if job.salary_min is not None and job.salary_max is not None and job.salary_max < job.salary_min:
        raise BadRequestException("Maximum salary must be greater than or equal to minimum salary")


async def create_job(db: AsyncSession, user: User, data: JobCreate) -> dict:
    values = flatten_job_fields(data.model_dump())
    values["company_id"] = user.id
    job = await job_crud.create(db, obj_in=values)
    logger.info(f"Job created: {job.id} '{job.title}' by {user.id}")
    return job_owner_view(job)


async def update_job(db: AsyncSession, user: User, job_id: str, data: JobUpdate) -> dict:
    job = await get_job_or_404(db, job_id)
    ensure_owner(job.company_id, user, "You can only edit your own jobs")

    values = flatten_job_fields(data.model_dump(exclude_unset=True))
    for key in CLEARABLE_JOB_FIELDS:
        if key in values and values[key] is None:
            setattr(job, key, None)
    job = await job_crud.update(db, db_obj=job, obj_in=values)
    _check_salary_range(job)
    logger.info(f"Job updated: {job.id} fields={sorted(values)}")
    return job_owner_view(job)


async def delete_job(db: AsyncSession, user: User, job_id: str) -> None:
    """删除职位及其全部申请"""
    job = await get_job_or_404(db, job_id)
    ensure_owner(job.company_id, user, "You can only delete your own jobs")

    await application_crud.delete_by_job(db, job.id)
    await job_crud.delete(db, db_obj=job)
    logger.info(f"Job deleted: {job_id} by {user.id}")

