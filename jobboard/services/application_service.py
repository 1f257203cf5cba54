"""
职位申请服务

投递、列表、状态流转、撤回、删除、统计
"""
from typing import List, Optional
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.auth import ensure_owner
from jobboard.core.exceptions import NotFoundException, BadRequestException, ConflictException
from jobboard.core.response import paged_data
from jobboard.crud import application_crud, job_crud, user_crud
from jobboard.models.application import Application, ApplicationStatus
from jobboard.models.user import User
from jobboard.schemas.application import (
    ApplicationCreate, ApplicationStatusUpdate, ApplicationResponse, ApplicationStats, JobBrief,
)
from .application_workflow import check_employer_transition, check_withdrawal, apply_transition
from .job_service import company_contact
from .user_service import applicant_view


# ========== 视图组装 ==========

async def compose(
    db: AsyncSession,
    applications: List[Application],
    *,
    with_company: bool = False,
    with_applicant: bool = False
) -> List[dict]:
    """
    申请 -> 响应视图

    职位、企业、申请人按 ID 批量查询后拼装
    """
    jobs = await job_crud.get_many(db, (a.job_id for a in applications))
    user_ids = set()
    if with_company:
        user_ids.update(a.company_id for a in applications)
    if with_applicant:
        user_ids.update(a.applicant_id for a in applications)
    users = await user_crud.get_many(db, user_ids)

    items = []
    for a in applications:
        job = jobs.get(a.job_id)
        item = ApplicationResponse.model_validate(a)
        item.job = JobBrief.model_validate(job) if job else None
        data = item.model_dump()
        if with_company:
            data["company"] = company_contact(users.get(a.company_id))
        if with_applicant:
            data["applicant"] = applicant_view(users.get(a.applicant_id))
        items.append(data)
    return items


async def get_application_or_404(db: AsyncSession, application_id: str) -> Application:
    application = await application_crud.get(db, application_id)
    if application is None:
        raise NotFoundException("Application not found")
    return application


# ========== 投递 ==========

async def apply(
    db: AsyncSession,
    user: User,
    data: ApplicationCreate,
    ip_address: Optional[str] = None
) -> dict:
    """
    学生投递职位

    依次校验：职位存在、接受投递、非本人职位、求职信、重复投递、名额；
    名额通过条件 UPDATE 原子占用，重复投递由唯一约束兜底
    """
    job = await job_crud.get(db, data.job_id)
    if job is None:
        raise NotFoundException("Job not found")
    if not job.is_accepting_applications():
        raise BadRequestException("This job is no longer accepting applications")
    if job.company_id == user.id:
        raise BadRequestException("You cannot apply to your own job")
    if job.requires_cover_letter and not data.cover_letter:
        raise BadRequestException("This job requires a cover letter")
    if await application_crud.exists(db, job.id, user.id):
        raise ConflictException("You have already applied to this job")

    job_id, company_id = job.id, job.company_id
    if not await job_crud.try_increment_applications(db, job_id):
        raise BadRequestException("This job has reached the maximum number of applications")

    try:
        application = await application_crud.create(db, obj_in={
            "job_id": job_id,
            "applicant_id": user.id,
            "company_id": company_id,
            "cover_letter": data.cover_letter,
            "source": data.source,
            "ip_address": ip_address,
        })
    except IntegrityError:
        # 并发重复投递，回滚同一事务中的计数
        await db.rollback()
        raise ConflictException("You have already applied to this job")

    logger.info(f"Application submitted: {application.id} job={job_id} applicant={user.id}")
    return (await compose(db, [application], with_company=True))[0]


# ========== 列表 ==========

async def list_for_applicant(
    db: AsyncSession,
    user: User,
    *,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10
) -> dict:
    apps, total = await application_crud.list_filtered(
        db, applicant_id=user.id, status=status,
        skip=(page - 1) * limit, limit=limit,
    )
    return paged_data(await compose(db, apps, with_company=True), total, page, limit)


async def list_for_job(
    db: AsyncSession,
    user: User,
    job_id: str,
    *,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10
) -> dict:
    job = await job_crud.get(db, job_id)
    if job is None:
        raise NotFoundException("Job not found")
    ensure_owner(job.company_id, user, "You can only view applications for your own jobs")

    apps, total = await application_crud.list_filtered(
        db, job_id=job_id, status=status,
        skip=(page - 1) * limit, limit=limit,
    )
    return paged_data(await compose(db, apps, with_applicant=True), total, page, limit)


async def list_for_company(
    db: AsyncSession,
    user: User,
    *,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10
) -> dict:
    apps, total = await application_crud.list_filtered(
        db, company_id=user.id, status=status,
        skip=(page - 1) * limit, limit=limit,
    )
    return paged_data(await compose(db, apps, with_applicant=True), total, page, limit)


# ========== 状态流转 ==========

async def update_status(
    db: AsyncSession,
    user: User,
    application_id: str,
    data: ApplicationStatusUpdate
) -> dict:
    """企业更新申请状态"""
    application = await get_application_or_404(db, application_id)
    ensure_owner(application.company_id, user, "You can only manage applications for your own jobs")

    check = check_employer_transition(application.status, data.status)
    if not check:
        raise BadRequestException(check.reason)

    previous = application.status
    apply_transition(application, data.status, data.notes)
    await db.flush()
    await db.refresh(application)

    logger.info(f"Application status changed: {application.id} {previous} -> {application.status}")
    return (await compose(db, [application], with_applicant=True))[0]


async def withdraw(db: AsyncSession, user: User, application_id: str) -> dict:
    """学生撤回（仅 pending）"""
    application = await get_application_or_404(db, application_id)
    ensure_owner(application.applicant_id, user, "You can only withdraw your own applications")

    check = check_withdrawal(application.status)
    if not check:
        raise BadRequestException(check.reason)

    apply_transition(application, ApplicationStatus.WITHDRAWN.value)
    await db.flush()
    await db.refresh(application)

    logger.info(f"Application withdrawn: {application.id}")
    return (await compose(db, [application], with_company=True))[0]


async def delete(db: AsyncSession, user: User, application_id: str) -> None:
    """学生删除申请，职位申请数原子 -1"""
    application = await get_application_or_404(db, application_id)
    ensure_owner(application.applicant_id, user, "You can only delete your own applications")

    job_id = application.job_id
    await application_crud.delete(db, db_obj=application)
    await job_crud.decrement_applications(db, job_id)
    logger.info(f"Application deleted: {application_id} job={job_id}")


# ========== 统计 ==========

async def stats(db: AsyncSession, user: User) -> dict:
    """当前用户的按状态统计；企业额外返回职位数"""
    if user.is_student:
        counts = await application_crud.status_counts(db, applicant_id=user.id)
        return ApplicationStats(**counts).model_dump()

    counts = await application_crud.status_counts(db, company_id=user.id)
    counts = ApplicationStats(**counts).model_dump()
    totals = await job_crud.company_totals(db, user.id)
    counts["total_jobs"] = totals["total"]
    counts["active_jobs"] = totals["active"]
    return counts
