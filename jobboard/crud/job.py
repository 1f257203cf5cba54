"""
职位 CRUD 操作

计数器（views / applications_count）只通过单条 UPDATE 语句修改
"""
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import select, update, func, or_, and_, case
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.job import Job, JobStatus
from jobboard.models.base import utcnow
from .base import CRUDBase


def open_job_conditions(now: Optional[datetime] = None) -> list:
    """公开可投递职位的基础条件：active、允许投递、未过截止日期"""
    now = now or utcnow()
    return [
        Job.status == JobStatus.ACTIVE.value,
        Job.allow_applications.is_(True),
        or_(Job.application_deadline.is_(None), Job.application_deadline > now),
    ]


class CRUDJob(CRUDBase[Job]):
    """职位 CRUD 操作类"""

    async def search(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        category: Optional[str] = None,
        employment_type: Optional[str] = None,
        remote: Optional[bool] = None,
        min_salary: Optional[float] = None,
        skip: int = 0,
        limit: int = 12
    ) -> Tuple[List[Job], int]:
        """
        公开职位搜索

        Returns:
            (当前页职位, 过滤后的总数)
        """
        conditions = open_job_conditions()
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                Job.title.ilike(pattern),
                Job.description.ilike(pattern),
                Job.city.ilike(pattern),
            ))
        if city:
            conditions.append(Job.city.ilike(f"%{city}%"))
        if state:
            conditions.append(Job.state.ilike(f"%{state}%"))
        if category:
            conditions.append(Job.category == category)
        if employment_type:
            conditions.append(Job.employment_type == employment_type)
        if remote is not None:
            conditions.append(Job.is_remote.is_(remote))
        if min_salary is not None:
            conditions.append(Job.salary_min >= min_salary)

        where = and_(*conditions)
        total = (await db.execute(
            select(func.count()).select_from(Job).where(where)
        )).scalar() or 0

        result = await db.execute(
            select(Job)
            .where(where)
            .order_by(Job.is_featured.desc(), Job.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def get_featured(self, db: AsyncSession, *, limit: int = 6) -> List[Job]:
        """推荐职位（最新优先）"""
        result = await db.execute(
            select(Job)
            .where(*open_job_conditions(), Job.is_featured.is_(True))
            .order_by(Job.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def category_counts(self, db: AsyncSession) -> List[Tuple[str, int]]:
        """各分类的公开职位数，按数量倒序"""
        count = func.count(Job.id)
        result = await db.execute(
            select(Job.category, count)
            .where(*open_job_conditions())
            .group_by(Job.category)
            .order_by(count.desc())
        )
        return [(row[0], row[1]) for row in result.all()]

    async def get_by_company(
        self,
        db: AsyncSession,
        company_id: str,
        *,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Job], int]:
        """企业自己的职位（含全部状态）"""
        conditions = [Job.company_id == company_id]
        if status:
            conditions.append(Job.status == status)

        total = (await db.execute(
            select(func.count()).select_from(Job).where(*conditions)
        )).scalar() or 0
        result = await db.execute(
            select(Job)
            .where(*conditions)
            .order_by(Job.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def company_totals(self, db: AsyncSession, company_id: str) -> dict:
        """企业职位汇总：总数、active 数、总浏览量"""
        result = await db.execute(
            select(
                func.count(Job.id),
                func.coalesce(func.sum(case((Job.status == JobStatus.ACTIVE.value, 1), else_=0)), 0),
                func.coalesce(func.sum(Job.views), 0),
            ).where(Job.company_id == company_id)
        )
        total, active, views = result.one()
        return {"total": total, "active": active, "total_views": views}

    async def get_open(self, db: AsyncSession, *, limit: int = 200) -> List[Job]:
        """公开可投递职位（推荐优先，其次最新）"""
        result = await db.execute(
            select(Job)
            .where(*open_job_conditions())
            .order_by(Job.is_featured.desc(), Job.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    # ========== 计数器 ==========

    async def increment_views(self, db: AsyncSession, job_id: str) -> None:
        await db.execute(
            update(Job)
            .where(Job.id == job_id)
            .values(views=Job.views + 1)
            .execution_options(synchronize_session="evaluate")
        )

    async def try_increment_applications(self, db: AsyncSession, job_id: str) -> bool:
        """
        申请数 +1（仅当未达上限）

        Returns:
            False 表示职位已满
        """
        result = await db.execute(
            update(Job)
            .where(Job.id == job_id, Job.applications_count < Job.max_applications)
            .values(applications_count=Job.applications_count + 1)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount == 1

    async def decrement_applications(self, db: AsyncSession, job_id: str) -> None:
        """申请数 -1（不低于 0）"""
        await db.execute(
            update(Job)
            .where(Job.id == job_id, Job.applications_count > 0)
            .values(applications_count=Job.applications_count - 1)
            .execution_options(synchronize_session="evaluate")
        )


job_crud = CRUDJob(Job)
