"""
职位申请 CRUD 操作
"""
from typing import Dict, List, Optional, Tuple
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.application import Application, ApplicationStatus
from .base import CRUDBase


class CRUDApplication(CRUDBase[Application]):
    """职位申请 CRUD 操作类"""

    async def get_by_job_and_applicant(
        self,
        db: AsyncSession,
        job_id: str,
        applicant_id: str
    ) -> Optional[Application]:
        result = await db.execute(
            select(self.model).where(
                self.model.job_id == job_id,
                self.model.applicant_id == applicant_id,
            )
        )
        return result.scalar_one_or_none()

    async def exists(self, db: AsyncSession, job_id: str, applicant_id: str) -> bool:
        """检查是否已投递"""
        return await self.get_by_job_and_applicant(db, job_id, applicant_id) is not None

    async def has_application_from(
        self,
        db: AsyncSession,
        company_id: str,
        applicant_id: str
    ) -> bool:
        """企业是否收到过该学生的申请"""
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(
                self.model.company_id == company_id,
                self.model.applicant_id == applicant_id,
            )
        )
        return (result.scalar() or 0) > 0

    async def list_filtered(
        self,
        db: AsyncSession,
        *,
        applicant_id: Optional[str] = None,
        company_id: Optional[str] = None,
        job_id: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Application], int]:
        """
        按申请人 / 企业 / 职位 / 状态过滤，最新优先

        Returns:
            (当前页申请, 过滤后的总数)
        """
        conditions = []
        if applicant_id:
            conditions.append(self.model.applicant_id == applicant_id)
        if company_id:
            conditions.append(self.model.company_id == company_id)
        if job_id:
            conditions.append(self.model.job_id == job_id)
        if status:
            conditions.append(self.model.status == status)

        total = (await db.execute(
            select(func.count()).select_from(self.model).where(*conditions)
        )).scalar() or 0
        result = await db.execute(
            select(self.model)
            .where(*conditions)
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def status_counts(
        self,
        db: AsyncSession,
        *,
        applicant_id: Optional[str] = None,
        company_id: Optional[str] = None
    ) -> Dict[str, int]:
        """按状态统计数量，未出现的状态计 0，附带 total"""
        conditions = []
        if applicant_id:
            conditions.append(self.model.applicant_id == applicant_id)
        if company_id:
            conditions.append(self.model.company_id == company_id)

        result = await db.execute(
            select(self.model.status, func.count())
            .where(*conditions)
            .group_by(self.model.status)
        )
        counts = {status.value: 0 for status in ApplicationStatus}
        for status, count in result.all():
            counts[status] = count
        counts["total"] = sum(counts.values())
        return counts

    async def recent_for_company(
        self,
        db: AsyncSession,
        company_id: str,
        *,
        limit: int = 5
    ) -> List[Application]:
        result = await db.execute(
            select(self.model)
            .where(self.model.company_id == company_id)
            .order_by(self.model.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def delete_by_job(self, db: AsyncSession, job_id: str) -> None:
        await db.execute(
            delete(self.model)
            .where(self.model.job_id == job_id)
            .execution_options(synchronize_session="evaluate")
        )


application_crud = CRUDApplication(Application)
