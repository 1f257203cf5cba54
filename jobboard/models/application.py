"""
职位申请模型模块

Application 连接 Job、申请学生和发布企业，
(job_id, applicant_id) 唯一约束保证同一学生对同一职位只能投递一次
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlalchemy import String, Text, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, utcnow


class ApplicationStatus(str, Enum):
    """申请状态枚举"""
    PENDING = "pending"            # 待处理
    REVIEWING = "reviewing"        # 审核中
    SHORTLISTED = "shortlisted"    # 入围
    INTERVIEW = "interview"        # 面试
    ACCEPTED = "accepted"          # 已录用
    REJECTED = "rejected"          # 已拒绝
    WITHDRAWN = "withdrawn"        # 已撤回


class ApplicationSource(str, Enum):
    """投递来源"""
    WEBSITE = "website"
    MOBILE = "mobile"
    API = "api"


class Application(BaseModel):
    """
    职位申请模型

    关联关系:
    - N:1 -> Job (job_id，删除职位时级联删除)
    - N:1 -> User (applicant_id，学生)
    - N:1 -> User (company_id，企业)
    """
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_application_job_applicant"),
        Index("ix_applications_applicant_created", "applicant_id", "created_at"),
        Index("ix_applications_company_status", "company_id", "status", "created_at"),
        Index("ix_applications_job_status", "job_id", "status"),
    )

    # ========== 外键关联 ==========
    job_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="职位ID"
    )
    applicant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="申请学生ID"
    )
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="企业用户ID"
    )

    # ========== 状态管理 ==========
    status: Mapped[str] = mapped_column(
        String(20),
        default=ApplicationStatus.PENDING.value,
        index=True,
        comment="申请状态"
    )

    # ========== 内容 ==========
    cover_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="求职信")
    employer_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="企业备注")

    # ========== 状态时间点 ==========
    applied_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    shortlisted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    interview_scheduled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    responded_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    withdrawn_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # ========== 元数据 ==========
    source: Mapped[str] = mapped_column(String(10), default=ApplicationSource.WEBSITE.value)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, status={self.status})>"
