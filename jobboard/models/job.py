"""
职位模型模块

Job 由企业账号发布，applications_count / views 两个计数器
只通过单条 UPDATE 语句原子增减
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from sqlalchemy import String, Text, Integer, Boolean, DateTime, Float, ForeignKey, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, utcnow


class JobStatus(str, Enum):
    """职位状态"""
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"
    DRAFT = "draft"


class EmploymentType(str, Enum):
    """雇佣类型"""
    PART_TIME = "part-time"
    FULL_TIME = "full-time"
    INTERNSHIP = "internship"
    CONTRACT = "contract"
    TEMPORARY = "temporary"


class JobCategory(str, Enum):
    """职位分类"""
    TECHNOLOGY = "technology"
    CUSTOMER_SERVICE = "customer-service"
    RETAIL = "retail"
    FOOD_SERVICE = "food-service"
    MARKETING = "marketing"
    SALES = "sales"
    ADMINISTRATION = "administration"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    TUTORING = "tutoring"
    DELIVERY = "delivery"
    CLEANING = "cleaning"
    SECURITY = "security"
    OTHER = "other"


CATEGORY_LABELS = {
    JobCategory.TECHNOLOGY.value: "Technology",
    JobCategory.CUSTOMER_SERVICE.value: "Customer Service",
    JobCategory.RETAIL.value: "Retail",
    JobCategory.FOOD_SERVICE.value: "Food Service",
    JobCategory.MARKETING.value: "Marketing",
    JobCategory.SALES.value: "Sales",
    JobCategory.ADMINISTRATION.value: "Administration",
    JobCategory.EDUCATION.value: "Education",
    JobCategory.HEALTHCARE.value: "Healthcare",
    JobCategory.TUTORING.value: "Tutoring",
    JobCategory.DELIVERY.value: "Delivery",
    JobCategory.CLEANING.value: "Cleaning",
    JobCategory.SECURITY.value: "Security",
    JobCategory.OTHER.value: "Other",
}


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class SalaryCurrency(str, Enum):
    MXN = "MXN"
    USD = "USD"


class SalaryPeriod(str, Enum):
    HOURLY = "hourly"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Job(BaseModel):
    """
    职位模型

    关联关系:
    - N:1 -> User (company_id，企业账号)
    - 1:N -> Application (删除职位时级联删除)
    """
    __tablename__ = "jobs"
    __table_args__ = (
        Index("ix_jobs_featured_created", "is_featured", "created_at"),
        Index("ix_jobs_search", "status", "category", "city", "employment_type"),
    )

    # ========== 基本信息 ==========
    title: Mapped[str] = mapped_column(String(100), nullable=False, index=True, comment="职位名称")
    description: Mapped[str] = mapped_column(Text, nullable=False, comment="职位描述")
    requirements: Mapped[List[str]] = mapped_column(JSON, default=list, comment="任职要求")
    responsibilities: Mapped[List[str]] = mapped_column(JSON, default=list, comment="工作职责")
    benefits: Mapped[List[str]] = mapped_column(JSON, default=list, comment="福利")
    tags: Mapped[List[str]] = mapped_column(JSON, default=list, comment="标签（小写）")

    # ========== 发布企业 ==========
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="企业用户ID"
    )

    # ========== 工作地点 ==========
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    is_remote: Mapped[bool] = mapped_column(Boolean, default=False)
    is_hybrid: Mapped[bool] = mapped_column(Boolean, default=False)

    # ========== 雇佣与排班 ==========
    employment_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    start_time: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    end_time: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    days: Mapped[List[str]] = mapped_column(JSON, default=list, comment="工作日")
    flexible: Mapped[bool] = mapped_column(Boolean, default=False, comment="排班是否灵活")

    # ========== 薪资 ==========
    salary_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    salary_max: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    salary_currency: Mapped[str] = mapped_column(String(3), default=SalaryCurrency.MXN.value)
    salary_period: Mapped[str] = mapped_column(String(10), default=SalaryPeriod.HOURLY.value)
    salary_negotiable: Mapped[bool] = mapped_column(Boolean, default=False)

    # ========== 分类与状态 ==========
    category: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(10),
        default=JobStatus.ACTIVE.value,
        index=True,
        comment="职位状态"
    )
    application_deadline: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # ========== 计数器 ==========
    views: Mapped[int] = mapped_column(Integer, default=0, comment="浏览量")
    applications_count: Mapped[int] = mapped_column(Integer, default=0, comment="申请数")
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, comment="是否推荐")

    # ========== 投递设置 ==========
    allow_applications: Mapped[bool] = mapped_column(Boolean, default=True)
    max_applications: Mapped[int] = mapped_column(Integer, default=100)
    requires_cover_letter: Mapped[bool] = mapped_column(Boolean, default=False)

    def is_accepting_applications(self, now: Optional[datetime] = None) -> bool:
        """职位当前是否接受投递"""
        now = now or utcnow()
        return (
            self.status == JobStatus.ACTIVE.value
            and bool(self.allow_applications)
            and (self.application_deadline is None or self.application_deadline > now)
            and self.applications_count < self.max_applications
        )

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title={self.title}, status={self.status})>"
