"""
数据模型模块

SQLAlchemy 2.0 声明式模型
"""
from .base import BaseModel, TimestampMixin, utcnow
from .user import User, StudentProfile, BusinessProfile, UserRole, Availability
from .job import (
    Job, JobStatus, JobCategory, EmploymentType, Weekday,
    SalaryCurrency, SalaryPeriod, CATEGORY_LABELS,
)
from .application import Application, ApplicationStatus, ApplicationSource

__all__ = [
    # Base
    "BaseModel",
    "TimestampMixin",
    "utcnow",
    # User
    "User",
    "StudentProfile",
    "BusinessProfile",
    "UserRole",
    "Availability",
    # Job
    "Job",
    "JobStatus",
    "JobCategory",
    "EmploymentType",
    "Weekday",
    "SalaryCurrency",
    "SalaryPeriod",
    "CATEGORY_LABELS",
    # Application
    "Application",
    "ApplicationStatus",
    "ApplicationSource",
]
