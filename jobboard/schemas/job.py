"""
职位相关 Schema

请求体使用嵌套的 location / schedule / salary 结构，
存储层为扁平列，两者之间由 flatten_job_fields 转换
"""
from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator, model_validator

from jobboard.models.job import (
    JobCategory, JobStatus, EmploymentType, Weekday, SalaryCurrency, SalaryPeriod,
)
from .base import BaseSchema, RequestSchema, to_naive_utc


# ========== 嵌套结构 ==========

class JobLocation(RequestSchema):
    """工作地点"""

    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    is_remote: bool = False
    is_hybrid: bool = False


class JobLocationUpdate(RequestSchema):
    """工作地点（部分更新）"""

    address: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    is_remote: Optional[bool] = None
    is_hybrid: Optional[bool] = None


class JobSchedule(RequestSchema):
    """排班"""

    start_time: Optional[str] = Field(None, max_length=20)
    end_time: Optional[str] = Field(None, max_length=20)
    days: List[Weekday] = []
    flexible: bool = False


class JobSalary(RequestSchema):
    """薪资"""

    min: Optional[float] = Field(None, ge=0)
    max: Optional[float] = Field(None, ge=0)
    currency: SalaryCurrency = SalaryCurrency.MXN
    period: SalaryPeriod = SalaryPeriod.HOURLY
    is_negotiable: bool = False

    @model_validator(mode="after")
    def check_range(self):
        if self.min is not None and self.max is not None and self.max < self.min:
            raise ValueError("Maximum salary must be greater than or equal to minimum salary")
        return self


# ========== 请求 ==========

class JobCreate(RequestSchema):
    """创建职位"""

    title: str = Field(..., min_length=5, max_length=100, description="职位名称")
    description: str = Field(..., min_length=50, max_length=2000, description="职位描述")
    requirements: List[str] = Field(..., min_length=1, description="任职要求")
    responsibilities: List[str] = []
    benefits: List[str] = []
    tags: List[str] = []

    location: JobLocation
    employment_type: EmploymentType
    schedule: JobSchedule = Field(default_factory=JobSchedule)
    salary: JobSalary = Field(default_factory=JobSalary)
    category: JobCategory

    status: JobStatus = JobStatus.ACTIVE
    application_deadline: Optional[datetime] = None
    start_date: Optional[datetime] = None

    is_featured: bool = False
    allow_applications: bool = True
    max_applications: int = Field(100, ge=1)
    requires_cover_letter: bool = False

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v: List[str]) -> List[str]:
        return [t.strip().lower() for t in v if t and t.strip()]

    @field_validator("requirements")
    @classmethod
    def non_empty_requirements(cls, v: List[str]) -> List[str]:
        cleaned = [r.strip() for r in v if r and r.strip()]
        if not cleaned:
            raise ValueError("At least one requirement is needed")
        return cleaned

    @field_validator("application_deadline", "start_date")
    @classmethod
    def normalize_datetime(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class JobUpdate(RequestSchema):
    """更新职位（部分更新）"""

    title: Optional[str] = Field(None, min_length=5, max_length=100)
    description: Optional[str] = Field(None, min_length=50, max_length=2000)
    requirements: Optional[List[str]] = Field(None, min_length=1)
    responsibilities: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    location: Optional[JobLocationUpdate] = None
    employment_type: Optional[EmploymentType] = None
    schedule: Optional[JobSchedule] = None
    salary: Optional[JobSalary] = None
    category: Optional[JobCategory] = None

    status: Optional[JobStatus] = None
    application_deadline: Optional[datetime] = None
    start_date: Optional[datetime] = None

    is_featured: Optional[bool] = None
    allow_applications: Optional[bool] = None
    max_applications: Optional[int] = Field(None, ge=1)
    requires_cover_letter: Optional[bool] = None

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return [t.strip().lower() for t in v if t and t.strip()]

    @field_validator("application_deadline", "start_date")
    @classmethod
    def normalize_datetime(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


# 嵌套字段 -> 列名
_SALARY_COLUMNS = {
    "min": "salary_min",
    "max": "salary_max",
    "currency": "salary_currency",
    "period": "salary_period",
    "is_negotiable": "salary_negotiable",
}


def flatten_job_fields(data: dict) -> dict:
    """把 model_dump() 得到的嵌套结构展开为 Job 列"""
    flat = dict(data)
    location = flat.pop("location", None) or {}
    schedule = flat.pop("schedule", None) or {}
    salary = flat.pop("salary", None) or {}

    flat.update(location)
    flat.update(schedule)
    for key, value in salary.items():
        flat[_SALARY_COLUMNS[key]] = value
    return flat


# ========== 响应 ==========

class CompanyBrief(BaseSchema):
    """企业公开简介"""

    id: str
    company_name: Optional[str] = None
    verified: bool = False
    city: Optional[str] = None


class CompanyContact(CompanyBrief):
    """企业联系信息（职位详情、学生的申请列表）"""

    contact_name: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    business_type: Optional[str] = None


class JobPublicResponse(BaseSchema):
    """职位公开信息，不含内部字段"""

    id: str
    title: str
    description: str
    requirements: List[str] = []
    responsibilities: List[str] = []
    benefits: List[str] = []
    tags: List[str] = []

    location: JobLocation
    employment_type: str
    schedule: JobSchedule
    salary: JobSalary
    category: str

    application_deadline: Optional[datetime] = None
    start_date: Optional[datetime] = None
    views: int = 0
    is_featured: bool = False
    requires_cover_letter: bool = False

    created_at: datetime
    updated_at: datetime

    company: Optional[CompanyContact] = None
    has_applied: Optional[bool] = None


class JobOwnerResponse(JobPublicResponse):
    """职位完整信息（发布企业可见）"""

    company_id: str
    status: str
    applications_count: int = 0
    allow_applications: bool = True
    max_applications: int = 100
