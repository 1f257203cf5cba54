"""
职位申请 Schema
"""
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from jobboard.models.application import ApplicationStatus, ApplicationSource
from .base import BaseSchema, RequestSchema
from .job import CompanyContact


# ========== 请求 ==========

class ApplicationCreate(RequestSchema):
    """提交申请"""

    job_id: str = Field(..., min_length=1, description="职位ID")
    cover_letter: Optional[str] = Field(None, max_length=1000, description="求职信")
    source: ApplicationSource = ApplicationSource.WEBSITE


class ApplicationStatusUpdate(RequestSchema):
    """企业更新申请状态"""

    status: ApplicationStatus
    notes: Optional[str] = Field(None, max_length=500, description="企业备注")


# ========== 响应 ==========

class JobBrief(BaseSchema):
    id: str
    title: str
    city: Optional[str] = None
    state: Optional[str] = None
    employment_type: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: Optional[str] = None
    salary_period: Optional[str] = None


class ApplicantBrief(BaseSchema):
    """申请学生简介（企业可见）"""

    id: str
    email: str
    full_name: str = ""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    career: Optional[str] = None
    university: Optional[str] = None
    semester: Optional[str] = None
    skills: List[str] = []
    experience: List[dict] = []
    cv_path: str = ""
    availability: Optional[str] = None


class ApplicationResponse(BaseSchema):
    """申请详情"""

    id: str
    job_id: str
    applicant_id: str
    company_id: str
    status: str
    cover_letter: Optional[str] = None
    employer_notes: Optional[str] = None
    source: str

    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    shortlisted_at: Optional[datetime] = None
    interview_scheduled_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    withdrawn_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    job: Optional[JobBrief] = None
    company: Optional[CompanyContact] = None
    applicant: Optional[ApplicantBrief] = None


class ApplicationStats(BaseSchema):
    """按状态统计"""

    total: int = 0
    pending: int = 0
    reviewing: int = 0
    shortlisted: int = 0
    interview: int = 0
    accepted: int = 0
    rejected: int = 0
    withdrawn: int = 0
