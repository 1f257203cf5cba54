"""
Pydantic Schema 模块
"""
from .base import BaseSchema, RequestSchema, to_naive_utc
from .auth import RegisterRequest, LoginRequest, ChangePasswordRequest
from .user import (
    ExperienceItem, ProfileUpdate, SettingsUpdate,
    StudentProfileResponse, BusinessProfileResponse,
    UserResponse, PublicProfileResponse,
)
from .job import (
    JobLocation, JobLocationUpdate, JobSchedule, JobSalary,
    JobCreate, JobUpdate, flatten_job_fields,
    CompanyBrief, CompanyContact, JobPublicResponse, JobOwnerResponse,
)
from .application import (
    ApplicationCreate, ApplicationStatusUpdate,
    JobBrief, ApplicantBrief, ApplicationResponse, ApplicationStats,
)

__all__ = [
    # Base
    "BaseSchema",
    "RequestSchema",
    "to_naive_utc",
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "ChangePasswordRequest",
    # User
    "ExperienceItem",
    "ProfileUpdate",
    "SettingsUpdate",
    "StudentProfileResponse",
    "BusinessProfileResponse",
    "UserResponse",
    "PublicProfileResponse",
    # Job
    "JobLocation",
    "JobLocationUpdate",
    "JobSchedule",
    "JobSalary",
    "JobCreate",
    "JobUpdate",
    "flatten_job_fields",
    "CompanyBrief",
    "CompanyContact",
    "JobPublicResponse",
    "JobOwnerResponse",
    # Application
    "ApplicationCreate",
    "ApplicationStatusUpdate",
    "JobBrief",
    "ApplicantBrief",
    "ApplicationResponse",
    "ApplicationStats",
]
