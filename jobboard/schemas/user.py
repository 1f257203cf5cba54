"""
用户与资料 Schema
"""
from datetime import datetime
from typing import Any, List, Optional
from pydantic import EmailStr, Field, field_validator

from jobboard.models.user import Availability
from .base import BaseSchema, RequestSchema


# ========== 请求 ==========

class ExperienceItem(RequestSchema):
    """工作经历条目"""

    company: Optional[str] = None
    position: Optional[str] = None
    duration: Optional[str] = None
    description: Optional[str] = None


class ProfileUpdate(RequestSchema):
    """
    资料更新请求

    字段覆盖学生和企业两种资料，服务层只应用当前角色对应的字段
    """

    # 学生
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=16, le=35)
    career: Optional[str] = Field(None, max_length=150)
    university: Optional[str] = Field(None, max_length=150)
    semester: Optional[str] = Field(None, max_length=50)
    skills: Optional[List[str]] = None
    experience: Optional[List[ExperienceItem]] = None
    availability: Optional[Availability] = None
    preferred_location: Optional[str] = Field(None, max_length=150)

    # 企业
    company_name: Optional[str] = Field(None, max_length=150)
    contact_name: Optional[str] = Field(None, max_length=150)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    business_type: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return [s.strip() for s in v if s and s.strip()]


class SettingsUpdate(RequestSchema):
    """账号设置更新"""

    email: Optional[EmailStr] = None
    notifications: Optional[bool] = None
    is_active: Optional[bool] = Field(None, description="仅企业账号可修改")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


# ========== 响应 ==========

class StudentProfileResponse(BaseSchema):
    """学生资料"""

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
    preferred_location: Optional[str] = None


class BusinessProfileResponse(BaseSchema):
    """企业资料"""

    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    business_type: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    verified: bool = False


class UserResponse(BaseSchema):
    """当前用户（含私有字段）"""

    id: str
    email: str
    role: str
    is_active: bool
    email_verified: bool
    notifications: bool = True
    last_login: Optional[datetime] = None
    created_at: datetime
    full_name: str = ""
    profile_complete: bool = False
    profile: Optional[Any] = None


class PublicProfileResponse(BaseSchema):
    """公开资料，不含邮箱与密码"""

    id: str
    role: str
    full_name: str = ""
    profile: Optional[StudentProfileResponse] = None
    company_name: Optional[str] = None
    business_type: Optional[str] = None
    city: Optional[str] = None
    verified: Optional[bool] = None
