"""
认证相关 Schema
"""
from typing import Optional
from pydantic import EmailStr, Field, field_validator, model_validator

from jobboard.models.user import UserRole
from .base import RequestSchema


class RegisterRequest(RequestSchema):
    """注册请求"""

    email: EmailStr
    password: str = Field(..., min_length=6, description="密码（至少 6 位）")
    confirm_password: str = Field(..., description="确认密码")
    role: UserRole

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(RequestSchema):
    """登录请求"""

    email: EmailStr
    password: str = Field(..., min_length=1, description="密码")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class ChangePasswordRequest(RequestSchema):
    """修改密码请求"""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
    confirm_password: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.new_password:
            raise ValueError("Passwords do not match")
        return self
