"""
用户模型模块

一个 User 对应一个账号，按角色挂载一份资料：
- student  -> StudentProfile
- business -> BusinessProfile
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class UserRole(str, Enum):
    """账号角色"""
    STUDENT = "student"
    BUSINESS = "business"


class Availability(str, Enum):
    """学生可工作时段"""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    WEEKEND = "weekend"
    FLEXIBLE = "flexible"


# 资料完整性所需字段（顺序即返回顺序）
STUDENT_REQUIRED_FIELDS = ("first_name", "last_name", "age", "career")
BUSINESS_REQUIRED_FIELDS = ("company_name", "contact_name", "phone", "address", "city")


class User(BaseModel):
    """
    用户模型

    关联关系:
    - 1:1 -> StudentProfile (仅学生)
    - 1:1 -> BusinessProfile (仅企业)
    """
    __tablename__ = "users"

    # ========== 账号信息 ==========
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="邮箱（小写）"
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="密码哈希"
    )
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
        comment="角色"
    )

    # ========== 账号状态 ==========
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, comment="是否启用")
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, comment="邮箱是否验证")
    notifications: Mapped[bool] = mapped_column(Boolean, default=True, comment="是否接收通知")
    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True,
        comment="最后登录时间"
    )

    # ========== 关联关系 ==========
    student_profile: Mapped[Optional["StudentProfile"]] = relationship(
        "StudentProfile",
        back_populates="user",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    business_profile: Mapped[Optional["BusinessProfile"]] = relationship(
        "BusinessProfile",
        back_populates="user",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT.value

    @property
    def is_business(self) -> bool:
        return self.role == UserRole.BUSINESS.value

    @property
    def profile(self):
        """当前角色对应的资料"""
        return self.student_profile if self.is_student else self.business_profile

    @property
    def full_name(self) -> str:
        """学生返回姓名，企业返回公司名"""
        if self.is_student:
            p = self.student_profile
            if p is None:
                return ""
            return f"{p.first_name or ''} {p.last_name or ''}".strip()
        p = self.business_profile
        return (p.company_name or "") if p else ""

    def missing_profile_fields(self) -> List[str]:
        """返回资料中缺失的必填字段"""
        required = STUDENT_REQUIRED_FIELDS if self.is_student else BUSINESS_REQUIRED_FIELDS
        profile = self.profile
        if profile is None:
            return list(required)
        return [name for name in required if not getattr(profile, name)]

    @property
    def profile_complete(self) -> bool:
        return not self.missing_profile_fields()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class StudentProfile(BaseModel):
    """学生资料"""
    __tablename__ = "student_profiles"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        comment="用户ID"
    )

    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    career: Mapped[Optional[str]] = mapped_column(String(150), nullable=True, index=True, comment="专业")
    university: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    semester: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    skills: Mapped[List[str]] = mapped_column(JSON, default=list, comment="技能列表")
    experience: Mapped[List[dict]] = mapped_column(JSON, default=list, comment="工作经历")
    cv_path: Mapped[str] = mapped_column(String(500), default="", comment="CV 文件路径")
    availability: Mapped[str] = mapped_column(
        String(20),
        default=Availability.FLEXIBLE.value,
        comment="可工作时段"
    )
    preferred_location: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="student_profile")


class BusinessProfile(BaseModel):
    """企业资料"""
    __tablename__ = "business_profiles"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        comment="用户ID"
    )

    company_name: Mapped[Optional[str]] = mapped_column(String(150), nullable=True, index=True)
    contact_name: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    business_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, comment="是否认证")

    user: Mapped["User"] = relationship("User", back_populates="business_profile")
