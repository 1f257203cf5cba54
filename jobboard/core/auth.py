"""
认证模块

提供:
- bcrypt 密码哈希
- JWT 令牌签发与校验
- 路由依赖：当前用户、可选用户、角色校验、资料完整性校验
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.crud import user_crud
from jobboard.models.user import User
from .config import settings
from .database import get_db
from .exceptions import UnauthorizedException, ForbiddenException, BadRequestException

# 密码哈希
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

# Bearer 令牌提取（缺失时由 get_current_user 返回统一的 401）
bearer_scheme = HTTPBearer(auto_error=False)


# ========== 密码 ==========

def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# ========== 令牌 ==========

def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """签发访问令牌，sub 为用户 ID"""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {"sub": user_id, "iat": now, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """
    解码并校验令牌

    Raises:
        UnauthorizedException: 令牌过期或无效
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise UnauthorizedException("Token expired")
    except JWTError:
        raise UnauthorizedException("Invalid token")

    if not payload.get("sub"):
        raise UnauthorizedException("Invalid token")
    return payload


async def load_user_from_token(db: AsyncSession, token: str) -> User:
    """令牌 -> 启用中的用户"""
    payload = decode_token(token)
    user = await user_crud.get(db, payload["sub"])
    if user is None:
        raise UnauthorizedException("Invalid token")
    if not user.is_active:
        raise UnauthorizedException("Account deactivated")
    return user


# ========== 路由依赖 ==========

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    当前登录用户

    使用方式:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)):
            ...
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Access token required")
    return await load_user_from_token(db, credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """可选登录：令牌缺失或无效时返回 None"""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await load_user_from_token(db, credentials.credentials)
    except UnauthorizedException:
        return None


def ensure_complete_profile(user: User) -> None:
    """资料不完整时拒绝，并返回缺失字段"""
    missing = user.missing_profile_fields()
    if missing:
        raise BadRequestException(
            "Please complete your profile first",
            data={"missing_fields": missing},
        )


def ensure_owner(owner_id: str, user: User, message: str = "Access denied") -> None:
    """资源归属校验"""
    if owner_id != user.id:
        raise ForbiddenException(message)


def require_role(*roles: str, complete_profile: bool = False):
    """
    角色校验依赖工厂

    使用方式:
        @router.post("/jobs")
        async def create(user: User = Depends(require_role("business", complete_profile=True))):
            ...
    """
    allowed = {getattr(r, "value", r) for r in roles}

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise ForbiddenException("Insufficient permissions")
        if complete_profile:
            ensure_complete_profile(user)
        return user

    return dependency
