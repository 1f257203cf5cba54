"""
认证服务

注册、登录、修改密码
"""
from typing import Tuple
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.auth import hash_password, verify_password, create_access_token
from jobboard.core.exceptions import ConflictException, UnauthorizedException, BadRequestException
from jobboard.crud import user_crud
from jobboard.models.user import User
from jobboard.schemas.auth import RegisterRequest, LoginRequest, ChangePasswordRequest


async def register(db: AsyncSession, data: RegisterRequest) -> Tuple[User, str]:
    """
    注册新账号

    Returns:
        (用户, 访问令牌)
    """
    if await user_crud.get_by_email(db, data.email):
        raise ConflictException("An account with this email already exists")

    try:
        user = await user_crud.create_with_profile(
            db,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
        )
    except IntegrityError:
        await db.rollback()
        raise ConflictException("An account with this email already exists")

    logger.info(f"User registered: {user.id} role={user.role}")
    return user, create_access_token(user.id)


async def login(db: AsyncSession, data: LoginRequest) -> Tuple[User, str]:
    user = await user_crud.get_by_email(db, data.email)
    if user is None or not verify_password(data.password, user.password_hash):
        raise UnauthorizedException("Invalid credentials")
    if not user.is_active:
        raise UnauthorizedException("Account deactivated")

    await user_crud.touch_last_login(db, user=user)
    logger.info(f"User logged in: {user.id}")
    return user, create_access_token(user.id)


async def change_password(db: AsyncSession, user: User, data: ChangePasswordRequest) -> None:
    if not verify_password(data.current_password, user.password_hash):
        raise BadRequestException("Current password is incorrect")

    user.password_hash = hash_password(data.new_password)
    await db.flush()
    logger.info(f"Password changed: {user.id}")
