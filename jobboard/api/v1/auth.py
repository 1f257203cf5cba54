"""
认证 API 路由
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.auth import get_current_user
from jobboard.core.database import get_db
from jobboard.core.response import success_response, ResponseModel
from jobboard.crud import user_crud
from jobboard.models.user import User
from jobboard.schemas.auth import RegisterRequest, LoginRequest, ChangePasswordRequest
from jobboard.schemas.user import ProfileUpdate
from jobboard.services import auth_service, user_service

router = APIRouter()


@router.post("/register", summary="注册", response_model=ResponseModel, status_code=201)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    注册学生或企业账号，返回访问令牌
    """
    user, token = await auth_service.register(db, data)
    return success_response(
        data={"token": token, "user": user_service.user_view(user)},
        message="User registered successfully",
        code=201,
    )


@router.post("/login", summary="登录", response_model=ResponseModel)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    user, token = await auth_service.login(db, data)
    return success_response(
        data={
            "token": token,
            "user": user_service.user_view(user),
            "profile_complete": user.profile_complete,
        },
        message="Login successful",
    )


@router.get("/profile", summary="获取当前用户资料", response_model=ResponseModel)
async def get_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    获取当前用户资料，同时刷新最后登录时间
    """
    await user_crud.touch_last_login(db, user=user)
    return success_response(data={"user": user_service.user_view(user)})


@router.put("/profile", summary="更新当前用户资料", response_model=ResponseModel)
async def update_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    部分更新资料，只应用当前角色对应的字段
    """
    user = await user_service.update_profile(db, user, data)
    return success_response(
        data={"user": user_service.user_view(user)},
        message="Profile updated successfully",
    )


@router.put("/change-password", summary="修改密码", response_model=ResponseModel)
async def change_password(
    data: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.change_password(db, user, data)
    return success_response(message="Password changed successfully")


@router.post("/verify-token", summary="校验令牌", response_model=ResponseModel)
async def verify_token(user: User = Depends(get_current_user)):
    return success_response(
        data={"valid": True, "user": user_service.user_view(user)},
        message="Token is valid",
    )
