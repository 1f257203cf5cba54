"""
API 路由模块
"""
from fastapi import APIRouter

from .v1 import auth, jobs, applications, users, export


def build_api_router() -> APIRouter:
    """
    组装完整路由表

    返回的路由由 create_app() 挂载到 /api/v1 下
    """
    api_router = APIRouter()

    # 注册各模块路由
    api_router.include_router(
        auth.router,
        prefix="/auth",
        tags=["认证"]
    )
    api_router.include_router(
        jobs.router,
        prefix="/jobs",
        tags=["职位"]
    )
    api_router.include_router(
        applications.router,
        prefix="/applications",
        tags=["职位申请"]
    )
    api_router.include_router(
        users.router,
        prefix="/users",
        tags=["用户"]
    )
    api_router.include_router(
        export.router,
        prefix="/export",
        tags=["数据导出"]
    )
    return api_router
