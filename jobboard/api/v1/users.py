"""
用户 API 路由

CV 上传下载、公开资料、账号设置、学生搜索、仪表盘统计
"""
from typing import Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.auth import get_current_user, require_role
from jobboard.core.database import get_db
from jobboard.core.response import success_response, ResponseModel
from jobboard.models.user import User, UserRole
from jobboard.schemas.user import SettingsUpdate
from jobboard.services import cv_service, user_service, dashboard_service

router = APIRouter()


@router.post("/upload-cv", summary="上传 CV", response_model=ResponseModel)
async def upload_cv(
    cv: UploadFile = File(..., description="PDF 文件"),
    user: User = Depends(require_role(UserRole.STUDENT)),
    db: AsyncSession = Depends(get_db),
):
    """
    上传 PDF 格式的 CV，替换之前的文件
    """
    data = await cv_service.store_cv(db, user, cv)
    return success_response(data=data, message="CV uploaded successfully")


@router.get("/cv/{filename}", summary="下载 CV")
async def download_cv(
    filename: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    学生本人或收到过该学生申请的企业可下载
    """
    path = await cv_service.resolve_cv(db, user, filename)
    return FileResponse(path, media_type="application/pdf", filename=path.name)


@router.delete("/cv", summary="删除 CV", response_model=ResponseModel)
async def delete_cv(
    user: User = Depends(require_role(UserRole.STUDENT)),
    db: AsyncSession = Depends(get_db),
):
    await cv_service.delete_cv(db, user)
    return success_response(message="CV deleted successfully")


@router.get("/profile/{user_id}", summary="公开资料", response_model=ResponseModel)
async def public_profile(
    user_id: str,
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return success_response(data=await user_service.get_public_profile(db, user_id))


@router.put("/settings", summary="更新账号设置", response_model=ResponseModel)
async def update_settings(
    data: SettingsUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.update_settings(db, user, data)
    return success_response(
        data={"user": user_service.user_view(user)},
        message="Settings updated successfully",
    )


@router.post("/deactivate", summary="停用账号", response_model=ResponseModel)
async def deactivate_account(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await user_service.deactivate(db, user)
    return success_response(message="Account deactivated successfully")


@router.get("/search", summary="搜索学生", response_model=ResponseModel)
async def search_students(
    q: Optional[str] = Query(None, description="姓名 / 专业 / 学校关键字"),
    career: Optional[str] = Query(None, description="专业"),
    skills: Optional[str] = Query(None, description="技能，逗号分隔（任一匹配）"),
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(20, ge=1, le=50, description="每页数量"),
    user: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    skill_list = [s.strip() for s in skills.split(",") if s.strip()] if skills else None
    data = await user_service.search_students(
        db, q=q, career=career, skills=skill_list, page=page, limit=limit
    )
    return success_response(data=data)


@router.get("/dashboard-stats", summary="仪表盘统计", response_model=ResponseModel)
async def dashboard_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return success_response(data=await dashboard_service.dashboard_stats(db, user))
