"""
数据导出 API 路由

返回 xlsx 附件
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.auth import require_role
from jobboard.core.database import get_db
from jobboard.models.user import User, UserRole
from jobboard.services import export_service

router = APIRouter()


async def _xlsx_response(db: AsyncSession, kind: str) -> Response:
    content = await export_service.export(db, kind)
    return Response(
        content=content,
        media_type=export_service.XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename={export_service.export_filename(kind)}"
        },
    )


@router.get("/users", summary="导出用户")
async def export_users(
    _: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    return await _xlsx_response(db, "users")


@router.get("/jobs", summary="导出职位")
async def export_jobs(
    _: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    return await _xlsx_response(db, "jobs")


@router.get("/applications", summary="导出申请")
async def export_applications(
    _: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    return await _xlsx_response(db, "applications")


@router.get("/all", summary="导出全部（多 sheet）")
async def export_all(
    _: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    return await _xlsx_response(db, "all")
