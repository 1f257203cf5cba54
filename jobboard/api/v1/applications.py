"""
职位申请 API 路由
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.auth import get_current_user, require_role
from jobboard.core.database import get_db
from jobboard.core.response import success_response, ResponseModel
from jobboard.models.application import ApplicationStatus
from jobboard.models.user import User, UserRole
from jobboard.schemas.application import ApplicationCreate, ApplicationStatusUpdate
from jobboard.services import application_service

router = APIRouter()


@router.post("", summary="投递职位", response_model=ResponseModel, status_code=201)
async def create_application(
    data: ApplicationCreate,
    request: Request,
    user: User = Depends(require_role(UserRole.STUDENT, complete_profile=True)),
    db: AsyncSession = Depends(get_db),
):
    """
    学生投递职位，需资料完整
    """
    ip_address = request.client.host if request.client else None
    application = await application_service.apply(db, user, data, ip_address)
    return success_response(
        data=application,
        message="Application submitted successfully",
        code=201,
    )


@router.get("/my-applications", summary="我的申请", response_model=ResponseModel)
async def my_applications(
    status: Optional[ApplicationStatus] = Query(None, description="申请状态"),
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(10, ge=1, le=50, description="每页数量"),
    user: User = Depends(require_role(UserRole.STUDENT)),
    db: AsyncSession = Depends(get_db),
):
    data = await application_service.list_for_applicant(
        db, user, status=status.value if status else None, page=page, limit=limit
    )
    return success_response(data=data)


@router.get("/job/{job_id}", summary="职位收到的申请", response_model=ResponseModel)
async def job_applications(
    job_id: str,
    status: Optional[ApplicationStatus] = Query(None, description="申请状态"),
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(10, ge=1, le=50, description="每页数量"),
    user: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    """
    职位发布企业查看该职位的申请
    """
    data = await application_service.list_for_job(
        db, user, job_id, status=status.value if status else None, page=page, limit=limit
    )
    return success_response(data=data)


@router.get("/all", summary="企业收到的全部申请", response_model=ResponseModel)
async def company_applications(
    status: Optional[ApplicationStatus] = Query(None, description="申请状态"),
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(10, ge=1, le=50, description="每页数量"),
    user: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    data = await application_service.list_for_company(
        db, user, status=status.value if status else None, page=page, limit=limit
    )
    return success_response(data=data)


@router.get("/stats", summary="申请统计", response_model=ResponseModel)
async def application_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return success_response(data=await application_service.stats(db, user))


@router.put("/{application_id}/status", summary="更新申请状态", response_model=ResponseModel)
async def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    user: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    """
    企业推进申请状态（只能向前），重复提交相同状态只更新备注
    """
    application = await application_service.update_status(db, user, application_id, data)
    return success_response(data=application, message="Application status updated successfully")


@router.put("/{application_id}/withdraw", summary="撤回申请", response_model=ResponseModel)
async def withdraw_application(
    application_id: str,
    user: User = Depends(require_role(UserRole.STUDENT)),
    db: AsyncSession = Depends(get_db),
):
    application = await application_service.withdraw(db, user, application_id)
    return success_response(data=application, message="Application withdrawn successfully")


@router.delete("/{application_id}", summary="删除申请", response_model=ResponseModel)
async def delete_application(
    application_id: str,
    user: User = Depends(require_role(UserRole.STUDENT)),
    db: AsyncSession = Depends(get_db),
):
    await application_service.delete(db, user, application_id)
    return success_response(message="Application deleted successfully")
