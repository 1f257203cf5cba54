"""
职位 API 路由

固定路径（/featured、/categories、/my-jobs）必须注册在 /{job_id} 之前
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.auth import get_optional_user, require_role
from jobboard.core.database import get_db
from jobboard.core.response import success_response, ResponseModel
from jobboard.models.job import JobCategory, EmploymentType, JobStatus
from jobboard.models.user import User, UserRole
from jobboard.schemas.job import JobCreate, JobUpdate
from jobboard.services import job_service

router = APIRouter()


@router.get("", summary="搜索职位", response_model=ResponseModel)
async def list_jobs(
    search: Optional[str] = Query(None, description="标题 / 描述 / 城市关键字"),
    city: Optional[str] = Query(None, description="城市（模糊匹配）"),
    state: Optional[str] = Query(None, description="州 / 省（模糊匹配）"),
    category: Optional[JobCategory] = Query(None, description="分类"),
    employment_type: Optional[EmploymentType] = Query(None, description="雇佣类型"),
    remote: Optional[bool] = Query(None, description="是否远程"),
    min_salary: Optional[float] = Query(None, ge=0, description="最低薪资"),
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(12, ge=1, le=50, description="每页数量"),
    db: AsyncSession = Depends(get_db),
):
    """
    公开职位列表：只含 active、允许投递且未过截止日期的职位，推荐优先、最新优先
    """
    data = await job_service.search_jobs(
        db,
        page=page,
        limit=limit,
        search=search,
        city=city,
        state=state,
        category=category.value if category else None,
        employment_type=employment_type.value if employment_type else None,
        remote=remote,
        min_salary=min_salary,
    )
    return success_response(data=data)


@router.get("/featured", summary="推荐职位", response_model=ResponseModel)
async def featured_jobs(db: AsyncSession = Depends(get_db)):
    return success_response(data=await job_service.featured_jobs(db))


@router.get("/categories", summary="职位分类统计", response_model=ResponseModel)
async def job_categories(db: AsyncSession = Depends(get_db)):
    return success_response(data=await job_service.job_categories(db))


@router.get("/my-jobs", summary="我发布的职位", response_model=ResponseModel)
async def my_jobs(
    status: Optional[JobStatus] = Query(None, description="职位状态"),
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(10, ge=1, le=50, description="每页数量"),
    user: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    data = await job_service.company_jobs(
        db, user, status=status.value if status else None, page=page, limit=limit
    )
    return success_response(data=data)


@router.get("/{job_id}", summary="职位详情", response_model=ResponseModel)
async def get_job(
    job_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """
    职位详情，浏览量 +1；携带学生令牌时返回 has_applied
    """
    return success_response(data=await job_service.job_detail(db, job_id, viewer))


@router.post("", summary="发布职位", response_model=ResponseModel, status_code=201)
async def create_job(
    data: JobCreate,
    user: User = Depends(require_role(UserRole.BUSINESS, complete_profile=True)),
    db: AsyncSession = Depends(get_db),
):
    job = await job_service.create_job(db, user, data)
    return success_response(data=job, message="Job created successfully", code=201)


@router.put("/{job_id}", summary="更新职位", response_model=ResponseModel)
async def update_job(
    job_id: str,
    data: JobUpdate,
    user: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    job = await job_service.update_job(db, user, job_id, data)
    return success_response(data=job, message="Job updated successfully")


@router.delete("/{job_id}", summary="删除职位", response_model=ResponseModel)
async def delete_job(
    job_id: str,
    user: User = Depends(require_role(UserRole.BUSINESS)),
    db: AsyncSession = Depends(get_db),
):
    """
    删除职位（同时删除其全部申请）
    """
    await job_service.delete_job(db, user, job_id)
    return success_response(message="Job deleted successfully")
