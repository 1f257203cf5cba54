"""
服务层模块

路由层只做参数解析和权限依赖，业务逻辑集中在此
"""
from . import (
    auth_service,
    user_service,
    job_service,
    application_service,
    application_workflow,
    dashboard_service,
    export_service,
    cv_service,
)

__all__ = [
    "auth_service",
    "user_service",
    "job_service",
    "application_service",
    "application_workflow",
    "dashboard_service",
    "export_service",
    "cv_service",
]
