"""
CRUD 操作模块
"""
from .user import user_crud
from .job import job_crud, open_job_conditions
from .application import application_crud

__all__ = [
    "user_crud",
    "job_crud",
    "open_job_conditions",
    "application_crud",
]
