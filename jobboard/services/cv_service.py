"""
CV 文件服务

文件存放在 <upload_dir>/cvs/ 下，资料中只记录文件名
"""
from pathlib import Path
from fastapi import UploadFile
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.config import settings
from jobboard.core.exceptions import NotFoundException, ForbiddenException
from jobboard.crud import user_crud, application_crud
from jobboard.models.user import User
from jobboard.utils.file_upload import read_pdf_upload, cv_filename, safe_child


def _remove_file(filename: str) -> None:
    if not filename:
        return
    path = settings.cv_dir / Path(filename).name
    if path.exists():
        path.unlink()
        logger.info(f"CV file removed: {path}")


async def store_cv(db: AsyncSession, user: User, file: UploadFile) -> dict:
    """保存新 CV 并替换旧文件"""
    content = await read_pdf_upload(file, settings.max_file_size)

    settings.cv_dir.mkdir(parents=True, exist_ok=True)
    filename = cv_filename(user.id)
    path = settings.cv_dir / filename
    path.write_bytes(content)

    previous = user.student_profile.cv_path if user.student_profile else ""
    try:
        await user_crud.update_profile(db, user=user, data={"cv_path": filename})
    except Exception:
        path.unlink(missing_ok=True)
        raise
    if previous and previous != filename:
        _remove_file(previous)

    logger.info(f"CV stored: user={user.id} file={filename} size={len(content)}")
    return {"cv_path": filename, "size": len(content)}


async def resolve_cv(db: AsyncSession, viewer: User, filename: str) -> Path:
    """
    CV 下载权限校验

    学生本人，或收到过该学生申请的企业
    """
    path = safe_child(settings.cv_dir, filename)
    owner = await user_crud.get_by_cv(db, filename)
    if owner is None or not path.exists():
        raise NotFoundException("CV not found")

    if viewer.id != owner.id:
        if not viewer.is_business or not await application_crud.has_application_from(db, viewer.id, owner.id):
            raise ForbiddenException("Access denied")
    return path


async def delete_cv(db: AsyncSession, user: User) -> None:
    current = user.student_profile.cv_path if user.student_profile else ""
    if not current:
        raise NotFoundException("No CV to delete")

    await user_crud.update_profile(db, user=user, data={"cv_path": ""})
    _remove_file(current)
    logger.info(f"CV deleted: user={user.id}")
