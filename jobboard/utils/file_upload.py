"""
文件上传工具

CV 只接受 PDF：
- Content-Type 必须为 application/pdf
- 内容必须能被 PyPDF2 解析
- 大小不超过 settings.max_file_size
"""
import io
import uuid
from pathlib import Path
from fastapi import UploadFile
from PyPDF2 import PdfReader

from jobboard.core.exceptions import BadRequestException, PayloadTooLargeException

PDF_CONTENT_TYPES = {"application/pdf"}


def validate_pdf_bytes(content: bytes) -> int:
    """
    校验 PDF 内容

    Returns:
        页数
    """
    try:
        reader = PdfReader(io.BytesIO(content))
        return len(reader.pages)
    except Exception as e:
        raise BadRequestException(f"Invalid PDF file: {e}")


async def read_pdf_upload(file: UploadFile, max_size: int) -> bytes:
    """读取并校验上传的 PDF，返回文件内容"""
    if file is None or not file.filename:
        raise BadRequestException("No file uploaded")
    if (file.content_type or "").lower() not in PDF_CONTENT_TYPES:
        raise BadRequestException("Only PDF files are allowed")

    # 多读 1 字节用于判断是否超限
    content = await file.read(max_size + 1)
    if len(content) > max_size:
        raise PayloadTooLargeException(
            f"File too large. Maximum size: {max_size // (1024 * 1024)}MB"
        )
    if not content:
        raise BadRequestException("Uploaded file is empty")

    validate_pdf_bytes(content)
    return content


def cv_filename(user_id: str) -> str:
    """cv-<用户ID>-<唯一后缀>.pdf"""
    return f"cv-{user_id}-{uuid.uuid4().hex}.pdf"


def safe_child(directory: Path, filename: str) -> Path:
    """拼接目录下的文件路径，拒绝路径穿越"""
    name = Path(filename).name
    if not name or name != filename:
        raise BadRequestException("Invalid filename")
    return directory / name
