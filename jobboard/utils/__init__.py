"""
工具模块
"""
from .file_upload import read_pdf_upload, validate_pdf_bytes, cv_filename, safe_child

__all__ = [
    "read_pdf_upload",
    "validate_pdf_bytes",
    "cv_filename",
    "safe_child",
]
