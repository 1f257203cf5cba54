"""
异常处理模块

定义业务异常和全局异常处理器
"""
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger

from .response import error_response


class AppException(Exception):
    """应用基础异常"""

    def __init__(
        self,
        message: str = "Internal server error",
        code: int = 500,
        data: dict = None
    ):
        self.message = message
        self.code = code
        self.data = data
        super().__init__(self.message)


class NotFoundException(AppException):
    """资源不存在异常"""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message=message, code=404)


class BadRequestException(AppException):
    """请求参数错误异常"""

    def __init__(self, message: str = "Bad request", data: dict = None):
        super().__init__(message=message, code=400, data=data)


class ConflictException(AppException):
    """
    资源冲突异常

    重复邮箱、重复投递等冲突对外统一返回 400
    """

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message=message, code=400)


class UnauthorizedException(AppException):
    """未认证异常（缺少/无效/过期的令牌）"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, code=401)


class ForbiddenException(AppException):
    """无权限异常（角色或归属不匹配）"""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message=message, code=403)


class PayloadTooLargeException(AppException):
    """上传内容过大"""

    def __init__(self, message: str = "File too large"):
        super().__init__(message=message, code=413)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """应用异常处理器"""
    logger.warning(f"AppException: {exc.message} | Path: {request.url.path}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.code == 401 else None
    return JSONResponse(
        status_code=exc.code,
        content=error_response(message=exc.message, code=exc.code, data=exc.data),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP 异常处理器"""
    logger.warning(f"HTTPException: {exc.detail} | Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(message=str(exc.detail), code=exc.status_code)
    )


def format_validation_errors(errors: list) -> list:
    """将 pydantic 错误转换为字段级错误列表"""
    formatted = []
    for error in errors:
        # 去掉 body/query/path 前缀，只保留字段路径
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header", "form"):
            loc = loc[1:]
        formatted.append({
            "field": ".".join(loc) or None,
            "message": error.get("msg", "Invalid value"),
        })
    return formatted


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """请求验证异常处理器"""
    errors = format_validation_errors(exc.errors())
    message = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
    logger.warning(f"ValidationError: {message} | Path: {request.url.path}")

    return JSONResponse(
        status_code=400,
        content=error_response(
            message="Invalid input data",
            code=400,
            data={"errors": errors}
        )
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """通用异常处理器"""
    logger.exception(f"Unhandled Exception: {exc} | Path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=error_response(message="Internal server error", code=500)
    )
