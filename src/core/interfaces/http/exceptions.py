"""HTTP exception handlers.

领域异常通过 http_status_code / error_code 类属性决定响应，
响应体统一为 ``{"error": {"code": ..., "message": ...}}``。
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from src.core.domain.exceptions import DomainException
from src.core.interfaces.http.response import ErrorDetail, ErrorResponse


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def domain_exception_handler(
    _request: Request, exc: DomainException
) -> JSONResponse:
    """Handle domain exceptions."""
    status_code = getattr(exc, "http_status_code", status.HTTP_400_BAD_REQUEST)
    error_code = getattr(exc, "error_code", "DOMAIN_ERROR")

    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        # 原始异常只进日志，不返回给调用方
        cause = exc.__cause__
        logger.error(
            f"{type(exc).__name__}: {exc.message}"
            + (f" (cause: {cause!r})" if cause else "")
        )

    return _error_response(status_code, error_code, exc.message)


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc!r}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal error occurred",
    )
