"""Error response models (OpenAPI documentation only)."""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str = Field(..., description="错误代码，如 NOT_FOUND / INTERNAL")
    message: str = Field(..., description="错误信息")


class ErrorResponse(BaseModel):
    """``{"error": {"code": ..., "message": ...}}``"""

    error: ErrorDetail
