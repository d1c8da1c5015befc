"""Domain exceptions.

HTTP 映射由异常类自身声明（http_status_code / error_code），
interfaces 层的 handler 只负责读取这两个属性并生成响应体。
"""

from fastapi import status


class DomainException(Exception):
    """Root of every error that may reach an API caller."""

    http_status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        super().__init__(message)
        self.message = message


class EntityNotFoundError(DomainException):
    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str | None = None):
        if entity_id:
            super().__init__(f"{entity_type} with id '{entity_id}' not found")
        else:
            super().__init__(f"{entity_type} not found")


class InternalError(DomainException):
    """Raised when an infrastructure dependency fails.

    message 会返回给调用方，因此不应包含内部诊断信息；
    原始异常通过 ``raise ... from exc`` 保留在 __cause__ 中用于日志。
    """

    http_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL"
