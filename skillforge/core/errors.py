from __future__ import annotations

from typing import Any

from fastapi import status

from skillforge.schemas.common import ErrorDetail, ErrorResponse


class ApiError(Exception):
    """Error that maps one-to-one onto an ``{success: false, error}`` response."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "BAD_REQUEST",
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


def bad_request(message: str, code: str = "BAD_REQUEST") -> ApiError:
    return ApiError(message, code=code, status_code=status.HTTP_400_BAD_REQUEST)


def not_found(message: str, code: str = "NOT_FOUND") -> ApiError:
    return ApiError(message, code=code, status_code=status.HTTP_404_NOT_FOUND)


def server_error(message: str, code: str = "SERVER_ERROR") -> ApiError:
    return ApiError(message, code=code, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_body(code: str, message: str) -> dict[str, Any]:
    return ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump()
