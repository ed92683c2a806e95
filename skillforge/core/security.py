from __future__ import annotations

from fastapi import status

from skillforge.core.config import settings
from skillforge.core.errors import ApiError


def check_api_key(x_api_key: str | None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise ApiError(
            "Please provide a valid API key.",
            code="UNAUTHORIZED",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
