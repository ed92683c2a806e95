from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: ErrorDetail


class DataResponse(BaseModel):
    success: Literal[True] = True
    data: dict[str, Any] = Field(default_factory=dict)
