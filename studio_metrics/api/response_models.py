"""
Pydantic response schemas and JSON helpers for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from studio_metrics.analytics.common import sanitize_for_json


class HealthResponse(BaseModel):
    status: str
    data_dirs: list[str]
    files: dict[str, Optional[str]]


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None


def safe_json(data: Any) -> JSONResponse:
    """NaN/Inf-safe JSON response."""
    return JSONResponse(content=sanitize_for_json(data))


def error_json(message: str, status_code: int = 500, exc: BaseException | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, detail=str(exc) if exc is not None else None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))
