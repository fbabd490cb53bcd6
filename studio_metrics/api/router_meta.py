"""
Meta endpoints: health and data-file visibility.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from studio_metrics.data.source import DataSource
from studio_metrics.api.dependencies import get_source
from studio_metrics.api.response_models import HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(source: DataSource = Depends(get_source)):
    files = source.file_status()
    return HealthResponse(
        status="ok" if all(files.values()) else "degraded",
        data_dirs=[str(d) for d in source.resolver.directories],
        files=files,
    )
