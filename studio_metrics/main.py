"""
Studio Metrics — FastAPI app factory with startup resolver wiring.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from studio_metrics.data.resolver import FileResolver
from studio_metrics.data.source import DataSource
from studio_metrics.errors import InvalidParameter
from studio_metrics.api.dependencies import set_source
from studio_metrics.api.response_models import error_json
from studio_metrics.api.router_meta import router as meta_router
from studio_metrics.api.router_revenue import router as revenue_router
from studio_metrics.api.router_membership import router as membership_router


def _make_lifespan(source: DataSource):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Install the data source; CSVs themselves are read per request."""
        set_source(source)

        # Diagnostic: show exactly where data is looked up
        print("  Data directories (searched in order):")
        for d in source.resolver.directories:
            print(f"    - {d} (exists = {d.is_dir()})")
        for name, path in source.file_status().items():
            print(f"  {name}: {path or 'NOT FOUND'}")

        print("\nStudio Metrics ready\n")
        yield
        set_source(None)

    return lifespan


def create_app(resolver: Optional[FileResolver] = None) -> FastAPI:
    source = DataSource(resolver)

    app = FastAPI(
        title="Studio Metrics API",
        description="Monthly revenue and membership time series from CSV exports",
        version="1.0.0",
        lifespan=_make_lifespan(source),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvalidParameter)
    async def invalid_parameter_handler(request: Request, exc: InvalidParameter):
        return error_json(str(exc), status_code=400)

    app.include_router(meta_router)
    app.include_router(revenue_router)
    app.include_router(membership_router)

    return app


app = create_app()
