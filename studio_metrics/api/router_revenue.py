"""
Revenue endpoints — monthly totals and amount breakdowns, overall and by location.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from studio_metrics.data.source import DataSource
from studio_metrics.api.dependencies import get_source
from studio_metrics.api.response_models import safe_json, error_json
from studio_metrics.analytics.revenue import (
    location_revenue,
    amount_breakdown,
    location_amount_breakdown,
)

router = APIRouter(prefix="/api/revenue-data", tags=["revenue"])


@router.get("")
def revenue_data(source: DataSource = Depends(get_source)):
    """Monthly revenue for all payments and per location."""
    try:
        return safe_json(location_revenue(source))
    except Exception as exc:
        print(f"  Error loading revenue data: {exc}")
        return error_json("Failed to load revenue data", exc=exc)


@router.get("/amount-breakdown")
def revenue_amount_breakdown(source: DataSource = Depends(get_source)):
    """Monthly revenue split by whole-dollar payment amount."""
    try:
        return safe_json(amount_breakdown(source))
    except Exception as exc:
        print(f"  Error loading revenue amount breakdown: {exc}")
        return error_json("Failed to load revenue amount breakdown", exc=exc)


@router.get("/amount-breakdown-by-location")
def revenue_amount_breakdown_by_location(source: DataSource = Depends(get_source)):
    try:
        return safe_json(location_amount_breakdown(source))
    except Exception as exc:
        print(f"  Error loading location amount breakdown: {exc}")
        return error_json("Failed to load location amount breakdown", exc=exc)
