"""
Membership endpoints — cumulative active members and per-program breakdown.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from studio_metrics.data.source import DataSource
from studio_metrics.api.dependencies import get_source, member_file
from studio_metrics.api.response_models import safe_json, error_json
from studio_metrics.analytics.membership import location_memberships, location_program_breakdown

router = APIRouter(prefix="/api", tags=["membership"])


@router.get("/membership-data")
def membership_data(
    file: str = Depends(member_file),
    source: DataSource = Depends(get_source),
):
    """Monthly membership counts for all members and per location."""
    try:
        return safe_json(location_memberships(source, file))
    except Exception as exc:
        print(f"  Error loading membership data from {file}: {exc}")
        return error_json("Failed to load membership data", exc=exc)


@router.get("/membership-program-breakdown")
def membership_program_breakdown(
    file: str = Depends(member_file),
    source: DataSource = Depends(get_source),
):
    """Active members per program per month, overall and per location."""
    try:
        return safe_json(location_program_breakdown(source, file))
    except Exception as exc:
        print(f"  Error loading membership program breakdown from {file}: {exc}")
        return error_json("Failed to load membership program breakdown", exc=exc)
