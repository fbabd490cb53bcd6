"""
FastAPI dependencies — DataSource singleton, members-file validation.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query

from studio_metrics.config import DEFAULT_MEMBER_FILE, MEMBER_FILES
from studio_metrics.data.source import DataSource, validate_member_file

# ---------------------------------------------------------------------------
# Global source singleton (set during startup). Holds only the resolver;
# every request still reads the CSVs fresh.
# ---------------------------------------------------------------------------
_source: DataSource | None = None


def set_source(source: DataSource | None) -> None:
    global _source
    _source = source


def get_source() -> DataSource:
    if _source is None:
        raise HTTPException(503, "Server not initialized yet")
    return _source


# ---------------------------------------------------------------------------
# Query params
# ---------------------------------------------------------------------------

def member_file(
    file: Optional[str] = Query(DEFAULT_MEMBER_FILE, description=" | ".join(MEMBER_FILES)),
) -> str:
    """Whitelisted members export; InvalidParameter (400) otherwise."""
    return validate_member_file(file)
