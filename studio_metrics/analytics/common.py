"""
Month helpers, gap filling and JSON-safety helpers used across analytics modules.
"""
from __future__ import annotations

import math
from typing import Callable, Optional, Sequence, TypeVar

import numpy as np
import pandas as pd

from studio_metrics.config import LEGACY_YEAR
from studio_metrics.data.schemas import (
    MonthlyRevenue, MonthlyAmountBreakdown, MonthlyMembership, MonthlyProgramBreakdown,
)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Month keys
# ---------------------------------------------------------------------------

def ym_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def payment_month(transaction_at: str) -> Optional[str]:
    """"2023-01-15 10:32:00" → "2023-01". Blank timestamps yield None."""
    if not transaction_at or not transaction_at.strip():
        return None
    date_part = transaction_at.strip().split(" ")[0][:10]
    return date_part[:7]


def parse_date(value: str) -> Optional[pd.Timestamp]:
    """Lenient date parse; anything unparseable (or blank) is None."""
    if not value or not str(value).strip():
        return None
    try:
        ts = pd.to_datetime(str(value).strip(), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts


def is_legacy_month(month: str) -> bool:
    return month.startswith(str(LEGACY_YEAR))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity (2.5 → 3)."""
    return int(math.floor(value + 0.5))


def month_index(month: str) -> int:
    year, m = month.split("-")[:2]
    return int(year) * 12 + int(m) - 1


# ---------------------------------------------------------------------------
# Range generation and gap filling
# ---------------------------------------------------------------------------

def generate_month_range(start_month: str, end_month: str) -> list[str]:
    """Inclusive list of YYYY-MM keys from start to end; empty if end < start."""
    first, last = month_index(start_month), month_index(end_month)
    return [ym_key(i // 12, i % 12 + 1) for i in range(first, last + 1)]


def fill_month_range(
    rows: Sequence[T],
    start_month: str,
    end_month: str,
    empty: Callable[[str], T],
) -> list[T]:
    """Exactly one row per month in [start, end]; months without data get empty(month)."""
    by_month = {r.month: r for r in rows if start_month <= r.month <= end_month}
    return [by_month.get(m) or empty(m) for m in generate_month_range(start_month, end_month)]


def filter_revenue_by_range(rows, start_month: str, end_month: str) -> list[MonthlyRevenue]:
    return fill_month_range(rows, start_month, end_month, MonthlyRevenue)


def filter_membership_by_range(rows, start_month: str, end_month: str) -> list[MonthlyMembership]:
    return fill_month_range(rows, start_month, end_month, MonthlyMembership)


def filter_amount_breakdown_by_range(rows, start_month: str, end_month: str) -> list[MonthlyAmountBreakdown]:
    return fill_month_range(rows, start_month, end_month, MonthlyAmountBreakdown)


def filter_program_breakdown_by_range(rows, start_month: str, end_month: str) -> list[MonthlyProgramBreakdown]:
    return fill_month_range(rows, start_month, end_month, MonthlyProgramBreakdown)


def available_months(rows) -> list[str]:
    return sorted(r.month for r in rows)


# ---------------------------------------------------------------------------
# JSON safety
# ---------------------------------------------------------------------------

def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python for JSON serialization."""
    if hasattr(obj, "to_dict") and not isinstance(obj, (pd.DataFrame, pd.Series)):
        return sanitize_for_json(obj.to_dict())
    if isinstance(obj, dict):
        clean = {}
        for k, v in obj.items():
            # Sanitize keys: skip NaN/None keys, convert non-string keys to str
            if k is None:
                continue
            if isinstance(k, (float, np.floating)) and (math.isnan(float(k)) or math.isinf(float(k))):
                continue
            clean[str(k) if not isinstance(k, str) else k] = sanitize_for_json(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        v = float(obj)
        return 0.0 if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    return obj
