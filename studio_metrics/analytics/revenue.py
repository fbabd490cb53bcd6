"""
Revenue analytics — monthly payment totals and amount-bucket breakdowns.
"""
from __future__ import annotations

from dataclasses import asdict, fields
from typing import Sequence

import numpy as np
import pandas as pd

from studio_metrics.data.schemas import PaymentRecord, MonthlyRevenue, MonthlyAmountBreakdown
from studio_metrics.data.source import DataSource
from studio_metrics.analytics.common import payment_month, is_legacy_month, round_half_up
from studio_metrics.analytics.locations import by_location

_PAYMENT_COLUMNS = [f.name for f in fields(PaymentRecord)]


def _monthly_frame(payments: Sequence[PaymentRecord]) -> pd.DataFrame:
    """Payments with a `month` column; drops blank timestamps, legacy months, bad amounts."""
    df = pd.DataFrame([asdict(p) for p in payments], columns=_PAYMENT_COLUMNS)
    if df.empty:
        df["month"] = pd.Series(dtype=object)
        return df
    df["month"] = df["transaction_at"].map(payment_month)
    df = df[df["month"].notna()]
    df = df[~df["month"].map(is_legacy_month).astype(bool)].copy()
    df["payment_amount"] = pd.to_numeric(df["payment_amount"], errors="coerce").astype(float)
    return df[np.isfinite(df["payment_amount"])]


def aggregate_monthly(payments: Sequence[PaymentRecord]) -> list[MonthlyRevenue]:
    """Revenue and payment count per month, ascending by month."""
    df = _monthly_frame(payments)
    if df.empty:
        return []

    grouped = df.groupby("month", sort=True).agg(
        revenue=("payment_amount", "sum"),
        count=("payment_amount", "size"),
    ).reset_index()

    return [
        MonthlyRevenue(month=str(r["month"]), revenue=float(r["revenue"]), count=int(r["count"]))
        for _, r in grouped.iterrows()
    ]


def aggregate_amount_breakdown(payments: Sequence[PaymentRecord]) -> list[MonthlyAmountBreakdown]:
    """Per month, revenue split by whole-dollar payment amount ("55" → sum of $55 payments)."""
    df = _monthly_frame(payments)
    if df.empty:
        return []

    df = df.assign(bucket=df["payment_amount"].map(lambda a: str(round_half_up(a))))
    totals = df.groupby("month", sort=True)["payment_amount"].sum()
    buckets = df.groupby(["month", "bucket"], sort=True)["payment_amount"].sum()

    rows = []
    for month, total in totals.items():
        amounts = {str(b): float(v) for b, v in buckets.loc[month].items()}
        rows.append(MonthlyAmountBreakdown(month=str(month), amounts=amounts, total=float(total)))
    return rows


# ---------------------------------------------------------------------------
# Source-backed views (one fresh load per call)
# ---------------------------------------------------------------------------

def location_revenue(source: DataSource) -> dict:
    """{allData, losGatosData, pleasantonData} of MonthlyRevenue dicts."""
    return by_location(source.payments(), "payer_home_location", aggregate_monthly)


def amount_breakdown(source: DataSource) -> dict:
    return {"breakdown": [row.to_dict() for row in aggregate_amount_breakdown(source.payments())]}


def location_amount_breakdown(source: DataSource) -> dict:
    return by_location(source.payments(), "payer_home_location", aggregate_amount_breakdown)
