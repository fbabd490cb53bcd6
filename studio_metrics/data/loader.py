"""
CSV loading: resolve a named export, parse it by header name, build typed records.
"""
from __future__ import annotations

import re
from typing import Callable, Optional

import numpy as np
import pandas as pd

from studio_metrics.config import (
    PAYMENT_COLUMN_MAP, PAYMENT_AMOUNT_COLS, ALPHA_MARKER_COLUMNS, FLAG_TRUE_VALUE,
    member_fields,
)
from studio_metrics.data.resolver import FileResolver
from studio_metrics.data.schemas import PaymentRecord, MemberRecord


# ---------------------------------------------------------------------------
# Raw table parsing
# ---------------------------------------------------------------------------

# Commas followed by an even number of quotes, i.e. not inside a quoted field
_FIELD_SPLIT_RE = re.compile(r',(?=(?:[^"]*"[^"]*")*[^"]*$)')


def split_line(line: str) -> list[str]:
    """Split one CSV line on unquoted commas and strip surrounding quotes."""
    return [part.strip('"') for part in _FIELD_SPLIT_RE.split(line)]


def read_csv_text(text: str) -> pd.DataFrame:
    """Parse CSV text into an all-string DataFrame.

    Header row is required. Each line is split on its own, so a row with an
    unbalanced quote only garbles itself. Blank lines are skipped and every row
    is padded or trimmed to the header width. Duplicate header names keep the
    first column.
    """
    if not text.strip():
        return pd.DataFrame()

    header_line, *lines = text.strip().splitlines()
    header = split_line(header_line)
    width = len(header)
    keep = [i for i, name in enumerate(header) if name not in header[:i]]

    rows = []
    for line in lines:
        if not line.strip():
            continue
        parts = split_line(line)[:width]
        parts += [""] * (width - len(parts))
        rows.append([parts[i] for i in keep])

    return pd.DataFrame(rows, columns=[header[i] for i in keep], dtype=object)


def to_amount(series: pd.Series) -> pd.Series:
    """Currency strings → float. "$1,234.50" → 1234.5, blank → 0.0, junk or inf → NaN."""
    cleaned = series.astype(str).str.replace(r'[\$,"]', "", regex=True).str.strip()
    cleaned = cleaned.mask(cleaned == "", "0")
    values = pd.to_numeric(cleaned, errors="coerce").astype(float)
    return values.where(np.isfinite(values))


def _text(df: pd.DataFrame, column: str) -> pd.Series:
    return df[column].astype(str)


def _flag(df: pd.DataFrame, column: str) -> pd.Series:
    return df[column].astype(str).str.strip() == FLAG_TRUE_VALUE


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

def parse_payments(df: pd.DataFrame) -> list[PaymentRecord]:
    """Build PaymentRecords from a raw payments table, looking columns up by name."""
    if df.empty:
        return []
    out = pd.DataFrame(index=df.index)
    for column, field_name in PAYMENT_COLUMN_MAP.items():
        if column in df.columns:
            out[field_name] = _text(df, column)
        else:
            out[field_name] = ""
    for field_name in PAYMENT_AMOUNT_COLS:
        out[field_name] = to_amount(out[field_name])
    return [PaymentRecord(**row) for row in out.to_dict("records")]


# ---------------------------------------------------------------------------
# Members — schema variants resolved through member_fields(variant)
# ---------------------------------------------------------------------------

def _infer_has_end_date(df: pd.DataFrame) -> pd.Series:
    if "End Date" not in df.columns:
        return pd.Series(False, index=df.index)
    return df["End Date"].astype(str).str.strip() != ""


INFERENCE_RULES: dict[str, Callable[[pd.DataFrame], pd.Series]] = {
    "has_end_date": _infer_has_end_date,
}


def detect_member_variant(columns) -> str:
    """Return "alpha" when the export carries the membership flag columns, else "beta"."""
    cols = set(columns)
    return "alpha" if all(c in cols for c in ALPHA_MARKER_COLUMNS) else "beta"


def _fill_missing(df: pd.DataFrame, default) -> pd.Series:
    if isinstance(default, str) and default.startswith("infer:"):
        rule = default.split(":", 1)[1]
        return INFERENCE_RULES[rule](df)
    return pd.Series([default] * len(df), index=df.index, dtype=object)


def parse_members(df: pd.DataFrame) -> list[MemberRecord]:
    """Build MemberRecords using the field table of the detected export variant.

    Columns the table lists but the export lacks take their default or
    inference rule.
    """
    if df.empty:
        return []
    fields = member_fields(detect_member_variant(df.columns))
    out = pd.DataFrame(index=df.index)
    for column, (field_name, kind, default) in fields.items():
        if column in df.columns:
            out[field_name] = _flag(df, column) if kind == "flag" else _text(df, column)
        else:
            out[field_name] = _fill_missing(df, default)
    records = []
    for row in out.to_dict("records"):
        for field_name, kind, _ in fields.values():
            if kind == "flag":
                row[field_name] = bool(row[field_name])
        records.append(MemberRecord(**row))
    return records


# ---------------------------------------------------------------------------
# File-level entry points
# ---------------------------------------------------------------------------

def load_table(filename: str, resolver: Optional[FileResolver] = None) -> pd.DataFrame:
    resolver = resolver or FileResolver()
    return read_csv_text(resolver.read_text(filename))


def load_payments(filename: str, resolver: Optional[FileResolver] = None) -> list[PaymentRecord]:
    """Resolve, read and parse a payments export."""
    return parse_payments(load_table(filename, resolver))


def load_members(filename: str, resolver: Optional[FileResolver] = None) -> list[MemberRecord]:
    """Resolve, read and parse a members export (either variant)."""
    return parse_members(load_table(filename, resolver))
