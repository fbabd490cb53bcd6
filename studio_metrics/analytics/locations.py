"""
Location split shared by the revenue and membership endpoints.
"""
from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from studio_metrics.config import LOCATIONS

R = TypeVar("R")


def filter_by_location(records: Sequence[R], attr: str, needle: str) -> list[R]:
    """Records whose `attr` contains `needle` (case-sensitive substring)."""
    return [r for r in records if getattr(r, attr, "") and needle in getattr(r, attr)]


def by_location(records: Sequence[R], attr: str, aggregate: Callable[[Sequence[R]], list]) -> dict[str, list]:
    """Aggregate the full set plus one subset per configured location.

    Returns {"allData": [...], "losGatosData": [...], "pleasantonData": [...]},
    each list independently aggregated and serialized.
    """
    result = {"allData": [row.to_dict() for row in aggregate(records)]}
    for key, needle in LOCATIONS.items():
        subset = filter_by_location(records, attr, needle)
        result[key] = [row.to_dict() for row in aggregate(subset)]
    return result
