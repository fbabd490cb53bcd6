"""
Legend keys for the stacked breakdown charts: top-N buckets plus "Other".
"""
from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Mapping

OTHER = "Other"


def _contribution(maps: Iterable[Mapping[str, float]]) -> dict[str, float]:
    sums: dict[str, float] = defaultdict(float)
    for m in maps:
        for k, v in m.items():
            sums[k] += v
    return sums


def _top_keys(sums: Mapping[str, float], top_n: int) -> list[str]:
    return [k for k, _ in sorted(sums.items(), key=lambda kv: kv[1], reverse=True)[:top_n]]


def _has_other(maps: Iterable[Mapping[str, float]], keep: set[str]) -> bool:
    return any(sum(v for k, v in m.items() if k not in keep) > 0 for m in maps)


def _amount_sort_key(key: str) -> tuple[int, float, str]:
    try:
        return 0, float(key), key
    except ValueError:
        return 1, 0.0, key


def amount_legend_keys(rows, top_n: int = 6) -> list[str]:
    """Top amount buckets by revenue, listed in ascending dollar order."""
    maps = [r.amounts for r in rows]
    top = sorted(_top_keys(_contribution(maps), top_n), key=_amount_sort_key)
    return top + [OTHER] if _has_other(maps, set(top)) else top


def program_legend_keys(rows, top_n: int = 6) -> list[str]:
    """Top programs by accumulated active-member count."""
    maps = [r.programs for r in rows]
    top = _top_keys(_contribution(maps), top_n)
    return top + [OTHER] if _has_other(maps, set(top)) else top
