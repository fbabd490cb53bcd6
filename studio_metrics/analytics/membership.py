"""
Membership analytics — cumulative active-member counts from start/end events.

Counts are snapshots *as of* each month: a first pass tallies starts and
cancellations per month, a second pass walks the months in order keeping a
running total floored at zero.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from studio_metrics.config import LEGACY_YEAR, UNKNOWN_PROGRAM
from studio_metrics.data.schemas import (
    MemberRecord, MembershipEvent, MonthlyMembership, MonthlyProgramBreakdown,
)
from studio_metrics.data.source import DataSource
from studio_metrics.analytics.common import parse_date, ym_key
from studio_metrics.analytics.locations import by_location


def program_name(member: MemberRecord) -> str:
    return member.plan_name.strip() or UNKNOWN_PROGRAM


def membership_events(members: Iterable[MemberRecord]) -> list[MembershipEvent]:
    """Start/end events for every membership row with a usable start date, sorted by month."""
    events: list[MembershipEvent] = []
    for m in members:
        if not m.membership or not m.start_date:
            continue

        start = parse_date(m.start_date)
        if start is None or start.year == LEGACY_YEAR:
            continue
        program = program_name(m)
        events.append(MembershipEvent(ym_key(start.year, start.month), "start", m.client_id, program))

        if m.end_date and m.canceled:
            end = parse_date(m.end_date)
            if end is not None and end.year > LEGACY_YEAR:
                events.append(MembershipEvent(ym_key(end.year, end.month), "end", m.client_id, program))

    events.sort(key=lambda e: e.month)
    return events


def tally_events(events: Iterable[MembershipEvent]) -> dict[str, list[int]]:
    """month → [new, canceled]."""
    tally: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    for e in events:
        tally[e.month][0 if e.kind == "start" else 1] += 1
    return dict(tally)


def aggregate_monthly_memberships(members: Sequence[MemberRecord]) -> list[MonthlyMembership]:
    tally = tally_events(membership_events(members))

    result = []
    active = 0
    for month in sorted(tally):
        new, canceled = tally[month]
        active = max(0, active + new - canceled)
        result.append(MonthlyMembership(
            month=month,
            membership_count=active,
            new_memberships=new,
            canceled_memberships=canceled,
        ))
    return result


def _absorb_deficit(running: dict[str, int]) -> None:
    """Zero negative program counts and take the shortfall from the largest programs.

    Keeps every count >= 0 and the sum equal to max(0, raw sum), the same floor
    the scalar aggregate applies.
    """
    deficit = sum(-c for c in running.values() if c < 0)
    if not deficit:
        return
    for p in running:
        running[p] = max(0, running[p])
    for p in sorted(running, key=lambda k: (-running[k], k)):
        if deficit <= 0:
            break
        taken = min(running[p], deficit)
        running[p] -= taken
        deficit -= taken


def aggregate_program_breakdown(members: Sequence[MemberRecord]) -> list[MonthlyProgramBreakdown]:
    """Active members per program per month.

    Per-month totals equal aggregate_monthly_memberships' counts for the same
    members, including when inconsistent data would drive a program negative.
    """
    net: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for e in membership_events(members):
        net[e.month][e.program] += 1 if e.kind == "start" else -1

    result = []
    running: dict[str, int] = defaultdict(int)
    for month in sorted(net):
        for program, delta in net[month].items():
            running[program] += delta
        _absorb_deficit(running)
        programs = {p: c for p, c in sorted(running.items()) if c > 0}
        result.append(MonthlyProgramBreakdown(month=month, programs=programs, total=sum(programs.values())))
    return result


# ---------------------------------------------------------------------------
# Source-backed views (one fresh load per call)
# ---------------------------------------------------------------------------

def location_memberships(source: DataSource, filename: str | None = None) -> dict:
    """{allData, losGatosData, pleasantonData} of MonthlyMembership dicts."""
    return by_location(source.members(filename), "client_home_location", aggregate_monthly_memberships)


def location_program_breakdown(source: DataSource, filename: str | None = None) -> dict:
    return by_location(source.members(filename), "client_home_location", aggregate_program_breakdown)
