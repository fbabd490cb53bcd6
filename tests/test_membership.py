from __future__ import annotations

import pytest

from studio_metrics.data.schemas import MemberRecord
from studio_metrics.data.source import DataSource
from studio_metrics.analytics.membership import (
    membership_events, aggregate_monthly_memberships, aggregate_program_breakdown,
    location_memberships, location_program_breakdown,
)
from studio_metrics.errors import InvalidParameter


def _member(start: str, end: str = "", canceled: bool = False, plan: str = "Monthly",
            membership: bool = True, client_id: str = "c") -> MemberRecord:
    return MemberRecord(start_date=start, end_date=end, canceled=canceled, plan_name=plan,
                        membership=membership, client_id=client_id)


def test_membership_example():
    members = [
        _member("2023-01-10"),
        _member("2023-01-15", "2023-02-05", canceled=True),
    ]
    rows = [r.to_dict() for r in aggregate_monthly_memberships(members)]
    assert rows == [
        {"month": "2023-01", "membershipCount": 2, "newMemberships": 2, "canceledMemberships": 0},
        {"month": "2023-02", "membershipCount": 1, "newMemberships": 0, "canceledMemberships": 1},
    ]


def test_events_skip_non_memberships_legacy_and_bad_dates():
    members = [
        _member("2023-01-10", membership=False),
        _member("2021-07-01"),
        _member("not a date"),
        _member(""),
        _member("2023-03-01", "garbage", canceled=True),
        _member("2023-03-02", "2023-05-01", canceled=False),
    ]
    events = membership_events(members)
    assert [(e.month, e.kind) for e in events] == [("2023-03", "start"), ("2023-03", "start")]


def test_events_sorted_by_month():
    members = [_member("2023-05-01"), _member("2023-01-01", "2023-03-15", canceled=True)]
    assert [e.month for e in membership_events(members)] == ["2023-01", "2023-03", "2023-05"]


def test_count_floored_at_zero_and_recurrence_holds():
    members = [
        _member("2023-02-01"),
        _member("2023-03-01"),
        _member("2023-01-01", "2023-01-20", canceled=True),
        _member("2023-04-01", "2023-04-25", canceled=True),
        _member("2023-02-10", "2023-04-02", canceled=True),
        _member("2023-02-11", "2023-04-03", canceled=True),
        _member("2023-02-12", "2023-04-04", canceled=True),
    ]
    rows = aggregate_monthly_memberships(members)
    assert all(r.membership_count >= 0 for r in rows)
    for prev, cur in zip(rows, rows[1:]):
        expected = max(0, prev.membership_count + cur.new_memberships - cur.canceled_memberships)
        assert cur.membership_count == expected


def test_cancellation_before_its_start_is_floored():
    # End date precedes start date: January sees a cancel with nothing active
    rows = aggregate_monthly_memberships([_member("2023-03-01", "2023-01-15", canceled=True)])
    assert [(r.month, r.membership_count) for r in rows] == [("2023-01", 0), ("2023-03", 1)]
    assert rows[0].canceled_memberships == 1


def test_same_month_start_and_cancel_nets_to_zero():
    members = [_member("2023-01-01", "2023-01-31", canceled=True), _member("2023-01-05", "2023-01-20", canceled=True)]
    rows = aggregate_monthly_memberships(members)
    assert rows[0].membership_count == 0
    assert rows[0].new_memberships == 2
    assert rows[0].canceled_memberships == 2


def test_program_breakdown_matches_scalar_totals():
    members = [
        _member("2023-01-10", plan="Monthly"),
        _member("2023-01-15", "2023-03-05", canceled=True, plan="Monthly"),
        _member("2023-02-01", plan="Annual"),
        _member("2023-03-01", plan=""),
    ]
    programs = aggregate_program_breakdown(members)
    scalar = aggregate_monthly_memberships(members)
    assert [p.month for p in programs] == [s.month for s in scalar]
    for p, s in zip(programs, scalar):
        assert p.total == s.membership_count
        assert p.total == sum(p.programs.values())
    assert programs[-1].programs == {"Annual": 1, "Monthly": 1, "Unknown": 1}


def test_location_memberships_alpha(resolver):
    data = location_memberships(DataSource(resolver), "membersalpha.csv")
    assert data["allData"] == [
        {"month": "2023-01", "membershipCount": 2, "newMemberships": 2, "canceledMemberships": 0},
        {"month": "2023-02", "membershipCount": 2, "newMemberships": 1, "canceledMemberships": 1},
    ]
    assert [r["membershipCount"] for r in data["losGatosData"]] == [1, 2]
    assert [r["membershipCount"] for r in data["pleasantonData"]] == [1, 0]


def test_location_memberships_beta_infers_cancellation(resolver):
    data = location_memberships(DataSource(resolver), "membersbeta.csv")
    assert [(r["month"], r["membershipCount"]) for r in data["allData"]] == [
        ("2023-01", 2), ("2023-02", 2), ("2023-03", 3), ("2023-04", 2),
    ]
    assert [r["month"] for r in data["losGatosData"]] == ["2023-01", "2023-02", "2023-04"]


def test_location_memberships_defaults_to_beta(resolver):
    source = DataSource(resolver)
    assert location_memberships(source) == location_memberships(source, "membersbeta.csv")


def test_location_program_breakdown_beta(resolver):
    data = location_program_breakdown(DataSource(resolver), "membersbeta.csv")
    by_month = {r["month"]: r for r in data["allData"]}
    assert by_month["2023-02"]["programs"] == {"Annual": 1, "Monthly Unlimited": 1}
    assert by_month["2023-03"]["programs"]["Youth Team, Advanced"] == 1
    assert by_month["2023-04"] == {
        "month": "2023-04",
        "programs": {"Monthly Unlimited": 1, "Youth Team, Advanced": 1},
        "total": 2,
    }


def test_unknown_file_rejected(resolver):
    with pytest.raises(InvalidParameter):
        location_memberships(DataSource(resolver), "../etc/passwd")


def test_program_totals_follow_scalar_floor_on_inconsistent_data():
    # Plan B's end date precedes its start, so February sees a cancel with no active B member
    members = [
        _member("2023-01-10", plan="A"),
        _member("2023-03-01", "2023-02-15", canceled=True, plan="B"),
    ]
    scalar = [(r.month, r.membership_count) for r in aggregate_monthly_memberships(members)]
    programs = aggregate_program_breakdown(members)
    assert scalar == [("2023-01", 1), ("2023-02", 0), ("2023-03", 1)]
    assert [(p.month, p.total) for p in programs] == scalar
    assert programs[1].programs == {}
    assert programs[2].programs == {"B": 1}
    assert all(p.total == sum(p.programs.values()) for p in programs)
