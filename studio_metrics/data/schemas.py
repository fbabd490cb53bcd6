"""
Typed records parsed from the CSV exports and the monthly aggregate shapes.
"""
from __future__ import annotations

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Source records (one per CSV row, immutable for a load cycle)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PaymentRecord:
    invoice_number: str = ""
    invoice_due_date: str = ""
    transaction_at: str = ""
    transaction_amount: float = float("nan")
    payment_amount: float = float("nan")
    currency: str = ""
    payer_home_location: str = ""


@dataclass(frozen=True)
class MemberRecord:
    client: str = ""
    plan_name: str = ""
    start_date: str = ""
    end_date: str = ""
    client_home_location: str = ""
    client_id: str = ""
    plan_id: str = ""
    used_for_first_visit: bool = False
    membership: bool = True
    canceled: bool = False
    client_first_plan: bool = False
    client_first_membership: bool = False


# ---------------------------------------------------------------------------
# Monthly aggregates. to_dict() emits the wire (camelCase) form.
# ---------------------------------------------------------------------------

@dataclass
class MonthlyRevenue:
    month: str                # YYYY-MM
    revenue: float = 0.0
    count: int = 0

    def to_dict(self) -> dict:
        return {"month": self.month, "revenue": self.revenue, "count": self.count}


@dataclass
class MonthlyAmountBreakdown:
    month: str
    amounts: dict[str, float] = field(default_factory=dict)   # bucket → revenue
    total: float = 0.0

    def to_dict(self) -> dict:
        return {"month": self.month, "amounts": dict(self.amounts), "total": self.total}


@dataclass
class MonthlyMembership:
    month: str
    membership_count: int = 0      # cumulative active members as of month
    new_memberships: int = 0
    canceled_memberships: int = 0

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "membershipCount": self.membership_count,
            "newMemberships": self.new_memberships,
            "canceledMemberships": self.canceled_memberships,
        }


@dataclass
class MonthlyProgramBreakdown:
    month: str
    programs: dict[str, int] = field(default_factory=dict)    # program → active members
    total: int = 0

    def to_dict(self) -> dict:
        return {"month": self.month, "programs": dict(self.programs), "total": self.total}


@dataclass(frozen=True)
class MembershipEvent:
    """A start or end of one membership, bucketed to its month."""
    month: str
    kind: str                 # "start" | "end"
    client_id: str
    program: str = ""
