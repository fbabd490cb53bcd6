"""CSV resolution, parsing and typed records."""
from .resolver import FileResolver
from .loader import read_csv_text, parse_payments, parse_members, load_payments, load_members, detect_member_variant
from .source import DataSource, validate_member_file
from .schemas import (
    PaymentRecord, MemberRecord, MembershipEvent,
    MonthlyRevenue, MonthlyAmountBreakdown, MonthlyMembership, MonthlyProgramBreakdown,
)
