"""
Studio Metrics — Configuration: data directories, file names, column maps.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Candidate data directories, searched in order for every file lookup.
# Override with STUDIO_METRICS_DATA_DIRS (os.pathsep-separated) per deployment.
# ---------------------------------------------------------------------------
DEFAULT_DATA_DIRS = [
    Path.cwd() / "public",      # local checkout with exported CSVs in public/
    Path.cwd(),                 # development, CSVs next to the code
    Path("/var/task/public"),   # serverless bundle
    Path("/app/public"),        # container image
]


def data_dirs_from_env() -> list[Path]:
    raw = os.environ.get("STUDIO_METRICS_DATA_DIRS", "")
    dirs = [Path(p) for p in raw.split(os.pathsep) if p.strip()]
    return dirs or list(DEFAULT_DATA_DIRS)


# ---------------------------------------------------------------------------
# Source files
# ---------------------------------------------------------------------------
PAYMENTS_FILE = os.environ.get("STUDIO_METRICS_PAYMENTS_FILE", "dataprimo.csv")

# Only these two names may be requested through the `file` query parameter
MEMBER_FILES = ("membersbeta.csv", "membersalpha.csv")
DEFAULT_MEMBER_FILE = "membersbeta.csv"

# ---------------------------------------------------------------------------
# Legacy-year exclusion: rows dated in this year are known-bad exports
# ---------------------------------------------------------------------------
LEGACY_YEAR = 2021

# ---------------------------------------------------------------------------
# Locations — response key → substring matched against the home-location column
# ---------------------------------------------------------------------------
LOCATIONS = {
    "losGatosData": "Los Gatos",
    "pleasantonData": "Pleasanton",
}

# ---------------------------------------------------------------------------
# Column mapping from raw payments CSV → PaymentRecord fields
# ---------------------------------------------------------------------------
PAYMENT_COLUMN_MAP = {
    "Invoice Number": "invoice_number",
    "Invoice Due Date": "invoice_due_date",
    "Transaction At": "transaction_at",
    "Transaction Amount": "transaction_amount",
    "Payment Amount": "payment_amount",
    "Currency Code": "currency",
    "Payer Home Location": "payer_home_location",
}

PAYMENT_AMOUNT_COLS = ["transaction_amount", "payment_amount"]

# ---------------------------------------------------------------------------
# Members CSV field tables.
# Two export variants exist: "alpha" carries the Yes/blank flag columns,
# "beta" drops Membership?/Canceled? and fills them from MEMBER_VARIANT_DEFAULTS.
#
#   column -> (field, kind, default)
#   kind:    "text" | "flag"  (flag is True only for "Yes")
#   default: constant used when the column is absent, or "infer:<rule>"
# ---------------------------------------------------------------------------
MEMBER_FIELDS = {
    "Client": ("client", "text", ""),
    "Plan Name": ("plan_name", "text", ""),
    "Start Date": ("start_date", "text", ""),
    "End Date": ("end_date", "text", ""),
    "Client's Home Location": ("client_home_location", "text", ""),
    "Client ID": ("client_id", "text", ""),
    "Plan ID": ("plan_id", "text", ""),
    "Used for Client's First Visit?": ("used_for_first_visit", "flag", False),
    "Membership?": ("membership", "flag", False),
    "Canceled?": ("canceled", "flag", False),
    "Client's First Pass/Plan?": ("client_first_plan", "flag", False),
    "Client's First Membership?": ("client_first_membership", "flag", False),
}

# Per-variant default overrides, keyed by column
MEMBER_VARIANT_DEFAULTS = {
    "alpha": {},
    "beta": {
        "Membership?": True,                    # every beta row is a membership
        "Canceled?": "infer:has_end_date",      # an End Date means it was canceled
    },
}


def member_fields(variant: str) -> dict[str, tuple]:
    """MEMBER_FIELDS with the defaults of `variant` applied."""
    overrides = MEMBER_VARIANT_DEFAULTS[variant]
    return {
        column: (field, kind, overrides.get(column, default))
        for column, (field, kind, default) in MEMBER_FIELDS.items()
    }


# Columns whose presence marks the "alpha" members export
ALPHA_MARKER_COLUMNS = ("Membership?", "Canceled?")

FLAG_TRUE_VALUE = "Yes"

# Program name used when a member row has a blank plan name
UNKNOWN_PROGRAM = "Unknown"
