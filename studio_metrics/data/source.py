"""
DataSource — request-scoped access to the CSV exports.

Nothing is cached: every call resolves the file again and parses it from
scratch, so aggregates always reflect what is on disk at request time.
"""
from __future__ import annotations

from typing import Optional

from studio_metrics.config import PAYMENTS_FILE, MEMBER_FILES, DEFAULT_MEMBER_FILE
from studio_metrics.data.loader import load_payments, load_members
from studio_metrics.data.resolver import FileResolver
from studio_metrics.data.schemas import PaymentRecord, MemberRecord
from studio_metrics.errors import InvalidParameter


def validate_member_file(filename: Optional[str]) -> str:
    """Return the whitelisted members filename, or raise before any disk access."""
    if filename is None or filename == "":
        return DEFAULT_MEMBER_FILE
    if filename not in MEMBER_FILES:
        raise InvalidParameter("file", filename, MEMBER_FILES)
    return filename


class DataSource:
    """Loads payment and member records through a FileResolver."""

    def __init__(self, resolver: Optional[FileResolver] = None, payments_file: str = PAYMENTS_FILE) -> None:
        self.resolver = resolver or FileResolver()
        self.payments_file = payments_file

    def payments(self) -> list[PaymentRecord]:
        return load_payments(self.payments_file, self.resolver)

    def members(self, filename: Optional[str] = None) -> list[MemberRecord]:
        return load_members(validate_member_file(filename), self.resolver)

    def file_status(self) -> dict[str, Optional[str]]:
        """Resolved path (or None) for every known source file."""
        status = {}
        for name in (self.payments_file, *MEMBER_FILES):
            path = self.resolver.available(name)
            status[name] = str(path) if path is not None else None
        return status
