"""
Error taxonomy shared by the loader, the data source and the API layer.
"""
from __future__ import annotations

from pathlib import Path
from typing import Sequence


class StudioMetricsError(Exception):
    """Base class for every error raised by this package."""


class DataFileNotFound(StudioMetricsError, FileNotFoundError):
    """None of the candidate directories yielded a readable file."""

    def __init__(self, filename: str, tried: Sequence[Path] = (), last_error: BaseException | None = None):
        self.filename = filename
        self.tried = list(tried)
        self.last_error = last_error
        detail = f"{last_error}" if last_error is not None else "no candidate path exists"
        super().__init__(
            f"Could not find {filename} in any of the expected locations "
            f"({', '.join(str(p) for p in self.tried) or 'none configured'}). Last error: {detail}"
        )

    def __str__(self) -> str:
        return self.args[0]


class InvalidParameter(StudioMetricsError, ValueError):
    """A caller-supplied parameter is outside its allowed values."""

    def __init__(self, name: str, value: object, allowed: Sequence[str]):
        self.name = name
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Invalid {name} parameter. Must be {' or '.join(self.allowed)}"
        )
