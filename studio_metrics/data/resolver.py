"""
Locate a named data file across an ordered list of candidate directories.

The working directory differs between local development, containers and
serverless bundles, so every lookup tries each directory in turn and uses the
first readable hit.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from studio_metrics.config import data_dirs_from_env
from studio_metrics.errors import DataFileNotFound


class FileResolver:
    """Ordered directory search for CSV exports."""

    def __init__(self, directories: Optional[Iterable[Path | str]] = None) -> None:
        if directories is None:
            directories = data_dirs_from_env()
        self.directories: list[Path] = [Path(d) for d in directories]

    def candidates(self, filename: str) -> list[Path]:
        return [d / filename for d in self.directories]

    def resolve(self, filename: str) -> Path:
        """Return the first candidate path that exists and can be opened."""
        last_error: Optional[OSError] = None
        tried = self.candidates(filename)
        for path in tried:
            try:
                if not path.is_file():
                    continue
                with path.open("rb"):
                    pass
                return path
            except OSError as exc:
                last_error = exc
                continue
        raise DataFileNotFound(filename, tried, last_error)

    def read_text(self, filename: str) -> str:
        """Resolve and read a file; read failures chain into DataFileNotFound."""
        path = self.resolve(filename)
        try:
            return path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise DataFileNotFound(filename, [path], exc) from exc

    def available(self, filename: str) -> Optional[Path]:
        """Resolved path or None; never raises."""
        try:
            return self.resolve(filename)
        except DataFileNotFound:
            return None
