"""Per-day archive files.

Layout::

    <data_dir>/
      trades/
        2025-01-15.json
        2025-01-16.json

One file per calendar date, replaced wholesale on re-export. Field order is
fixed (``date``, ``trades``, ``executions``, ``exported_at``) so re-exports
of unchanged data diff cleanly.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Iterator

from tradervue_export.core.errors import ArchiveWriteError, ParseError
from tradervue_export.core.file_io import atomic_write_text
from tradervue_export.core.models import DayArchive
from tradervue_export.core.timeutil import parse_file_date, to_file_date

logger = logging.getLogger(__name__)

TRADES_DIR = "trades"


def render_archive(archive: DayArchive) -> str:
    """Serialize an archive to its on-disk JSON text."""
    exclude = None if archive.executions else {"executions"}
    data = archive.model_dump(mode="json", exclude=exclude)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class ArchiveStore:
    """Reads and writes day archives under ``<data_dir>/trades``."""

    def __init__(self, data_dir: str | Path) -> None:
        self._dir = Path(data_dir) / TRADES_DIR

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, day: date) -> Path:
        return self._dir / f"{to_file_date(day)}.json"

    def write(self, archive: DayArchive) -> Path:
        """Write (or overwrite) the archive for ``archive.date``."""
        path = self.path_for(archive.date)
        try:
            atomic_write_text(path, render_archive(archive))
        except OSError as exc:
            raise ArchiveWriteError(f"saving {to_file_date(archive.date)}: {exc}") from exc
        return path

    def read(self, path: Path) -> DayArchive:
        try:
            return DayArchive.model_validate_json(path.read_text(encoding="utf-8"))
        except ValueError as exc:
            raise ParseError(f"invalid archive {path.name}: {exc}") from exc

    def read_date(self, day: date) -> DayArchive | None:
        path = self.path_for(day)
        if not path.exists():
            return None
        return self.read(path)

    def dates(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[date]:
        """Archived dates within the inclusive filter, ascending."""
        if not self._dir.is_dir():
            return []
        found: list[date] = []
        for path in self._dir.glob("*.json"):
            try:
                day = parse_file_date(path.stem)
            except ParseError:
                continue
            if from_date is not None and day < from_date:
                continue
            if to_date is not None and day > to_date:
                continue
            found.append(day)
        return sorted(found)

    def iter_archives(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> Iterator[DayArchive]:
        """Yield readable archives in date order; unreadable files are skipped."""
        for day in self.dates(from_date, to_date):
            path = self.path_for(day)
            try:
                yield self.read(path)
            except (OSError, ParseError) as exc:
                logger.warning("Skipping unreadable archive %s: %s", path.name, exc)
