"""Progress cursor persistence (``<data_dir>/state.json``).

Last writer wins. There is no locking: exactly one exporter process may run
against a data directory at a time. Running two concurrently is outside the
supported contract.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from tradervue_export.core.errors import ArchiveWriteError
from tradervue_export.core.file_io import atomic_write_text
from tradervue_export.core.models import ProgressCursor

logger = logging.getLogger(__name__)

STATE_FILE = "state.json"


class StateStore:
    """Load and save the single :class:`ProgressCursor` document."""

    def __init__(self, data_dir: str | Path) -> None:
        self._path = Path(data_dir) / STATE_FILE

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> ProgressCursor | None:
        """Return the saved cursor, or ``None`` when there is none.

        A corrupt document is reported and treated as absent: the next run
        rediscovers the history and rewrites every date, which is safe
        because day archives are idempotent.
        """
        if not self._path.exists():
            return None
        try:
            return ProgressCursor.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning(
                "StateStore: ignoring unreadable cursor %s", self._path, exc_info=True,
            )
            return None

    def save(self, cursor: ProgressCursor) -> None:
        text = json.dumps(cursor.model_dump(mode="json"), indent=2) + "\n"
        try:
            atomic_write_text(self._path, text)
        except OSError as exc:
            raise ArchiveWriteError(f"saving state: {exc}") from exc
        logger.debug("StateStore: saved cursor %s", cursor.last_export_date)
