"""Safe file I/O utilities.

Provides an atomic whole-file replace for JSON documents: the payload is
written to a sibling temp file, ``fsync``-ed, then renamed over the target,
so a crash mid-write leaves either the old file or the new one, never a
truncated mix.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def atomic_write_text(path: Path, text: str) -> None:
    """Replace *path* with *text* atomically.

    * The temp file lives in the target directory so ``os.replace`` stays
      on one filesystem.
    * ``os.fsync`` ensures the data hits disk before the rename.
    * Parent directories are created as needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
