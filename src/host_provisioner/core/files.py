"""Atomic file writes."""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

_DEFAULT_MODE = 0o644


def write_atomic(
    path: Path | str, write: Callable[[IO[bytes]], None], *, mode: int | None = None
) -> None:
    """Write *path* through a temp file in the same directory, then rename over it.

    *write* receives the open binary temp file. Readers never observe a
    partially written file; on failure the previous content is left in place.
    Without *mode*, an existing file keeps its permissions and a new one gets
    0644.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if mode is None:
        try:
            mode = stat.S_IMODE(path.stat().st_mode)
        except FileNotFoundError:
            mode = _DEFAULT_MODE

    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    tmp_file = Path(tmp_path)
    try:
        with os.fdopen(fd, "wb") as f:
            write(f)
            f.flush()
            os.fsync(f.fileno())
        tmp_file.chmod(mode)
        tmp_file.replace(path)
    finally:
        with contextlib.suppress(FileNotFoundError):
            tmp_file.unlink()
    logger.debug("Wrote %s (mode %o)", path, mode)


def write_text_atomic(path: Path | str, text: str, *, mode: int | None = None) -> None:
    write_atomic(path, lambda f: f.write(text.encode("utf-8")), mode=mode)
