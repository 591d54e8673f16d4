"""Filesystem helpers shared by the workspace store and the launcher."""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path

FILE_MODE = 0o644


def atomic_write(path: Path, data: str, *, mode: int = FILE_MODE) -> None:
    """Replace ``path`` with ``data`` so readers see the old or the new file, never a mix.

    The temp file lives in the target directory (``os.replace`` is atomic
    there) and gets ``mode`` before the swap, since ``mkstemp`` creates 0600.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def remove_tree(path: Path) -> None:
    """Delete a directory and everything under it."""
    shutil.rmtree(path)
