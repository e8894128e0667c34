"""Atomic writes for generated hook files.

A shell may source a hook file at any moment (every new terminal does), so a
hook is written to a sibling temp file and renamed over the target. On the
same filesystem the rename is atomic: readers see the old hook or the new
one, never a truncated script.
"""

from __future__ import annotations

import os
from pathlib import Path


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write *content* to *path* via temp file + rename.

    Parent directories are created as needed. An existing file's permission
    bits are carried over to the replacement.

    Raises:
        OSError: If the write or rename fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f".{path.name}.tmp")

    try:
        temp_path.write_text(content, encoding=encoding)
        if path.exists():
            os.chmod(temp_path, path.stat().st_mode & 0o7777)
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
