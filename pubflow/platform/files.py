"""Filesystem helpers."""

from __future__ import annotations

import os
import tempfile
import zipfile
from pathlib import Path

__all__ = ["atomic_write_text", "zip_directory"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def zip_directory(src: Path, dest: Path) -> int:
    """Zip the contents of src into dest (paths relative to src).

    Returns the number of files written. Entries use forward slashes and are
    sorted so the archive is stable for identical inputs.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with zipfile.ZipFile(dest, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path in sorted(src.rglob("*")):
            if not path.is_file():
                continue
            zf.write(path, path.relative_to(src).as_posix())
            count += 1
    return count
