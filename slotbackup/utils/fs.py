"""File system utilities for slotbackup.

Provides atomic writes and copies, directory creation, and safe file operations.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any


def _replace_via_temp(path: Path, fill) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)

    # Create temp file in same directory for atomic rename
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp"
    )

    try:
        fill(fd, tmp_path)
        os.replace(tmp_path, path)
    except Exception:
        # Clean up temp file on failure
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def atomic_write(file_path: Path | str, content: str | bytes, mode: str = "w") -> None:
    """Write content atomically using tempfile + rename pattern.

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode ('w' for text, 'wb' for binary)
    """
    def fill(fd: int, _tmp_path: str) -> None:
        with os.fdopen(fd, mode) as f:
            f.write(content)

    _replace_via_temp(Path(file_path), fill)


def atomic_copy(src: Path | str, dst: Path | str) -> None:
    """Copy a file over dst atomically.

    The source is copied into a temp file next to dst and renamed into place,
    so a reader of dst sees either the old or the new content.

    Args:
        src: File to copy
        dst: Destination path (replaced if it exists)
    """
    def fill(fd: int, tmp_path: str) -> None:
        os.close(fd)
        shutil.copyfile(src, tmp_path)

    _replace_via_temp(Path(dst), fill)


def safe_json_load(file_path: Path | str, default: Any = None) -> Any:
    """Safely load JSON file with fallback.

    Args:
        file_path: Path to JSON file
        default: Default value if file doesn't exist or is invalid

    Returns:
        Parsed JSON or default value
    """
    try:
        with open(file_path) as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError):
        return default if default is not None else {}


def safe_stat(file_path: Path | str) -> os.stat_result | None:
    """Get file stats safely.

    Args:
        file_path: Path to stat

    Returns:
        stat_result or None if file doesn't exist
    """
    try:
        return Path(file_path).stat()
    except OSError:
        return None
