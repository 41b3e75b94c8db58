"""Environment utilities for slotbackup."""

from __future__ import annotations

import os
from pathlib import Path


def is_debug_mode() -> bool:
    """Check if debug mode is enabled.

    Returns:
        True if SLOTBACKUP_DEBUG is set to a truthy value
    """
    val = os.environ.get("SLOTBACKUP_DEBUG", "").lower()
    return val in ("1", "true", "yes", "on")


def get_home_dir() -> Path:
    """Get user home directory.

    Returns:
        Path to home directory
    """
    return Path.home()


def get_global_dir() -> Path:
    """Get global slotbackup directory (~/.slotbackup).

    Returns:
        Path to global config directory
    """
    return get_home_dir() / ".slotbackup"


def get_project_root_override() -> Path | None:
    """Project root forced through SLOTBACKUP_PROJECT_ROOT, if any."""
    val = os.environ.get("SLOTBACKUP_PROJECT_ROOT")
    if isinstance(val, str) and val.strip():
        return Path(val.strip()).expanduser()
    return None
