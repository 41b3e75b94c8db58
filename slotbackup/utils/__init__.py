"""Utility modules for slotbackup."""

from .fs import atomic_copy, atomic_write, safe_json_load, safe_stat
from .env import get_global_dir, get_home_dir, get_project_root_override, is_debug_mode

__all__ = [
    "atomic_copy",
    "atomic_write",
    "safe_json_load",
    "safe_stat",
    "get_global_dir",
    "get_home_dir",
    "get_project_root_override",
    "is_debug_mode",
]
