"""Core modules for slotbackup."""

from .backup_manager import SLOT_COUNT, BackupInfo, BackupManager, extract_index

__all__ = [
    "SLOT_COUNT",
    "BackupInfo",
    "BackupManager",
    "extract_index",
]
