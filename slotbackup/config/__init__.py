"""Configuration management for slotbackup."""

from .types import RetentionConfig, SlotBackupConfig, StorageConfig
from .loader import ConfigLoader

__all__ = [
    "RetentionConfig",
    "SlotBackupConfig",
    "StorageConfig",
    "ConfigLoader",
]
