"""Configuration schemas for slotbackup.

Defines dataclasses for all configuration structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_BACKUP_DIR = ".slotbackup/backups"
DEFAULT_MAX_KEPT = 10


@dataclass
class StorageConfig:
    """Where snapshots are stored."""
    backup_dir: str = DEFAULT_BACKUP_DIR  # relative paths resolve against the project root

    @classmethod
    def from_dict(cls, data: dict) -> StorageConfig:
        """Create StorageConfig from dictionary."""
        backup_dir = data.get("backupDir")
        if not isinstance(backup_dir, str) or not backup_dir.strip():
            backup_dir = DEFAULT_BACKUP_DIR
        return cls(backup_dir=backup_dir)


@dataclass
class RetentionConfig:
    """Retention trimming settings."""
    max_kept: int = DEFAULT_MAX_KEPT
    clean_after_backup: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> RetentionConfig:
        """Create RetentionConfig from dictionary."""
        max_kept = data.get("maxKept", DEFAULT_MAX_KEPT)
        if isinstance(max_kept, bool) or not isinstance(max_kept, int) or max_kept < 1:
            max_kept = DEFAULT_MAX_KEPT
        return cls(
            max_kept=max_kept,
            clean_after_backup=bool(data.get("cleanAfterBackup", False)),
        )


@dataclass
class SlotBackupConfig:
    """Main slotbackup configuration."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    retention: RetentionConfig = field(default_factory=RetentionConfig)
    source: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> SlotBackupConfig:
        """Create SlotBackupConfig from dictionary."""
        storage_data = data.get("storage", {})
        retention_data = data.get("retention", {})
        source = data.get("source")

        return cls(
            storage=StorageConfig.from_dict(storage_data if isinstance(storage_data, dict) else {}),
            retention=RetentionConfig.from_dict(retention_data if isinstance(retention_data, dict) else {}),
            source=source if isinstance(source, str) and source.strip() else None,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data: dict = {
            "storage": {"backupDir": self.storage.backup_dir},
            "retention": {
                "maxKept": self.retention.max_kept,
                "cleanAfterBackup": self.retention.clean_after_backup,
            },
        }
        if self.source is not None:
            data["source"] = self.source
        return data
