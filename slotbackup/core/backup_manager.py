"""Rotating slot backups for a single data file.

Snapshots live in one directory and are named
``{slot}_{description}_{timestamp}.json``. The directory listing is the only
index: the rotation cursor is recovered from it at construction and every
lookup rescans it.
"""

from __future__ import annotations

import logging
import os
import shutil
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..errors import BackupDirectoryError, BackupNotFoundError, InvalidRetentionError
from ..utils.fs import atomic_copy, safe_stat

logger = logging.getLogger(__name__)

SLOT_COUNT = 10
SEPARATOR = "_"
EXTENSION = "json"
NULL_DESCRIPTION = "null"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def format_timestamp(moment: datetime) -> str:
    """Render a creation time as ``YYYY-MM-DD_HH-MM-SS-mmm``."""
    # Include milliseconds for uniqueness when creating multiple backups quickly
    return moment.strftime(TIMESTAMP_FORMAT) + f"-{moment.microsecond // 1000:03d}"


def build_backup_name(slot: int, description: str | None, moment: datetime) -> str:
    label = NULL_DESCRIPTION if description is None else description
    # Path separators in a label would put the snapshot in a subdirectory
    for sep in (os.sep, os.altsep):
        if sep:
            label = label.replace(sep, "-")
    return f"{slot}{SEPARATOR}{label}{SEPARATOR}{format_timestamp(moment)}.{EXTENSION}"


def extract_index(backup_path: Path | str) -> int | None:
    """Parse the slot index from a snapshot filename.

    The slot is everything before the first underscore and must be a
    non-negative base-10 integer.

    Args:
        backup_path: Snapshot path or bare filename

    Returns:
        The slot, or None if the name does not follow the snapshot grammar
    """
    filename = Path(backup_path).name
    head, sep, _ = filename.partition(SEPARATOR)
    if not sep:
        return None
    if not (head.isascii() and head.isdigit()):
        logger.warning("Invalid backup file index format: %s", filename)
        return None
    return int(head)


@dataclass
class BackupInfo:
    """Parsed view of one file in the backup directory."""
    path: Path
    slot: int | None
    description: str
    timestamp: str
    modified: datetime | None
    size: int

    @property
    def has_description(self) -> bool:
        return self.description not in ("", NULL_DESCRIPTION)

    @classmethod
    def from_path(cls, path: Path) -> BackupInfo:
        """Build from a file in the backup directory."""
        slot = extract_index(path)
        description = ""
        timestamp = ""
        if slot is not None:
            # Description may itself contain underscores; the timestamp
            # always occupies the last two separator-delimited fields.
            body = path.stem.split(SEPARATOR, 1)[1]
            parts = body.rsplit(SEPARATOR, 2)
            if len(parts) == 3:
                description = parts[0]
                timestamp = f"{parts[1]}{SEPARATOR}{parts[2]}"
            else:
                description = body

        stat = safe_stat(path)
        return cls(
            path=path,
            slot=slot,
            description=description,
            timestamp=timestamp,
            modified=datetime.fromtimestamp(stat.st_mtime) if stat else None,
            size=stat.st_size if stat else 0,
        )


class BackupManager:
    """Keeps a fixed ring of SLOT_COUNT snapshots of one file.

    Example:
        >>> manager = BackupManager(Path("data/backups"))
        >>> slot = manager.create_indexed_backup(Path("data/book.json"), "delete_John")
        >>> manager.restore_backup_by_index(slot)
    """

    def __init__(self, backup_dir: Path | str | None):
        """Initialize backup manager.

        Args:
            backup_dir: Directory holding the snapshots, created if missing

        Raises:
            BackupDirectoryError: If backup_dir is None or cannot be created
        """
        if backup_dir is None:
            raise BackupDirectoryError("Backup directory path cannot be null.")

        self.backup_dir = Path(backup_dir)
        self._lock = threading.RLock()

        if not self.backup_dir.exists():
            try:
                self.backup_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise BackupDirectoryError(
                    f"Failed to create backup directory: {e}",
                    path=str(self.backup_dir),
                ) from e
            logger.info("Created backup directory at: %s", self.backup_dir)

        self._current_index = self._initial_index()

    @property
    def current_index(self) -> int:
        """Slot the next backup will occupy."""
        return self._current_index

    def _initial_index(self) -> int:
        indices = [
            index
            for index in (extract_index(path) for path in self._files())
            if index is not None
        ]
        if not indices:
            return 0
        return (max(indices) + 1) % SLOT_COUNT

    def _files(self) -> list[Path]:
        return [entry for entry in self.backup_dir.iterdir() if entry.is_file()]

    def create_indexed_backup(self, source_path: Path | str, description: str | None = None) -> int:
        """Copy source_path into the next slot, replacing that slot's snapshot.

        Args:
            source_path: File to back up
            description: Label embedded in the filename (None becomes "null")

        Returns:
            The slot used for the backup

        Raises:
            OSError: If the source cannot be read or the copy fails; the
                rotation cursor is left unchanged
        """
        source = Path(source_path)
        with self._lock:
            if not source.is_file():
                raise FileNotFoundError(f"Backup source not found: {source}")

            slot = self._current_index
            backup_path = self.backup_dir / build_backup_name(slot, description, datetime.now())

            self._delete_slot(slot)
            shutil.copyfile(source, backup_path)
            logger.info(
                "Backup created with index: %d",
                slot,
                extra={"slot": slot, "backup": backup_path.name},
            )

            self._current_index = (slot + 1) % SLOT_COUNT
            return slot

    def _delete_slot(self, slot: int) -> None:
        for path in self._files():
            if extract_index(path) != slot:
                continue
            try:
                path.unlink(missing_ok=True)
                logger.info("Deleted old backup at index %d: %s", slot, path)
            except OSError as e:
                logger.warning("Failed to delete backup: %s - %s", path, e)

    def restore_backup_by_index(self, slot: int) -> Path:
        """Find the snapshot occupying a slot.

        The file is not copied anywhere; see restore_to for write-back.

        Raises:
            BackupNotFoundError: If no file has that slot
        """
        for path in sorted(self._files()):
            if extract_index(path) == slot:
                return path
        raise BackupNotFoundError(slot)

    def restore_to(self, slot: int, target_path: Path | str) -> Path:
        """Copy the snapshot in a slot over target_path.

        Args:
            slot: Slot to restore
            target_path: File to overwrite (e.g. the live data file)

        Returns:
            Path of the snapshot that was restored
        """
        backup_path = self.restore_backup_by_index(slot)
        atomic_copy(backup_path, target_path)
        logger.info(
            "Restored backup %s to %s",
            backup_path.name,
            target_path,
            extra={"slot": slot},
        )
        return backup_path

    def list_backups(self) -> list[Path]:
        """List every file in the backup directory, by ascending slot.

        Files without a valid slot sort first.
        """
        return sorted(self._files(), key=_slot_sort_key)

    def describe_backups(self) -> list[BackupInfo]:
        """Like list_backups, with each filename parsed."""
        return [BackupInfo.from_path(path) for path in self.list_backups()]

    def clean_old_backups(self, max_kept: int) -> int:
        """Keep only the max_kept most recently modified files.

        Slot-agnostic: any regular file in the directory is a candidate,
        including one still occupying a live slot.

        Args:
            max_kept: Number of files to retain

        Returns:
            Number of files deleted

        Raises:
            InvalidRetentionError: If max_kept is below 1
        """
        if max_kept < 1:
            raise InvalidRetentionError(max_kept)

        with self._lock:
            newest_first = sorted(self._files(), key=lambda p: p.name)
            newest_first.sort(key=_modified_time, reverse=True)

            deleted = 0
            for path in newest_first[max_kept:]:
                try:
                    path.unlink(missing_ok=True)
                except OSError as e:
                    logger.warning("Failed to delete old backup: %s - %s", path, e)
                    continue
                deleted += 1
                logger.info("Deleted old backup: %s", path)

            return deleted


def _slot_sort_key(path: Path) -> tuple[int, str]:
    index = extract_index(path)
    return (-1 if index is None else index, path.name)


def _modified_time(path: Path) -> float:
    stat = safe_stat(path)
    if stat is None:
        logger.warning("Failed to get modification time for %s", path)
        return 0.0
    return stat.st_mtime
