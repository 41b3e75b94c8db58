"""
Error types for slotbackup.

This module defines the exceptions raised by the backup manager:
- BackupError: Base exception
- BackupDirectoryError: Backup directory missing or not creatable
- BackupNotFoundError: No snapshot occupies the requested slot
- InvalidRetentionError: Retention count below 1

Plain I/O failures (unreadable source, unwritable destination) are not
wrapped; they surface as the built-in OSError family.
"""

from __future__ import annotations

from typing import Any


class BackupError(Exception):
    """Base exception for all slotbackup errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "BACKUP_ERROR"
        self.details = details or {}


class BackupDirectoryError(BackupError):
    """The backup directory is undefined or could not be created."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(
            message,
            code="DIRECTORY_ERROR",
            details={"path": path},
        )
        self.path = path


class BackupNotFoundError(BackupError, LookupError):
    """No snapshot currently occupies the requested slot."""

    def __init__(self, slot: int) -> None:
        super().__init__(
            f"Backup with index {slot} not found.",
            code="NOT_FOUND",
            details={"slot": slot},
        )
        self.slot = slot


class InvalidRetentionError(BackupError, ValueError):
    """Retention cleanup was asked to keep fewer than one file."""

    def __init__(self, max_kept: int) -> None:
        super().__init__(
            "max_kept must be at least 1.",
            code="INVALID_ARGUMENT",
            details={"max_kept": max_kept},
        )
        self.max_kept = max_kept
