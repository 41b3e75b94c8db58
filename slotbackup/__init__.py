"""slotbackup - Rotating slot backups for a single data file.

Keeps the last ten snapshots of a document in a plain directory so that a
bad write can be rolled back.
"""

from .core import SLOT_COUNT, BackupInfo, BackupManager
from .errors import BackupDirectoryError, BackupError, BackupNotFoundError, InvalidRetentionError

__version__ = "1.0.0"

__all__ = [
    "SLOT_COUNT",
    "BackupInfo",
    "BackupManager",
    "BackupError",
    "BackupDirectoryError",
    "BackupNotFoundError",
    "InvalidRetentionError",
]
