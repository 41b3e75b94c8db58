"""slotbackup CLI.

Commands:
- `slotbackup save [message]`: snapshot the configured source into the next slot.
- `slotbackup list`: show occupied slots.
- `slotbackup restore N`: copy slot N back over the source.
- `slotbackup clean`: keep only the most recently modified snapshots.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .. import __version__
from ..config import ConfigLoader, SlotBackupConfig
from ..core.backup_manager import BackupManager
from ..errors import BackupError, BackupNotFoundError
from ..utils.env import get_project_root_override, is_debug_mode


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slotbackup",
        description="Rotating slot backups for a single data file",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )
    parser.add_argument(
        "--dir",
        dest="backup_dir",
        help="Backup directory (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command")

    save = subparsers.add_parser("save", help="Back up the source file into the next slot")
    save.add_argument("message", nargs="*", help="Optional description")
    save.add_argument("--source", help="File to back up (overrides config)")

    subparsers.add_parser("list", help="List backups by slot")

    restore = subparsers.add_parser("restore", help="Copy a slot's backup over the source file")
    restore.add_argument("slot", type=int, help="Slot to restore")
    restore.add_argument("--to", dest="target", help="File to overwrite (defaults to the source)")
    restore.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    clean = subparsers.add_parser("clean", help="Delete all but the most recent backups")
    clean.add_argument("--keep", type=int, help="Number of backups to keep (defaults to config)")

    return parser


def configure_logging(debug: bool) -> None:
    """Route library logging to stderr."""
    level = logging.DEBUG if debug else logging.WARNING
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]


def main(args: list[str] | None = None) -> int:
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.debug:
        os.environ["SLOTBACKUP_DEBUG"] = "1"
    configure_logging(is_debug_mode())

    if not parsed.command:
        parser.print_help()
        return 2

    loader = ConfigLoader(project_root=get_project_root_override() or Path.cwd())
    config = loader.config
    backup_dir = Path(parsed.backup_dir).expanduser() if parsed.backup_dir else loader.resolve_backup_dir()

    try:
        manager = BackupManager(backup_dir)
    except BackupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed.command == "save":
        return cmd_save(parsed, manager, loader, config)
    if parsed.command == "list":
        return cmd_list(manager)
    if parsed.command == "restore":
        return cmd_restore(parsed, manager, loader)
    if parsed.command == "clean":
        return cmd_clean(parsed, manager, config)

    parser.print_help()
    return 2


def cmd_save(
    args: argparse.Namespace,
    manager: BackupManager,
    loader: ConfigLoader,
    config: SlotBackupConfig,
) -> int:
    source = _resolve_source(args, loader)
    if source is None:
        print("Error: no source file (set \"source\" in config or pass --source)", file=sys.stderr)
        return 2

    description = " ".join(args.message).strip() or None
    try:
        slot = manager.create_indexed_backup(source, description)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    saved = manager.restore_backup_by_index(slot)
    print(f"Saved slot {slot}: {saved.name}")

    if config.retention.clean_after_backup:
        try:
            deleted = manager.clean_old_backups(config.retention.max_kept)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if deleted:
            print(f"Deleted {deleted} old backups.")
    return 0


def cmd_list(manager: BackupManager) -> int:
    backups = manager.describe_backups()
    if not backups:
        print("No backups found.")
        return 0

    print("Slot  Modified             Size      Description")
    for info in backups:
        slot = "-" if info.slot is None else str(info.slot)
        modified = info.modified.strftime("%Y-%m-%d %H:%M:%S") if info.modified else "?"
        if info.slot is None:
            desc = info.path.name
        else:
            desc = info.description if info.has_description else "(no description)"
        print(f"{slot:<5} {modified:<20} {info.size:<9} {desc}")
    return 0


def cmd_restore(args: argparse.Namespace, manager: BackupManager, loader: ConfigLoader) -> int:
    target = Path(args.target).expanduser() if args.target else loader.resolve_source()
    if target is None:
        print("Error: no restore target (set \"source\" in config or pass --to)", file=sys.stderr)
        return 2

    try:
        backup_path = manager.restore_backup_by_index(args.slot)
    except BackupNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.yes:
        try:
            confirm = input(f"Overwrite {target} with {backup_path.name}? [y/N] ").strip().lower()
        except EOFError:
            confirm = ""
        if confirm != "y":
            print("Canceled.")
            return 0

    try:
        manager.restore_to(args.slot, target)
    except (BackupNotFoundError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Restored slot {args.slot} to {target}")
    return 0


def cmd_clean(args: argparse.Namespace, manager: BackupManager, config: SlotBackupConfig) -> int:
    keep = args.keep if args.keep is not None else config.retention.max_kept
    if keep < 1:
        print("Keep must be >= 1", file=sys.stderr)
        return 2

    try:
        deleted = manager.clean_old_backups(keep)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Deleted {deleted} backups (keeping {keep}).")
    return 0


def _resolve_source(args: argparse.Namespace, loader: ConfigLoader) -> Path | None:
    if getattr(args, "source", None):
        return Path(args.source).expanduser()
    return loader.resolve_source()


if __name__ == "__main__":
    sys.exit(main())
