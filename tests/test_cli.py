"""Tests for the command line front-end."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest

from slotbackup.app import cli
from slotbackup.core.backup_manager import extract_index


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """cli.main reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Project with a configured source file."""
    root = tmp_path / "project"
    (root / ".slotbackup").mkdir(parents=True)
    (root / ".slotbackup" / "config.json").write_text(json.dumps({"source": "book.json"}))
    (root / "book.json").write_text('{"persons": []}')
    monkeypatch.setenv("SLOTBACKUP_PROJECT_ROOT", str(root))
    return root


def _backup_dir(project: Path) -> Path:
    return project / ".slotbackup" / "backups"


def test_save_and_list(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["save", "add", "Alice"]) == 0
    assert cli.main(["save"]) == 0

    out = capsys.readouterr().out
    assert "Saved slot 0: 0_add Alice_" in out
    assert "Saved slot 1: 1_null_" in out

    assert cli.main(["list"]) == 0
    listing = capsys.readouterr().out
    assert "add Alice" in listing
    assert "(no description)" in listing


def test_list_empty(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["list"]) == 0
    assert "No backups found." in capsys.readouterr().out


def test_save_without_source(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv("SLOTBACKUP_PROJECT_ROOT", str(tmp_path / "empty"))

    assert cli.main(["save"]) == 2
    assert "no source file" in capsys.readouterr().err


def test_save_missing_source(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["save", "--source", str(project / "missing.json")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_restore_overwrites_source(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["save", "before"])
    (project / "book.json").write_text("broken")

    assert cli.main(["restore", "0", "--yes"]) == 0

    assert (project / "book.json").read_text() == '{"persons": []}'
    assert "Restored slot 0" in capsys.readouterr().out


def test_restore_to_other_file(project: Path, tmp_path: Path) -> None:
    cli.main(["save"])
    target = tmp_path / "copy.json"

    assert cli.main(["restore", "0", "--to", str(target), "--yes"]) == 0
    assert target.read_text() == '{"persons": []}'


def test_restore_canceled(project: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    cli.main(["save"])
    (project / "book.json").write_text("current")
    monkeypatch.setattr("builtins.input", lambda prompt: "n")

    assert cli.main(["restore", "0"]) == 0
    assert (project / "book.json").read_text() == "current"
    assert "Canceled." in capsys.readouterr().out


def test_restore_missing_slot(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["restore", "3", "--yes"]) == 1
    assert "Backup with index 3 not found." in capsys.readouterr().err


def test_clean(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    for i in range(4):
        cli.main(["save", f"step{i}"])
    for path in _backup_dir(project).iterdir():
        mtime = 1_700_000_000 + extract_index(path) * 60
        os.utime(path, (mtime, mtime))

    assert cli.main(["clean", "--keep", "1"]) == 0

    remaining = list(_backup_dir(project).iterdir())
    assert [extract_index(p) for p in remaining] == [3]
    assert "Deleted 3 backups (keeping 1)." in capsys.readouterr().out


def test_clean_rejects_zero(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["save"])

    assert cli.main(["clean", "--keep", "0"]) == 2
    assert len(list(_backup_dir(project).iterdir())) == 1


def test_restore_without_stdin(project: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    cli.main(["save"])
    (project / "book.json").write_text("current")

    def closed_stdin(prompt: str) -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", closed_stdin)

    assert cli.main(["restore", "0"]) == 0
    assert (project / "book.json").read_text() == "current"
    assert "Canceled." in capsys.readouterr().out


def test_save_reports_cleanup_failure(project: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    (project / ".slotbackup" / "config.json").write_text(
        json.dumps({"source": "book.json", "retention": {"maxKept": 1, "cleanAfterBackup": True}})
    )

    def failing_clean(self, max_kept: int) -> int:
        raise PermissionError("backup directory not writable")

    monkeypatch.setattr(cli.BackupManager, "clean_old_backups", failing_clean)

    assert cli.main(["save", "first"]) == 1

    captured = capsys.readouterr()
    assert "Saved slot 0" in captured.out
    assert "Error: backup directory not writable" in captured.err


def test_clean_reports_failure(project: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    def failing_clean(self, max_kept: int) -> int:
        raise PermissionError("backup directory not listable")

    monkeypatch.setattr(cli.BackupManager, "clean_old_backups", failing_clean)

    assert cli.main(["clean", "--keep", "1"]) == 1
    assert "Error: backup directory not listable" in capsys.readouterr().err


def test_clean_after_backup(project: Path) -> None:
    (project / ".slotbackup" / "config.json").write_text(
        json.dumps({"source": "book.json", "retention": {"maxKept": 2, "cleanAfterBackup": True}})
    )

    for i in range(5):
        assert cli.main(["save", f"s{i}"]) == 0

    assert len(list(_backup_dir(project).iterdir())) == 2


def test_dir_override(project: Path, tmp_path: Path) -> None:
    other = tmp_path / "other-backups"

    assert cli.main(["--dir", str(other), "save"]) == 0

    assert len(list(other.iterdir())) == 1
    assert not _backup_dir(project).exists()


def test_no_command_prints_help(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([]) == 2
    assert "usage: slotbackup" in capsys.readouterr().out


def test_debug_flag_enables_logging(project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SLOTBACKUP_DEBUG", "0")

    cli.main(["--debug", "list"])

    assert logging.getLogger().level == logging.DEBUG
