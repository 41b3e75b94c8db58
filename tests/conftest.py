from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolate_home(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Prevent developer machine `~/.slotbackup/config.json` from influencing tests."""

    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("SLOTBACKUP_DEBUG", raising=False)
    monkeypatch.delenv("SLOTBACKUP_PROJECT_ROOT", raising=False)
