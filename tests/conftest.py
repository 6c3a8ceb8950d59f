from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console


@pytest.fixture
def fake_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def log_console() -> Console:
    return Console(file=io.StringIO(), width=500, color_system=None)
