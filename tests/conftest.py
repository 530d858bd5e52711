"""Pytest configuration and shared fixtures."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ironlist.entry import Entry  # noqa: E402


@pytest.fixture
def todo_file(tmp_path):
    """A task file with a mix of dates, tags and one completed entry."""
    path = tmp_path / "todo.txt"
    path.write_text(
        "2025-01-10\tBuy milk\thome,errand\n"
        "2025-01-05\tPay rent\thome,complete\n"
        "2025-01-07\tWrite report\twork\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def sample_entries():
    """[A(complete), B, C(complete), D] in date order."""
    return [
        Entry(date(2025, 1, 1), "A", ["complete"]),
        Entry(date(2025, 1, 2), "B", ["work"]),
        Entry(date(2025, 1, 3), "C", ["home", "Complete"]),
        Entry(date(2025, 1, 4), "D", []),
    ]


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point HOME and the working directory at an empty temp directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("IRONLIST_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return home
