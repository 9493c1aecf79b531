"""Common test fixtures for SmartNotes."""

import pytest

from smartnotes.db import NoteStore
from smartnotes.repository import NoteRepository
from tests.fakes import FakeClock


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep config and data paths inside the test's tmp dir."""
    monkeypatch.setenv("SMARTNOTES_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("NO_COLOR", "1")
    yield tmp_path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repo(clock):
    """In-memory repository with a deterministic clock."""
    return NoteRepository(clock=clock)


@pytest.fixture
def store(tmp_path):
    """SQLite store in a temporary directory."""
    return NoteStore(tmp_path / "notes.db")


@pytest.fixture
def stored_repo(store, clock):
    """Repository writing through to the temporary store."""
    return NoteRepository(store=store, clock=clock)
