"""Test doubles for SmartNotes."""

from datetime import datetime, timedelta, timezone

from smartnotes.models import Note


class FakeClock:
    """Clock that advances a fixed step on every call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2025, 11, 24, 9, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


class FakeStore:
    """In-memory store that records saves and can be told to fail."""

    def __init__(self, notes: list[Note] | None = None):
        self.notes = list(notes or [])
        self.saves = 0
        self.fail = False

    def load(self) -> list[Note]:
        return list(self.notes)

    def save(self, notes: list[Note]) -> None:
        if self.fail:
            raise OSError("disk full")
        self.saves += 1
        self.notes = list(notes)
