"""
Note repository for SmartNotes.

Owns the authoritative id -> Note mapping. Every mutation builds a new,
validated Note and swaps it in under a lock, then hands the full snapshot
to the attached store (if any). A failed save rolls the swap back.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, Protocol

from smartnotes.exceptions import NoteNotFoundError
from smartnotes.models import EDITABLE_FIELDS, Note, generate_id, utc_now

logger = logging.getLogger(__name__)


class Store(Protocol):
    """Persistence collaborator."""

    def load(self) -> list[Note]: ...

    def save(self, notes: list[Note]) -> None: ...


class NoteRepository:
    """In-memory note collection with optional write-through persistence."""

    def __init__(
        self,
        store: Store | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.clock = clock or utc_now
        self._notes: dict[str, Note] = {}
        self._lock = threading.Lock()

        if store is not None:
            loaded = store.load()
            self._add_all(loaded)
            logger.info(f"Loaded {len(loaded)} notes")

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    def _add_all(self, notes: Iterable[Note]) -> list[Note]:
        added = []
        for note in notes:
            if note.id in self._notes:
                raise ValueError(f"Duplicate note id: {note.id}")
            self._notes[note.id] = note
            added.append(note)
        return added

    def _require(self, note_id: str) -> Note:
        try:
            return self._notes[note_id]
        except KeyError:
            raise NoteNotFoundError(note_id) from None

    def _next_timestamp(self, note: Note) -> datetime:
        """Current time, never earlier than the note's last update."""
        return max(self.clock(), note.updated_at)

    def _new_id(self) -> str:
        note_id = generate_id()
        while note_id in self._notes:
            note_id = generate_id()
        return note_id

    def _persist(self, previous: dict[str, Note]) -> None:
        """Save the current state, restoring `previous` if the store fails."""
        if self.store is None:
            return
        try:
            self.store.save(list(self._notes.values()))
        except Exception:
            logger.exception("Save failed, rolling back")
            self._notes = previous
            raise

    def _replace(self, note: Note) -> Note:
        previous = dict(self._notes)
        self._notes[note.id] = note
        self._persist(previous)
        return note

    def create(
        self,
        title: str = "",
        body: str = "",
        tags: Iterable[str] = (),
        color_hex: str | None = None,
    ) -> Note:
        """Create a note. Empty title and body are allowed."""
        with self._lock:
            now = self.clock()
            note = Note(
                id=self._new_id(),
                title=title,
                body=body,
                tags=tuple(tags),
                color_hex=color_hex,
                created_at=now,
                updated_at=now,
            )
            self._replace(note)
        logger.debug(f"Created note {note.id}")
        return note

    def get(self, note_id: str) -> Note:
        """Get a single note by id."""
        return self._require(note_id)

    def resolve(self, prefix: str) -> str:
        """
        Expand a unique id prefix to the full id.

        Raises:
            NoteNotFoundError: if nothing matches
            ValueError: if more than one id matches
        """
        if prefix in self._notes:
            return prefix
        if not prefix:
            raise NoteNotFoundError(prefix)
        with self._lock:
            matches = [note_id for note_id in self._notes if note_id.startswith(prefix)]
        if len(matches) > 1:
            raise ValueError(f"Ambiguous id prefix: {prefix}")
        if not matches:
            raise NoteNotFoundError(prefix)
        return matches[0]

    def update(self, note_id: str, **fields: Any) -> Note:
        """
        Apply field changes to a note and bump updated_at.

        Only title, body, tags and color_hex may be changed. Passing
        color_hex=None clears the colour.

        Raises:
            NoteNotFoundError: if the id is absent
            ValueError: for unknown fields or invalid values
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self._lock:
            current = self._require(note_id)
            data = current.model_dump()
            data.update(fields)
            data["updated_at"] = self._next_timestamp(current)
            # Full validation before anything is swapped in
            note = Note.model_validate(data)
            self._replace(note)
        logger.debug(f"Updated note {note_id}: {sorted(fields)}")
        return note

    def toggle_pin(self, note_id: str) -> Note:
        """Flip the pinned flag."""
        with self._lock:
            current = self._require(note_id)
            note = current.model_copy(
                update={
                    "pinned": not current.pinned,
                    "updated_at": self._next_timestamp(current),
                }
            )
            self._replace(note)
        logger.debug(f"Note {note_id} pinned={note.pinned}")
        return note

    def delete(self, note_id: str) -> None:
        """Remove a note. Deleting an absent id raises NoteNotFoundError."""
        with self._lock:
            self._require(note_id)
            previous = dict(self._notes)
            del self._notes[note_id]
            self._persist(previous)
        logger.debug(f"Deleted note {note_id}")

    def import_notes(self, notes: Iterable[Note]) -> list[Note]:
        """Add existing notes, keeping their ids and timestamps."""
        with self._lock:
            previous = dict(self._notes)
            try:
                added = self._add_all(notes)
            except ValueError:
                self._notes = previous
                raise
            self._persist(previous)
        logger.info(f"Imported {len(added)} notes")
        return added

    def list(self) -> list[Note]:
        """Snapshot of all notes in no particular order."""
        with self._lock:
            return list(self._notes.values())

    def __iter__(self) -> Iterator[Note]:
        return iter(self.list())
