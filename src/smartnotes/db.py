"""
Database module for SmartNotes.

SQLite storage for the note repository. The repository hands over its
whole collection on every mutation; save() replaces the stored set inside
a single transaction so a failed write leaves the previous state intact.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Iterator

from pydantic import ValidationError

from smartnotes.config import get_db_path
from smartnotes.exceptions import StorageError
from smartnotes.models import Note

logger = logging.getLogger(__name__)

# Schema version for migrations
SCHEMA_VERSION = 1

SCHEMA = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL DEFAULT '',
    body TEXT NOT NULL DEFAULT '',
    pinned INTEGER NOT NULL DEFAULT 0,
    color_hex TEXT,
    created_at TEXT NOT NULL,               -- ISO 8601
    updated_at TEXT NOT NULL
);

-- Tags keep their per-note insertion order
CREATE TABLE IF NOT EXISTS note_tags (
    note_id TEXT REFERENCES notes(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    tag TEXT NOT NULL,
    PRIMARY KEY (note_id, tag)
);

CREATE INDEX IF NOT EXISTS idx_note_tags_tag ON note_tags(tag);
"""


class NoteStore:
    """SQLite-backed load/save collaborator for NoteRepository."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Ensure database exists and schema is current."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,)
            )

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"Database error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def load(self) -> list[Note]:
        """Load every stored note, oldest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM notes ORDER BY created_at ASC"
            ).fetchall()
            tag_rows = conn.execute(
                "SELECT note_id, tag FROM note_tags ORDER BY note_id, position"
            ).fetchall()

        tags: dict[str, list[str]] = {}
        for row in tag_rows:
            tags.setdefault(row["note_id"], []).append(row["tag"])

        notes = []
        for row in rows:
            try:
                notes.append(Note(
                    id=row["id"],
                    title=row["title"],
                    body=row["body"],
                    tags=tags.get(row["id"], []),
                    pinned=bool(row["pinned"]),
                    color_hex=row["color_hex"],
                    created_at=datetime.fromisoformat(row["created_at"]),
                    updated_at=datetime.fromisoformat(row["updated_at"]),
                ))
            except (ValidationError, ValueError) as e:
                raise StorageError(f"Corrupt note {row['id']}: {e}") from e

        logger.info(f"Loaded {len(notes)} notes from {self.db_path}")
        return notes

    def save(self, notes: Iterable[Note]) -> None:
        """Replace the stored collection with `notes`."""
        notes = list(notes)
        with self._connect() as conn:
            conn.execute("DELETE FROM note_tags")
            conn.execute("DELETE FROM notes")
            conn.executemany("""
                INSERT INTO notes (
                    id, title, body, pinned, color_hex, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """, [
                (
                    note.id,
                    note.title,
                    note.body,
                    int(note.pinned),
                    note.color_hex,
                    note.created_at.isoformat(),
                    note.updated_at.isoformat(),
                )
                for note in notes
            ])
            conn.executemany(
                "INSERT INTO note_tags (note_id, position, tag) VALUES (?, ?, ?)",
                [
                    (note.id, position, tag)
                    for note in notes
                    for position, tag in enumerate(note.tags)
                ],
            )
        logger.debug(f"Saved {len(notes)} notes to {self.db_path}")

    def get_stats(self) -> dict[str, Any]:
        """Get database statistics."""
        with self._connect() as conn:
            total = conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0]
            pinned = conn.execute(
                "SELECT COUNT(*) FROM notes WHERE pinned = 1"
            ).fetchone()[0]
            by_tag = dict(conn.execute("""
                SELECT tag, COUNT(*) FROM note_tags GROUP BY tag ORDER BY tag
            """).fetchall())

            return {
                "total_notes": total,
                "pinned": pinned,
                "by_tag": by_tag,
            }


def export_json(notes: Iterable[Note]) -> str:
    """Serialize notes as one JSON object per note, keyed by id."""
    payload = {note.id: note.model_dump(mode="json") for note in notes}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def import_json(text: str) -> list[Note]:
    """Parse the export_json format back into notes."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object keyed by note id")

    notes = []
    for note_id, data in payload.items():
        if not isinstance(data, dict):
            raise ValueError(f"Note {note_id} is not an object")
        notes.append(Note.model_validate({**data, "id": note_id}))
    return notes
