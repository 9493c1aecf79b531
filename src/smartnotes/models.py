"""
Note model for SmartNotes.

A Note is an immutable value: the repository replaces it with a new
instance on every mutation, so any Note handed to a caller is already a
snapshot.
"""

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HEX_COLOR = re.compile(r"^#(?:[0-9A-F]{3}|[0-9A-F]{6})$")

# Fields a caller may change through NoteRepository.update
EDITABLE_FIELDS = frozenset({"title", "body", "tags", "color_hex"})


def generate_id() -> str:
    """Generate an opaque, never-reused note id."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


def normalize_tags(tags: Any) -> tuple[str, ...]:
    """Strip, drop empties and dedupe while keeping first-seen order."""
    if tags is None:
        return ()
    if isinstance(tags, str):
        tags = [tags]
    seen: dict[str, None] = {}
    for tag in tags:
        name = str(tag).strip()
        if name:
            seen.setdefault(name, None)
    return tuple(seen)


class Note(BaseModel):
    """A single user-authored text record."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_id, min_length=1)
    title: str = Field(default="", description="May be empty")
    body: str = Field(default="", description="May be empty")
    tags: tuple[str, ...] = Field(default_factory=tuple)
    pinned: bool = False
    color_hex: str | None = Field(default=None, description="#RGB or #RRGGBB, display only")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> tuple[str, ...]:
        return normalize_tags(value)

    @field_validator("color_hex", mode="before")
    @classmethod
    def _normalize_color(cls, value: Any) -> str | None:
        if value is None:
            return None
        color = str(value).strip().upper()
        if not color:
            return None
        if not color.startswith("#"):
            color = "#" + color
        if not HEX_COLOR.match(color):
            raise ValueError(f"Invalid colour: {value!r}")
        return color

    @field_validator("created_at", "updated_at")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        # Naive timestamps are taken to be UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Note":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not precede created_at")
        return self

    @property
    def display_title(self) -> str:
        """Title as shown in lists."""
        return self.title if self.title.strip() else "Untitled"

    @property
    def preview(self) -> str:
        return self.body.strip()

    def first_tags(self, n: int = 3) -> tuple[str, ...]:
        return self.tags[:n]

    def search_text(self) -> tuple[str, str, str]:
        """Lowercased title, body and space-joined tags."""
        return self.title.lower(), self.body.lower(), " ".join(self.tags).lower()


def sample_notes(now: datetime | None = None) -> list[Note]:
    """Starter notes, one day apart, newest first."""
    now = now or utc_now()
    samples = [
        ("Grocery List", "Milk, Bread, Eggs", ["errands"]),
        ("App Idea", "A note app that tracks github streaks.", ["ideas", "dev"]),
        ("Meeting Notes", "Discuss project roadmap.", ["work"]),
    ]
    notes = []
    for days_ago, (title, body, tags) in enumerate(samples):
        stamp = now - timedelta(days=days_ago)
        notes.append(Note(title=title, body=body, tags=tags, created_at=stamp, updated_at=stamp))
    return notes
