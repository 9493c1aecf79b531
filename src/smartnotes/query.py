"""
Query engine for SmartNotes.

Pure functions over a snapshot of notes: tag filter, search filter,
pin-then-recency ordering, and the tag index used for filter chips.
None of these mutate their inputs.
"""

from typing import Iterable

from smartnotes.models import Note


def matches_tag(note: Note, tag: str | None) -> bool:
    """Exact, case-sensitive tag membership. No tag matches everything."""
    if tag is None:
        return True
    return tag in note.tags


def matches_search(note: Note, search: str) -> bool:
    """Case-insensitive substring match across title, body and tags."""
    if not search:
        return True
    needle = search.lower()
    return any(needle in field for field in note.search_text())


def sort_key(note: Note) -> tuple[bool, float]:
    return (note.pinned, note.updated_at.timestamp())


def filter_sort(
    notes: Iterable[Note],
    tag: str | None = None,
    search: str = "",
) -> list[Note]:
    """
    Filter by tag and search text, then order for display.

    Pinned notes come first, each group newest-updated first. The sort
    is stable, so notes with equal keys keep their input order.
    """
    result = [
        note for note in notes
        if matches_tag(note, tag) and matches_search(note, search)
    ]
    # reverse=True keeps equal elements in input order
    result.sort(key=sort_key, reverse=True)
    return result


def tag_index(notes: Iterable[Note]) -> list[str]:
    """Distinct tags in use, sorted ascending."""
    return sorted({tag for note in notes for tag in note.tags})
