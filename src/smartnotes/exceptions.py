"""Exceptions raised by the SmartNotes core."""


class SmartNotesError(Exception):
    """Base class for SmartNotes errors."""

    code = "smartnotes_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoteNotFoundError(SmartNotesError):
    """An operation referenced a note id the repository does not hold."""

    code = "note_not_found"

    def __init__(self, note_id: str):
        super().__init__(f"Note not found: {note_id}")
        self.note_id = note_id


class StorageError(SmartNotesError):
    """The persistence layer failed to load or save notes."""

    code = "storage_error"
