"""notevault: notes with self-maintaining backlinks."""

__version__ = "0.1.0"

from notevault.errors import NotFoundError, PersistenceError, ValidationError, VaultError
from notevault.links import apply_content_update, symmetry_violations, unlink_note
from notevault.note import Note, Template
from notevault.parser import parse_references
from notevault.service import NoteService
from notevault.store import NoteStore

__all__ = [
    "Note",
    "Template",
    "NoteStore",
    "NoteService",
    "parse_references",
    "apply_content_update",
    "unlink_note",
    "symmetry_violations",
    "VaultError",
    "NotFoundError",
    "ValidationError",
    "PersistenceError",
]
