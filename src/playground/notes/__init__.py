"""Notes module for playground."""

from .models import Note
from .store import LocalNoteStore, NoteNotFoundError, NoteStore

__all__ = ["Note", "NoteStore", "LocalNoteStore", "NoteNotFoundError"]
