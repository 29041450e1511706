"""Per-user note collections.

The document database is an external collaborator; ``NoteStore`` is the
narrow interface the rest of the application depends on.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from pydantic import ValidationError

from ..config import NOTES_KEY_PREFIX
from ..storage import LocalStorage, read_json
from .models import Note

logger = logging.getLogger(__name__)


class NoteNotFoundError(LookupError):
    """No note with the given id exists for the user."""


class NoteStore(ABC):
    """Abstract per-user note collection."""

    @abstractmethod
    async def add_note(self, note: Note) -> Note:
        """Persist a new note.

        Raises:
            Exception: Backend-specific errors; unlike local caches, a failed
                write is reported to the caller
        """

    @abstractmethod
    async def list_notes(self, user_id: str) -> list[Note]:
        """Return a user's notes, newest first."""

    @abstractmethod
    async def update_note(
        self,
        user_id: str,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
        tags: list[str] | None = None
    ) -> Note:
        """Change the given fields of a note and bump its ``updated_at``.

        Raises:
            NoteNotFoundError: If the user has no such note
        """

    @abstractmethod
    async def delete_note(self, user_id: str, note_id: str) -> None:
        """Delete a note. No-op when absent."""


class LocalNoteStore(NoteStore):
    """Note collection kept in local storage under ``notes:<user_id>``."""

    def __init__(self, storage: LocalStorage):
        self._storage = storage

    async def add_note(self, note: Note) -> Note:
        notes = await self.list_notes(note.user_id)
        await self._write(note.user_id, [note, *notes])
        logger.info("Saved note %s for user %s", note.id, note.user_id)
        return note

    async def list_notes(self, user_id: str) -> list[Note]:
        data = await read_json(self._storage, self._key(user_id))
        if not isinstance(data, list):
            return []

        notes = []
        for entry in data:
            try:
                notes.append(Note.model_validate(entry))
            except ValidationError as e:
                logger.warning("Skipping malformed note for user %s: %s", user_id, e)
        return notes

    async def update_note(
        self,
        user_id: str,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
        tags: list[str] | None = None
    ) -> Note:
        notes = await self.list_notes(user_id)
        index = next((i for i, n in enumerate(notes) if n.id == note_id), None)
        if index is None:
            raise NoteNotFoundError(f"Note not found: {note_id}")

        changes: dict[str, object] = {"updated_at": datetime.now(timezone.utc)}
        if title is not None:
            changes["title"] = title
        if content is not None:
            changes["content"] = content
        if tags is not None:
            changes["tags"] = list(tags)

        # Position is kept: the list is ordered by creation
        updated = notes[index].model_copy(update=changes)
        notes[index] = updated
        await self._write(user_id, notes)
        return updated

    async def delete_note(self, user_id: str, note_id: str) -> None:
        notes = await self.list_notes(user_id)
        remaining = [n for n in notes if n.id != note_id]
        if len(remaining) != len(notes):
            await self._write(user_id, remaining)

    async def _write(self, user_id: str, notes: list[Note]) -> None:
        payload = json.dumps([n.model_dump(mode="json") for n in notes])
        await self._storage.set_item(self._key(user_id), payload)

    @staticmethod
    def _key(user_id: str) -> str:
        return f"{NOTES_KEY_PREFIX}{user_id}"
