"""Durable record of past assistant conversations.

The store keeps conversations most-recently-updated first and capped in
count. Every mutation serializes the full list to local storage before
returning; loading tolerates absent or corrupt data.
"""

import logging

from pydantic import ValidationError

from ..config import CONVERSATIONS_KEY, MAX_CONVERSATIONS
from ..storage import LocalStorage, delete_key, read_json, write_json
from .models import ConversationSession

logger = logging.getLogger(__name__)


class ConversationStore:
    """Capped, most-recent-first collection of conversation sessions."""

    def __init__(
        self,
        storage: LocalStorage,
        key: str = CONVERSATIONS_KEY,
        max_entries: int = MAX_CONVERSATIONS
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._storage = storage
        self._key = key
        self._max_entries = max_entries
        self._conversations: list[ConversationSession] = []

    @property
    def max_entries(self) -> int:
        return self._max_entries

    async def load(self) -> None:
        """Replace in-memory state with the persisted list.

        Absent or corrupt data yields an empty store; individually malformed
        entries are skipped.
        """
        data = await read_json(self._storage, self._key)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("Ignoring persisted conversations: expected a list")
            self._conversations = []
            return

        conversations = []
        for entry in data:
            try:
                conversations.append(ConversationSession.model_validate(entry))
            except ValidationError as e:
                logger.warning("Skipping malformed persisted conversation: %s", e)
        self._conversations = conversations[:self._max_entries]
        logger.debug("Loaded %d conversations", len(self._conversations))

    def list(self) -> tuple[ConversationSession, ...]:
        """Snapshot of all conversations, most recently updated first."""
        return tuple(self._conversations)

    def get(self, conversation_id: str) -> ConversationSession | None:
        return next(
            (c for c in self._conversations if c.id == conversation_id),
            None
        )

    def __len__(self) -> int:
        return len(self._conversations)

    def __contains__(self, conversation_id: object) -> bool:
        return any(c.id == conversation_id for c in self._conversations)

    async def upsert(self, conversation: ConversationSession) -> None:
        """Insert or replace ``conversation`` and move it to the front.

        The least recently updated entries beyond the cap are evicted.
        """
        remaining = [c for c in self._conversations if c.id != conversation.id]
        updated = [conversation, *remaining]
        evicted = updated[self._max_entries:]
        if evicted:
            logger.debug("Evicting %d conversations over the cap", len(evicted))
        self._conversations = updated[:self._max_entries]
        await self._save()

    async def remove(self, conversation_id: str) -> None:
        """Delete a conversation. No-op when absent."""
        if conversation_id not in self:
            return
        self._conversations = [c for c in self._conversations if c.id != conversation_id]
        await self._save()

    async def clear(self) -> None:
        """Remove every conversation."""
        self._conversations = []
        await delete_key(self._storage, self._key)

    async def _save(self) -> None:
        payload = [c.model_dump(mode="json") for c in self._conversations]
        await write_json(self._storage, self._key, payload)
