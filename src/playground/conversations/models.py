"""Data models for assistant conversations.

These models define the structure of chat messages and conversation
sessions, independent of the storage backend used.
"""

import secrets
import string
import time
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from ..config import TITLE_ELLIPSIS, TITLE_MAX_LENGTH
from ..llm.models import CompletionMessage, MessageRole

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def make_id(prefix: str) -> str:
    """Build an opaque id like ``user_1760870400000_k3j9x0a1b``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def make_title(text: str) -> str:
    """Derive a conversation title from its first user message.

    Messages longer than 50 characters are cut to 50 and get "..." appended.
    """
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS
    return text


class ChatMessage(BaseModel):
    """A single message in a conversation. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def create(
        cls,
        role: MessageRole,
        content: str,
        timestamp: datetime | None = None
    ) -> "ChatMessage":
        """Create a message with a fresh id."""
        return cls(
            id=make_id(role.value),
            role=role,
            content=content,
            timestamp=timestamp or _utcnow(),
        )

    def to_completion_message(self) -> CompletionMessage:
        """Strip id and timestamp for sending to a completion gateway."""
        return CompletionMessage(role=self.role.value, content=self.content)


class ConversationSession(BaseModel):
    """A conversation with the assistant.

    Messages are append-only and chronological. The title is fixed at
    creation; ``updated_at`` moves forward on every append.
    """

    id: str = Field(default_factory=lambda: make_id("conv"))
    title: str
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def start(cls, messages: list[ChatMessage]) -> "ConversationSession":
        """Create a conversation titled after its first user message."""
        first_user = next(
            (m for m in messages if m.role == MessageRole.USER),
            None
        )
        now = _utcnow()
        return cls(
            title=make_title(first_user.content if first_user else ""),
            messages=list(messages),
            created_at=now,
            updated_at=now,
        )

    def with_messages(self, messages: list[ChatMessage]) -> "ConversationSession":
        """Return a copy holding ``messages`` with ``updated_at`` bumped.

        Raises:
            ValueError: If ``messages`` does not extend the current sequence
        """
        if messages[:len(self.messages)] != self.messages:
            raise ValueError("Conversation messages are append-only")
        return self.model_copy(update={
            "messages": list(messages),
            "updated_at": max(_utcnow(), self.updated_at),
        })
