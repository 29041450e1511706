"""Unit tests for conversation models and the conversation store."""
import json
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from playground.config import CONVERSATIONS_KEY
from playground.conversations import ChatMessage, ConversationSession, ConversationStore, make_id, make_title
from playground.llm import MessageRole
from playground.storage import InMemoryStorage


def conversation(text: str = "hello", updated_at: datetime | None = None) -> ConversationSession:
    session = ConversationSession.start([ChatMessage.create(MessageRole.USER, text)])
    if updated_at is not None:
        session = session.model_copy(update={"updated_at": updated_at})
    return session


class TestTitles:
    def test_short_text_is_title(self):
        assert make_title("hello") == "hello"

    def test_long_text_is_truncated(self):
        text = "x" * 80
        assert make_title(text) == "x" * 50 + "..."

    @given(st.text())
    def test_title_length_bound(self, text: str):
        """Property test: titles never exceed 50 characters plus the ellipsis."""
        title = make_title(text)
        assert len(title) <= 53
        assert text.startswith(title.removesuffix("...")) or title == text


class TestModels:
    def test_ids_are_prefixed_and_unique(self):
        ids = {make_id("user") for _ in range(50)}
        assert len(ids) == 50
        assert all(i.startswith("user_") for i in ids)

    def test_start_uses_first_user_message(self):
        session = ConversationSession.start([
            ChatMessage.create(MessageRole.USER, "plan my week"),
            ChatMessage.create(MessageRole.ASSISTANT, "Sure"),
        ])
        assert session.title == "plan my week"
        assert session.created_at == session.updated_at

    def test_with_messages_appends(self):
        session = conversation()
        reply = ChatMessage.create(MessageRole.ASSISTANT, "hi")

        updated = session.with_messages([*session.messages, reply])

        assert updated.id == session.id
        assert updated.title == session.title
        assert updated.messages[-1] == reply
        assert updated.updated_at >= session.updated_at

    def test_with_messages_rejects_rewrite(self):
        session = conversation()
        with pytest.raises(ValueError, match="append-only"):
            session.with_messages([ChatMessage.create(MessageRole.USER, "other")])

    def test_messages_are_immutable(self):
        message = ChatMessage.create(MessageRole.USER, "hello")
        with pytest.raises(ValueError):
            message.content = "changed"  # type: ignore[misc]


class TestConversationStore:
    async def test_upsert_moves_to_front(self, conversation_store):
        first, second = conversation("first"), conversation("second")
        await conversation_store.upsert(first)
        await conversation_store.upsert(second)
        await conversation_store.upsert(first.with_messages(list(first.messages)))

        assert [c.title for c in conversation_store.list()] == ["first", "second"]
        assert len(conversation_store) == 2

    async def test_eviction_drops_least_recent(self, conversation_store):
        base = datetime(2026, 10, 1, tzinfo=timezone.utc)
        sessions = [conversation(f"c{i}", base + timedelta(minutes=i)) for i in range(21)]
        for session in sessions:
            await conversation_store.upsert(session)

        stored = conversation_store.list()
        assert len(stored) == 20
        assert sessions[0].id not in conversation_store
        assert stored[0].id == sessions[-1].id
        assert stored[-1].id == sessions[1].id

    async def test_reload_is_stable(self, storage):
        store = ConversationStore(storage)
        for i in range(3):
            await store.upsert(conversation(f"c{i}"))

        reloaded = ConversationStore(storage)
        await reloaded.load()

        first, second = reloaded.list(), reloaded.list()
        assert first == second
        assert [c.id for c in first] == [c.id for c in store.list()]

    async def test_snapshot_is_read_only(self, conversation_store):
        await conversation_store.upsert(conversation())
        snapshot = conversation_store.list()
        await conversation_store.upsert(conversation("newer"))
        assert len(snapshot) == 1

    async def test_remove_and_clear(self, storage, conversation_store):
        kept, dropped = conversation("kept"), conversation("dropped")
        await conversation_store.upsert(kept)
        await conversation_store.upsert(dropped)

        await conversation_store.remove(dropped.id)
        await conversation_store.remove("missing")
        assert [c.id for c in conversation_store.list()] == [kept.id]

        await conversation_store.clear()
        assert conversation_store.list() == ()
        assert await storage.get_item(CONVERSATIONS_KEY) is None

    async def test_corrupt_storage_loads_empty(self):
        store = ConversationStore(InMemoryStorage({CONVERSATIONS_KEY: "{broken"}))
        await store.load()
        assert store.list() == ()

    async def test_malformed_entries_skipped(self):
        good = conversation("good").model_dump(mode="json")
        storage = InMemoryStorage({CONVERSATIONS_KEY: json.dumps([{"title": 3}, good])})
        store = ConversationStore(storage)

        await store.load()

        assert [c.title for c in store.list()] == ["good"]

    def test_cap_must_be_positive(self, storage):
        with pytest.raises(ValueError):
            ConversationStore(storage, max_entries=0)
