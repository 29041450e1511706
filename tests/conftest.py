"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import pytest

from playground.conversations import ConversationStore
from playground.errors import DeviceUnavailableError
from playground.images import ImageGateway, ImageGenerationRequest, ImageGenerationResult
from playground.llm import CompletionGateway, CompletionMessage, CompletionResponse
from playground.storage import InMemoryStorage
from playground.transcription import AudioPayload, TranscriptionGateway
from playground.voice import AudioInput


class FakeCompletionGateway(CompletionGateway):
    """Scripted completion gateway.

    Each call consumes the next scripted reply; an Exception entry is raised.
    When ``gate`` is set, calls block until it is released.
    """

    def __init__(
        self,
        replies: Sequence[str | Exception] = ("Hello from the assistant",),
        gate: asyncio.Event | None = None
    ):
        self._replies = list(replies)
        self.gate = gate
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def complete(
        self,
        messages: Sequence[CompletionMessage],
        model: str | None = None,
        **kwargs: Any
    ) -> CompletionResponse:
        self.calls.append({"messages": list(messages), "model": model, **kwargs})
        if self.gate is not None:
            await self.gate.wait()
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return CompletionResponse(content=reply, model=model or "fake-model")

    async def close(self) -> None:
        self.closed = True


class FakeTranscriptionGateway(TranscriptionGateway):
    def __init__(self, result: str | Exception = "buy milk tomorrow"):
        self.result = result
        self.payloads: list[AudioPayload] = []

    async def transcribe(self, payload: AudioPayload, **kwargs: Any) -> str:
        self.payloads.append(payload)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    async def close(self) -> None:
        pass


class FakeImageGateway(ImageGateway):
    def __init__(self, revised_prompt: str | None = None, error: Exception | None = None):
        self.revised_prompt = revised_prompt
        self.error = error
        self.requests: list[ImageGenerationRequest] = []

    async def generate(
        self,
        request: ImageGenerationRequest,
        **kwargs: Any
    ) -> ImageGenerationResult:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return ImageGenerationResult(
            image_url=f"https://images.example.com/{len(self.requests)}.png",
            original_prompt=request.prompt,
            revised_prompt=self.revised_prompt,
            settings=request.settings,
            timestamp=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
        )

    async def close(self) -> None:
        pass


class FakeAudioInput(AudioInput):
    """Audio source that delivers fixed chunks as soon as it starts."""

    def __init__(self, chunks: Sequence[bytes] = (b"\x01\x02", b"\x03\x04"), fail: bool = False):
        self.chunks = list(chunks)
        self.fail = fail
        self.started = 0
        self.stopped = 0

    async def start(self, on_chunk) -> None:
        if self.fail:
            raise DeviceUnavailableError("Permission denied")
        self.started += 1
        for chunk in self.chunks:
            on_chunk(chunk)

    async def stop(self) -> None:
        self.stopped += 1

    def encode(self, chunks: list[bytes]) -> AudioPayload:
        return AudioPayload(data=b"".join(chunks))


class FailingStorage(InMemoryStorage):
    """Storage whose writes always fail."""

    async def set_item(self, key: str, value: str) -> None:
        raise OSError("disk full")

    async def remove_item(self, key: str) -> None:
        raise OSError("disk full")


@pytest.fixture
def storage():
    """Return an empty in-memory storage."""
    return InMemoryStorage()


@pytest.fixture
def completion_gateway():
    return FakeCompletionGateway()


@pytest.fixture
def conversation_store(storage):
    return ConversationStore(storage)
