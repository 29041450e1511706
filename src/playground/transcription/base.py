from abc import ABC, abstractmethod
from typing import Any

from ..config import MAX_AUDIO_BYTES
from ..errors import GatewayError, GatewayErrorKind
from .models import AudioPayload


class TranscriptionGateway(ABC):
    """Abstract speech-to-text gateway.

    Implementations hide the transcription service and translate its
    failures into ``GatewayError``.
    """

    @abstractmethod
    async def transcribe(self, payload: AudioPayload, **kwargs: Any) -> str:
        """Transcribe an audio payload.

        Args:
            payload: Encoded audio (at most 25MB)
            **kwargs: Provider-specific parameters

        Returns:
            Plain transcript text (may be empty)

        Raises:
            GatewayError: Invalid payload or classified remote failure
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "TranscriptionGateway":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def validate_payload(payload: AudioPayload) -> None:
    """Reject payloads no transcription service would accept.

    Raises:
        GatewayError: INVALID_REQUEST for an empty or oversized payload
    """
    if payload.size == 0:
        raise GatewayError(GatewayErrorKind.INVALID_REQUEST, "No audio file provided")
    if payload.size > MAX_AUDIO_BYTES:
        raise GatewayError(
            GatewayErrorKind.INVALID_REQUEST,
            "Audio file too large. Maximum size is 25MB."
        )
