"""Speech-to-text module for playground."""

from .base import TranscriptionGateway, validate_payload
from .models import AudioPayload
from .providers import OpenAITranscriptionGateway

__all__ = [
    "AudioPayload",
    "TranscriptionGateway",
    "OpenAITranscriptionGateway",
    "validate_payload",
]
