from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..config import NO_TRANSCRIPT, TRANSCRIPTION_FAILED

FAILURE_SENTINELS = frozenset({TRANSCRIPTION_FAILED, NO_TRANSCRIPT})


class VoicePipelineState(str, Enum):
    """Lifecycle of the voice capture pipeline."""

    IDLE = "idle"
    RECORDING = "recording"
    TRANSCRIBING = "transcribing"


class VoiceRecording(BaseModel):
    """A finished recording and its transcript (or a failure placeholder)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    audio: bytes = Field(default=b"", repr=False, exclude=True)
    transcript: str
    duration: float = Field(ge=0.0, description="Length in seconds")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_transcript(self) -> bool:
        return is_usable_transcript(self.transcript)


def is_usable_transcript(transcript: str | None) -> bool:
    """True for non-blank text that is not a failure placeholder."""
    if not transcript or not transcript.strip():
        return False
    return transcript not in FAILURE_SENTINELS
