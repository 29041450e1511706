from pydantic import BaseModel, ConfigDict, Field


class AudioPayload(BaseModel):
    """A finalized audio recording ready for transcription."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False, description="Encoded audio bytes")
    mime_type: str = Field(default="audio/wav")
    filename: str = Field(default="recording.wav")

    @property
    def size(self) -> int:
        return len(self.data)
