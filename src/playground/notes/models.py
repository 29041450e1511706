from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field


class Note(BaseModel):
    """A user's note (typed or created from a voice recording)."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    is_voice_note: bool = False
    audio_url: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
