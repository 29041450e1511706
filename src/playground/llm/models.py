from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    """Role of a message sender."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class CompletionMessage(BaseModel):
    """A conversation entry as sent to a completion gateway."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class CompletionResponse(BaseModel):
    """Response from a completion gateway."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(default=MessageRole.ASSISTANT.value, description="Role of the reply")
    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
