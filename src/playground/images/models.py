from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import MAX_PROMPT_LENGTH


class ImageSize(str, Enum):
    """Output sizes accepted by the image service."""

    SMALL = "256x256"
    MEDIUM = "512x512"
    SQUARE = "1024x1024"
    LANDSCAPE = "1792x1024"
    PORTRAIT = "1024x1792"


class ImageQuality(str, Enum):
    STANDARD = "standard"
    HD = "hd"


class ImageStyle(str, Enum):
    VIVID = "vivid"
    NATURAL = "natural"


class ImageSettings(BaseModel):
    """Generation settings echoed back with every image."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    size: ImageSize = ImageSize.SQUARE
    quality: ImageQuality = ImageQuality.STANDARD
    style: ImageStyle = ImageStyle.VIVID


class ImageGenerationRequest(BaseModel):
    """A validated request for one generated image."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(description="Text description of the image")
    settings: ImageSettings = Field(default_factory=ImageSettings)

    @field_validator("prompt")
    @classmethod
    def _check_prompt(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt is required and must be a non-empty string")
        if len(value) > MAX_PROMPT_LENGTH:
            raise ValueError(
                f"Prompt is too long. Maximum {MAX_PROMPT_LENGTH} characters allowed."
            )
        return value


class ImageGenerationResult(BaseModel):
    """Response from an image gateway."""

    model_config = ConfigDict(frozen=True)

    image_url: str
    original_prompt: str
    revised_prompt: str | None = None
    settings: ImageSettings
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class GeneratedImage(BaseModel):
    """An image kept in the local history."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    image_url: str
    original_prompt: str
    revised_prompt: str | None = None
    settings: ImageSettings
    timestamp: datetime

    @property
    def revised(self) -> bool:
        """Whether the service rewrote the prompt."""
        return bool(self.revised_prompt) and self.revised_prompt != self.original_prompt

    @classmethod
    def from_result(cls, result: ImageGenerationResult) -> "GeneratedImage":
        return cls(
            image_url=result.image_url,
            original_prompt=result.original_prompt,
            revised_prompt=result.revised_prompt,
            settings=result.settings,
            timestamp=result.timestamp,
        )
