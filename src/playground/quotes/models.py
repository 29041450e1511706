from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from ..config import DEFAULT_ATTRIBUTION


class QuoteType(str, Enum):
    """Kind of quote requested."""

    DAILY = "daily"
    MORNING = "morning"
    ACHIEVEMENT = "achievement"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "QuoteType":
        """Map free-form input to a type; unknown values become OTHER."""
        try:
            return cls(value.lower())
        except ValueError:
            return cls.OTHER


class MotivationalQuote(BaseModel):
    """A generated (or canned fallback) quote."""

    quote: str
    attribution: str = DEFAULT_ATTRIBUTION
    type: QuoteType = QuoteType.DAILY
    category: str = "general"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    fallback: bool = False
