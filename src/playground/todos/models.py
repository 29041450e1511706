from datetime import date, datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class TodoPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Todo(BaseModel):
    """A user's todo item."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str = Field(description="What needs doing")
    description: str = ""
    completed: bool = False
    due_date: date | None = None
    priority: TodoPriority = TodoPriority.MEDIUM
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Todo title is required")
        return value.strip()
