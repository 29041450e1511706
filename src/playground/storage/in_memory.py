"""In-memory local storage backend.

Simple dict-based storage for session-only state.
Data is lost when the application exits.
"""

from .base import LocalStorage


class InMemoryStorage(LocalStorage):
    """In-memory key/value storage (session-only).

    Suitable for single-session use or testing.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    async def connect(self) -> None:
        """Initialize storage (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close storage (no-op for in-memory)."""
        pass

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    @property
    def backend_type(self) -> str:
        return "memory"
