"""Abstract base class for local storage backends.

This module defines the key/value interface components use to persist
their caches between runs. The abstraction hides:
- Storage format (dict, SQLite table, etc.)
- Persistence mechanism (file, in-memory)
- Connection management
"""

from abc import ABC, abstractmethod


class LocalStorage(ABC):
    """Abstract string key/value storage.

    Values are opaque strings; callers serialize their own payloads
    (see ``playground.storage.json_cache``).
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the storage backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the storage backend gracefully."""

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None when absent."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete ``key``. No-op when absent."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    async def __aenter__(self) -> "LocalStorage":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.disconnect()
