"""Local storage module for playground.

Provides the persisted key/value state components cache into.
"""

from .base import LocalStorage
from .factory import create_local_storage
from .in_memory import InMemoryStorage
from .json_cache import delete_key, read_json, write_json

__all__ = [
    "LocalStorage",
    "InMemoryStorage",
    "create_local_storage",
    "read_json",
    "write_json",
    "delete_key",
]
