"""JSON helpers over local storage.

Cache reads and writes must never fail a user action: absent or corrupt
data reads as None and write failures are logged and reported as False.
"""

import json
import logging
from typing import Any

from .base import LocalStorage

logger = logging.getLogger(__name__)


async def read_json(storage: LocalStorage, key: str) -> Any | None:
    """Load and decode the JSON value stored under ``key``.

    Returns:
        Decoded value, or None when the key is absent, unreadable or corrupt
    """
    try:
        raw = await storage.get_item(key)
    except Exception:
        logger.exception("Error reading '%s' from %s storage", key, storage.backend_type)
        return None

    if raw is None:
        return None

    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning("Discarding corrupt cached value for '%s': %s", key, e)
        return None


async def write_json(storage: LocalStorage, key: str, value: Any) -> bool:
    """Encode ``value`` as JSON and store it under ``key``.

    Returns:
        True on success, False if serialization or the backend failed
    """
    try:
        payload = json.dumps(value)
        await storage.set_item(key, payload)
    except Exception:
        logger.exception("Error saving '%s' to %s storage", key, storage.backend_type)
        return False
    return True


async def delete_key(storage: LocalStorage, key: str) -> bool:
    """Remove ``key`` from storage, logging (not raising) on failure."""
    try:
        await storage.remove_item(key)
    except Exception:
        logger.exception("Error removing '%s' from %s storage", key, storage.backend_type)
        return False
    return True
