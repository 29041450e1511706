"""
Playground: a personal AI playground.

Assistant chat with saved conversations, voice capture with transcription,
image generation, daily motivational quotes and video browsing, all backed
by a small local key-value store.
"""

__version__ = "0.1.0"

from .assistant import SessionManager, SessionState
from .errors import GatewayError, GatewayErrorKind, classify_error
from .storage import LocalStorage, create_local_storage

__all__ = [
    "SessionManager",
    "SessionState",
    "GatewayError",
    "GatewayErrorKind",
    "classify_error",
    "LocalStorage",
    "create_local_storage",
]
