"""Assistant session module for playground."""

from .session import SEND_FAILED_MESSAGE, SessionManager
from .state import SessionState

__all__ = [
    "SessionManager",
    "SessionState",
    "SEND_FAILED_MESSAGE",
]
