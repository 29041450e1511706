"""Conversation history module for playground.

Provides persistent storage of past assistant conversations.
"""

from .models import ChatMessage, ConversationSession, make_id, make_title
from .store import ConversationStore

__all__ = [
    "ChatMessage",
    "ConversationSession",
    "ConversationStore",
    "make_id",
    "make_title",
]
