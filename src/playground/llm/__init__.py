from .base import CompletionGateway
from .factory import create_completion_gateway
from .models import CompletionMessage, CompletionResponse, MessageRole
from .providers import OpenAICompletionGateway
from .validation import validate_conversation, with_system_preamble

__all__ = [
    "CompletionGateway",
    "create_completion_gateway",
    "CompletionMessage",
    "CompletionResponse",
    "MessageRole",
    "OpenAICompletionGateway",
    "validate_conversation",
    "with_system_preamble",
]
