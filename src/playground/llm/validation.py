"""Request shape checks for chat completion conversations."""

from collections.abc import Sequence

from ..errors import GatewayError, GatewayErrorKind
from .models import CompletionMessage, MessageRole

VALID_ROLES = frozenset(role.value for role in MessageRole)


def validate_conversation(messages: Sequence[CompletionMessage]) -> None:
    """Reject conversations a completion gateway must not send.

    Raises:
        GatewayError: INVALID_REQUEST when the conversation is empty, an entry
            lacks role or content, or an entry has an unknown role
    """
    if not messages:
        raise GatewayError(GatewayErrorKind.INVALID_REQUEST, "Messages array is required")

    for message in messages:
        if not message.role or not message.content:
            raise GatewayError(
                GatewayErrorKind.INVALID_REQUEST,
                "Each message must have role and content"
            )
        if message.role not in VALID_ROLES:
            raise GatewayError(
                GatewayErrorKind.INVALID_REQUEST,
                "Invalid message role. Must be system, user, or assistant"
            )


def with_system_preamble(
    messages: Sequence[CompletionMessage],
    preamble: str
) -> list[CompletionMessage]:
    """Prepend ``preamble`` as a system message unless one is already present."""
    if any(message.role == MessageRole.SYSTEM.value for message in messages):
        return list(messages)
    return [CompletionMessage(role=MessageRole.SYSTEM.value, content=preamble), *messages]
