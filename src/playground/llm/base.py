from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from .models import CompletionMessage, CompletionResponse


class CompletionGateway(ABC):
    """Abstract base class for chat completion gateways.

    Hides which completion service answers the assistant. Implementations
    take care of:
    - API client setup and authentication
    - Request validation and system preamble injection
    - Translating provider failures into ``GatewayError``

    Supports async context manager protocol for proper resource cleanup:
        async with gateway:
            response = await gateway.complete(messages)
    """

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[CompletionMessage],
        model: str | None = None,
        **kwargs: Any
    ) -> CompletionResponse:
        """Generate the next assistant message for a conversation.

        Args:
            messages: Conversation history, oldest first
            model: Model to use (None uses the gateway's default)
            **kwargs: Provider-specific parameters

        Returns:
            CompletionResponse with the assistant reply (never blank) and metadata

        Raises:
            GatewayError: Classified failure. No retry is attempted.
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "CompletionGateway":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx may raise "Event loop is closed" when closed during shutdown
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
