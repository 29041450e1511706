import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from openai import AsyncOpenAI

from ...config import CHAT_MAX_TOKENS, CHAT_TEMPERATURE, DEFAULT_CHAT_MODEL
from ...errors import (
    CHAT_ERROR_MESSAGES,
    GatewayError,
    GatewayErrorKind,
    to_gateway_error,
)
from ...prompts import get_assistant_prompt
from ..base import CompletionGateway
from ..models import CompletionMessage, CompletionResponse
from ..validation import validate_conversation, with_system_preamble

logger = logging.getLogger(__name__)


class OpenAICompletionGateway(CompletionGateway):
    """OpenAI chat completion gateway.

    Hidden design decisions:
    - OpenAI API client initialization (retries disabled)
    - Message format conversion
    - System preamble injection
    - Error classification
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_CHAT_MODEL,
        base_url: str | None = None,
        organization: str | None = None,
        system_prompt: str | None = None,
        client: AsyncOpenAI | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI gateway.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
            system_prompt: Preamble injected when a conversation has no system
                message (default: packaged assistant prompt)
            client: Pre-built client (mainly for tests)
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._system_prompt = system_prompt
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            max_retries=0,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    @property
    def client(self) -> AsyncOpenAI:
        """The underlying OpenAI client (shared by sibling gateways)."""
        return self._client

    async def complete(
        self,
        messages: Sequence[CompletionMessage],
        model: str | None = None,
        temperature: float = CHAT_TEMPERATURE,
        max_tokens: int | None = CHAT_MAX_TOKENS,
        **kwargs: Any
    ) -> CompletionResponse:
        """Generate a chat completion using OpenAI.

        Args:
            messages: Conversation history
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            CompletionResponse with the assistant reply

        Raises:
            GatewayError: Invalid conversation or classified remote failure
        """
        validate_conversation(messages)
        preamble = self._system_prompt or get_assistant_prompt()
        conversation = with_system_preamble(messages, preamble)

        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": [{"role": msg.role, "content": msg.content} for msg in conversation],
            "temperature": temperature,
            "top_p": 1,
            "frequency_penalty": 0,
            "presence_penalty": 0,
            **kwargs
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        logger.info("Sending chat request to OpenAI (%d messages)", len(conversation))
        try:
            completion = await self._client.chat.completions.create(**request_params)
        except Exception as e:
            error = to_gateway_error(e, CHAT_ERROR_MESSAGES)
            logger.error("OpenAI chat request failed (%s): %s", error.kind.value, e)
            raise error from e

        message = completion.choices[0].message if completion.choices else None
        # Missing or blank content counts as no response
        if message is None or not (message.content or "").strip():
            logger.error("No response generated by OpenAI")
            raise GatewayError(
                GatewayErrorKind.UNKNOWN,
                CHAT_ERROR_MESSAGES[GatewayErrorKind.UNKNOWN]
            )

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        logger.debug("Chat response generated successfully by %s", completion.model)
        return CompletionResponse(
            role=message.role or "assistant",
            content=message.content,
            model=completion.model,
            usage=usage,
            timestamp=datetime.now(timezone.utc),
        )

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self._client.close()
