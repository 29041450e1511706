from typing import Any

from .base import CompletionGateway
from .providers import OpenAICompletionGateway


def create_completion_gateway(provider: str, **config: Any) -> CompletionGateway:
    """Create a chat completion gateway instance.

    The CLI and tests build gateways through here rather than naming classes.

    Args:
        provider: Provider type ('openai')
        **config: Provider-specific configuration
            For OpenAI:
                - api_key: str (required)
                - model: str (default: 'gpt-4o-mini')
                - base_url: str | None
                - organization: str | None

    Returns:
        Initialized completion gateway

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> gateway = create_completion_gateway(
        ...     "openai",
        ...     api_key="sk-...",
        ...     model="gpt-4o-mini"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAICompletionGateway(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'openai'"
    )
