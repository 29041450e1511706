"""Quote generation on top of a chat completion gateway."""

import logging
import random
from abc import ABC, abstractmethod

from ..config import DEFAULT_ATTRIBUTION, QUOTE_MAX_TOKENS, QUOTE_TEMPERATURE
from ..llm import CompletionGateway, CompletionMessage, MessageRole
from ..prompts import get_quote_system_prompt, render_prompt
from .models import MotivationalQuote, QuoteType

logger = logging.getLogger(__name__)

GENERAL_FOCUS = "personal growth, success, or happiness"

FALLBACK_QUOTES: tuple[tuple[str, QuoteType], ...] = (
    ("Today is a new opportunity to grow and shine.", QuoteType.DAILY),
    ("Your potential is limitless when you believe in yourself.", QuoteType.DAILY),
    ("Small steps lead to big achievements.", QuoteType.DAILY),
    ("Every moment is a fresh beginning.", QuoteType.MORNING),
    ("Success starts with a single step forward.", QuoteType.ACHIEVEMENT),
)


class QuoteGateway(ABC):
    """Abstract source of motivational quotes."""

    @abstractmethod
    async def generate(self, quote_type: QuoteType, category: str = "general") -> MotivationalQuote:
        """Produce a quote. Implementations substitute a fallback rather than fail."""


def build_quote_prompt(quote_type: QuoteType, category: str = "general") -> str:
    """Render the user prompt for ``quote_type``."""
    focus = GENERAL_FOCUS if category == "general" else category
    return render_prompt(f"quote_{quote_type.value}", focus=focus)


def parse_quote(text: str) -> tuple[str, str]:
    """Split model output like ``"Quote" - Attribution``.

    Returns:
        (quote text without surrounding quotes, attribution)
    """
    parts = text.strip().split(" - ")
    quote = parts[0].strip().strip('"').strip("“”")
    attribution = parts[1].strip() if len(parts) > 1 and parts[1].strip() else DEFAULT_ATTRIBUTION
    return quote, attribution


def fallback_quote(rng: random.Random | None = None) -> MotivationalQuote:
    """Pick one of the canned quotes, flagged as a fallback."""
    text, quote_type = (rng or random).choice(FALLBACK_QUOTES)
    return MotivationalQuote(
        quote=text,
        attribution=DEFAULT_ATTRIBUTION,
        type=quote_type,
        category="general",
        fallback=True,
    )


class CompletionQuoteGateway(QuoteGateway):
    """Generates quotes with a chat completion gateway.

    Any completion failure is logged and answered with a canned quote.
    """

    def __init__(
        self,
        completion_gateway: CompletionGateway,
        model: str | None = None,
        rng: random.Random | None = None
    ):
        self._completion = completion_gateway
        self._model = model
        self._rng = rng or random.Random()

    async def generate(self, quote_type: QuoteType, category: str = "general") -> MotivationalQuote:
        messages = [
            CompletionMessage(role=MessageRole.SYSTEM.value, content=get_quote_system_prompt()),
            CompletionMessage(
                role=MessageRole.USER.value,
                content=build_quote_prompt(quote_type, category)
            ),
        ]
        try:
            response = await self._completion.complete(
                messages,
                model=self._model,
                temperature=QUOTE_TEMPERATURE,
                max_tokens=QUOTE_MAX_TOKENS,
            )
            text = response.content.strip()
            if not text:
                raise ValueError("No quote generated")
        except Exception as e:
            logger.error("Quote generation failed, using fallback: %s", e)
            return fallback_quote(self._rng)

        quote, attribution = parse_quote(text)
        return MotivationalQuote(
            quote=quote,
            attribution=attribution,
            type=quote_type,
            category=category,
        )
