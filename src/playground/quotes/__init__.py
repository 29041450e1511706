"""Motivational quotes module for playground."""

from .gateway import (
    FALLBACK_QUOTES,
    CompletionQuoteGateway,
    QuoteGateway,
    build_quote_prompt,
    fallback_quote,
    parse_quote,
)
from .models import MotivationalQuote, QuoteType
from .service import QuoteService, date_key

__all__ = [
    "MotivationalQuote",
    "QuoteType",
    "QuoteGateway",
    "CompletionQuoteGateway",
    "QuoteService",
    "FALLBACK_QUOTES",
    "build_quote_prompt",
    "fallback_quote",
    "parse_quote",
    "date_key",
]
