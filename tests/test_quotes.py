"""Unit tests for the quotes module."""
import random
from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from playground.config import DAILY_QUOTE_DATE_KEY, DAILY_QUOTE_KEY
from playground.errors import GatewayError, GatewayErrorKind
from playground.quotes import (
    FALLBACK_QUOTES,
    CompletionQuoteGateway,
    MotivationalQuote,
    QuoteGateway,
    QuoteService,
    QuoteType,
    build_quote_prompt,
    date_key,
    parse_quote,
)
from playground.storage import InMemoryStorage

from .conftest import FakeCompletionGateway


class CountingQuoteGateway(QuoteGateway):
    def __init__(self):
        self.calls: list[tuple[QuoteType, str]] = []

    async def generate(self, quote_type: QuoteType, category: str = "general") -> MotivationalQuote:
        self.calls.append((quote_type, category))
        return MotivationalQuote(
            quote=f"quote {len(self.calls)}",
            type=quote_type,
            category=category,
        )


class TestParseQuote:
    def test_quote_with_attribution(self):
        assert parse_quote('"Small steps matter." - Personal Playground') == (
            "Small steps matter.", "Personal Playground"
        )

    def test_quote_without_attribution(self):
        assert parse_quote('"Keep going."') == ("Keep going.", "Personal Playground")

    def test_curly_quotes_stripped(self):
        assert parse_quote("“Rise and shine.” - Anon") == ("Rise and shine.", "Anon")

    @given(st.text(alphabet=st.characters(exclude_characters='"-“”'), min_size=1))
    def test_plain_text_kept(self, text: str):
        """Property test: text without quotes or separators is returned stripped."""
        quote, attribution = parse_quote(text)
        assert quote == text.strip()
        assert attribution == "Personal Playground"


class TestQuotePrompts:
    def test_general_focus(self):
        prompt = build_quote_prompt(QuoteType.DAILY)
        assert "personal growth, success, or happiness" in prompt
        assert "{focus}" not in prompt

    def test_category_focus(self):
        assert "Focus on fitness" in build_quote_prompt(QuoteType.DAILY, "fitness")

    def test_morning_prompt(self):
        assert "morning" in build_quote_prompt(QuoteType.MORNING)

    def test_parse_type(self):
        assert QuoteType.parse("Morning") is QuoteType.MORNING
        assert QuoteType.parse("whatever") is QuoteType.OTHER


class TestCompletionQuoteGateway:
    async def test_generated_quote(self):
        completion = FakeCompletionGateway(['"Dream big, start small." - Personal Playground'])
        gateway = CompletionQuoteGateway(completion)

        quote = await gateway.generate(QuoteType.MORNING)

        assert quote.quote == "Dream big, start small."
        assert quote.type is QuoteType.MORNING
        assert quote.fallback is False
        call = completion.calls[0]
        assert call["temperature"] == 0.8
        assert call["max_tokens"] == 100
        assert [m.role for m in call["messages"]] == ["system", "user"]

    async def test_failure_uses_fallback(self):
        completion = FakeCompletionGateway([GatewayError(GatewayErrorKind.QUOTA_EXCEEDED, "quota")])
        gateway = CompletionQuoteGateway(completion, rng=random.Random(7))

        quote = await gateway.generate(QuoteType.DAILY)

        assert quote.fallback is True
        assert quote.attribution == "Personal Playground"
        assert (quote.quote, quote.type) in FALLBACK_QUOTES

    async def test_empty_reply_uses_fallback(self):
        gateway = CompletionQuoteGateway(FakeCompletionGateway(["   "]))
        quote = await gateway.generate(QuoteType.ACHIEVEMENT)
        assert quote.fallback is True


class TestQuoteService:
    def test_date_key_format(self):
        assert date_key(date(2026, 10, 19)) == "Mon Oct 19 2026"

    async def test_daily_quote_cached_for_the_day(self, storage):
        gateway = CountingQuoteGateway()
        service = QuoteService(gateway, storage, today=lambda: date(2026, 10, 19))

        first = await service.get_daily_quote()
        second = await service.get_daily_quote()

        assert len(gateway.calls) == 1
        assert first.quote == second.quote
        assert service.current_quote.quote == "quote 1"
        assert await storage.get_item(DAILY_QUOTE_DATE_KEY) == '"Mon Oct 19 2026"'

    async def test_new_day_fetches_new_quote(self, storage):
        gateway = CountingQuoteGateway()
        day = {"value": date(2026, 10, 19)}
        service = QuoteService(gateway, storage, today=lambda: day["value"])

        await service.get_daily_quote()
        day["value"] = date(2026, 10, 20)
        quote = await service.get_daily_quote()

        assert quote.quote == "quote 2"
        assert len(gateway.calls) == 2

    async def test_cache_shared_between_instances(self, storage):
        def today():
            return date(2026, 10, 19)

        await QuoteService(CountingQuoteGateway(), storage, today=today).get_daily_quote()

        gateway = CountingQuoteGateway()
        quote = await QuoteService(gateway, storage, today=today).get_daily_quote()

        assert quote.quote == "quote 1"
        assert gateway.calls == []

    async def test_corrupt_cache_refetches(self):
        storage = InMemoryStorage({
            DAILY_QUOTE_DATE_KEY: '"Mon Oct 19 2026"',
            DAILY_QUOTE_KEY: '{"quote": 5',
        })
        gateway = CountingQuoteGateway()
        service = QuoteService(gateway, storage, today=lambda: date(2026, 10, 19))

        await service.get_daily_quote()

        assert len(gateway.calls) == 1

    async def test_non_daily_quotes_not_cached(self, storage):
        service = QuoteService(CountingQuoteGateway(), storage)

        quote = await service.get_morning_quote()

        assert quote.type is QuoteType.MORNING
        assert await storage.get_item(DAILY_QUOTE_KEY) is None

    async def test_category_and_refresh(self, storage):
        gateway = CountingQuoteGateway()
        service = QuoteService(gateway, storage, today=lambda: date(2026, 10, 19))

        await service.get_quote_by_category("fitness")
        await service.refresh_quote("achievement")
        await service.get_achievement_quote()

        assert gateway.calls == [
            (QuoteType.DAILY, "fitness"),
            (QuoteType.ACHIEVEMENT, "general"),
            (QuoteType.ACHIEVEMENT, "general"),
        ]

    async def test_gateway_exception_sets_error(self, storage):
        class BrokenGateway(QuoteGateway):
            async def generate(self, quote_type, category="general"):
                raise RuntimeError("offline")

        service = QuoteService(BrokenGateway(), storage)

        assert await service.fetch_quote() is None
        assert service.error == "Failed to load motivational quote: offline"
        assert service.is_loading is False
