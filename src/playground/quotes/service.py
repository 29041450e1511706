"""Quote of the day with a local cache keyed by calendar date.

The cache key is the local date string with no timezone normalization, so
the quote changes at local midnight.
"""

import logging
from collections.abc import Callable
from datetime import date

from pydantic import ValidationError

from ..config import DAILY_QUOTE_DATE_KEY, DAILY_QUOTE_KEY, QUOTE_DATE_FORMAT
from ..storage import LocalStorage, read_json, write_json
from .gateway import QuoteGateway
from .models import MotivationalQuote, QuoteType

logger = logging.getLogger(__name__)


def date_key(day: date) -> str:
    """Format a date like ``Mon Oct 19 2026``."""
    return day.strftime(QUOTE_DATE_FORMAT)


class QuoteService:
    """Fetches quotes and caches the daily one."""

    def __init__(
        self,
        gateway: QuoteGateway,
        storage: LocalStorage,
        today: Callable[[], date] = date.today
    ):
        self._gateway = gateway
        self._storage = storage
        self._today = today
        self._current: MotivationalQuote | None = None
        self._loading = False
        self._error: str | None = None

    @property
    def current_quote(self) -> MotivationalQuote | None:
        return self._current

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    async def get_daily_quote(self) -> MotivationalQuote | None:
        """Serve today's cached quote, fetching a new one when stale or missing."""
        cached = await self._cached_quote()
        if cached is not None:
            self._current = cached
            return cached
        return await self.fetch_quote(QuoteType.DAILY, "general")

    async def fetch_quote(
        self,
        quote_type: QuoteType | str = QuoteType.DAILY,
        category: str = "general"
    ) -> MotivationalQuote | None:
        if isinstance(quote_type, str) and not isinstance(quote_type, QuoteType):
            quote_type = QuoteType.parse(quote_type)

        self._loading = True
        self._error = None
        try:
            quote = await self._gateway.generate(quote_type, category)
        except Exception as e:
            logger.exception("Quote fetch error")
            self._error = f"Failed to load motivational quote: {e}"
            return None
        finally:
            self._loading = False

        self._current = quote
        if quote.type == QuoteType.DAILY:
            await self._cache(quote)
        return quote

    async def get_quote_by_category(self, category: str) -> MotivationalQuote | None:
        return await self.fetch_quote(QuoteType.DAILY, category)

    async def get_morning_quote(self) -> MotivationalQuote | None:
        return await self.fetch_quote(QuoteType.MORNING, "general")

    async def get_achievement_quote(self) -> MotivationalQuote | None:
        return await self.fetch_quote(QuoteType.ACHIEVEMENT, "general")

    async def refresh_quote(
        self,
        quote_type: QuoteType | str = QuoteType.DAILY,
        category: str = "general"
    ) -> MotivationalQuote | None:
        return await self.fetch_quote(quote_type, category)

    async def _cached_quote(self) -> MotivationalQuote | None:
        cached_date = await read_json(self._storage, DAILY_QUOTE_DATE_KEY)
        if cached_date != date_key(self._today()):
            return None

        data = await read_json(self._storage, DAILY_QUOTE_KEY)
        if data is None:
            return None
        try:
            return MotivationalQuote.model_validate(data)
        except ValidationError as e:
            logger.warning("Error parsing cached quote: %s", e)
            return None

    async def _cache(self, quote: MotivationalQuote) -> None:
        await write_json(self._storage, DAILY_QUOTE_KEY, quote.model_dump(mode="json"))
        await write_json(self._storage, DAILY_QUOTE_DATE_KEY, date_key(self._today()))
