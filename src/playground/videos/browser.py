"""Video browser state: current results, pagination and errors."""

import logging

from ..config import VIDEO_PAGE_SIZE
from .client import VideoSearchError, YouTubeClient
from .models import Video

logger = logging.getLogger(__name__)

NOT_CONFIGURED_ERROR = "YouTube API key not configured"


class VideoBrowser:
    """Search and popular-video listings backed by ``YouTubeClient``.

    A browser without a client reports "YouTube API key not configured"
    for every request.
    """

    def __init__(self, client: YouTubeClient | None):
        self._client = client
        self._videos: list[Video] = []
        self._next_page_token: str | None = None
        self._total_results = 0
        self._loading = False
        self._error: str | None = None

    @property
    def videos(self) -> tuple[Video, ...]:
        return tuple(self._videos)

    @property
    def next_page_token(self) -> str | None:
        return self._next_page_token

    @property
    def total_results(self) -> int:
        return self._total_results

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    async def search_videos(
        self,
        query: str,
        max_results: int = VIDEO_PAGE_SIZE,
        page_token: str | None = None
    ) -> None:
        """Search; a ``page_token`` appends to the current results."""
        if self._client is None:
            self._error = NOT_CONFIGURED_ERROR
            return

        self._loading = True
        self._error = None
        try:
            page = await self._client.search(query, max_results, page_token)
        except VideoSearchError as e:
            logger.error("YouTube search error: %s", e)
            self._error = f"Failed to search videos: {e}"
            return
        finally:
            self._loading = False

        if page_token:
            self._videos.extend(page.videos)
        else:
            self._videos = list(page.videos)
        self._next_page_token = page.next_page_token
        self._total_results = page.total_results

    async def get_popular_videos(
        self,
        max_results: int = VIDEO_PAGE_SIZE,
        region_code: str = "US"
    ) -> None:
        if self._client is None:
            self._error = NOT_CONFIGURED_ERROR
            return

        self._loading = True
        self._error = None
        try:
            page = await self._client.popular(max_results, region_code)
        except VideoSearchError as e:
            logger.error("YouTube popular videos error: %s", e)
            self._error = f"Failed to get popular videos: {e}"
            return
        finally:
            self._loading = False

        self._videos = list(page.videos)
        self._next_page_token = None
        self._total_results = page.total_results

    async def get_video_details(self, video_id: str) -> Video | None:
        """Fetch one video.

        Raises:
            VideoSearchError: If the API is not configured or the request fails
        """
        if self._client is None:
            raise VideoSearchError(NOT_CONFIGURED_ERROR)
        return await self._client.video_details(video_id)

    async def load_more_videos(self, query: str) -> None:
        """Fetch the next page of ``query`` if there is one."""
        if self._next_page_token and not self._loading:
            await self.search_videos(query, VIDEO_PAGE_SIZE, self._next_page_token)

    def clear_videos(self) -> None:
        self._videos = []
        self._next_page_token = None
        self._total_results = 0
        self._error = None
