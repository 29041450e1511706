"""YouTube Data API client."""

import logging
from typing import Any

import httpx

from ..config import VIDEO_PAGE_SIZE, YOUTUBE_API_BASE
from .models import Video, VideoPage

logger = logging.getLogger(__name__)


class VideoSearchError(Exception):
    """The video API returned an error response or could not be reached."""


class YouTubeClient:
    """Thin async wrapper over the YouTube Data API v3.

    Hidden design decisions:
    - HTTP client lifecycle
    - Query parameters for search, charts and details
    - Response shape normalization into ``Video``
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = YOUTUBE_API_BASE,
        http_client: httpx.AsyncClient | None = None
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=30.0)

    async def search(
        self,
        query: str,
        max_results: int = VIDEO_PAGE_SIZE,
        page_token: str | None = None
    ) -> VideoPage:
        params: dict[str, Any] = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "maxResults": str(max_results),
            "order": "relevance",
            "safeSearch": "moderate",
            "videoEmbeddable": "true",
        }
        if page_token:
            params["pageToken"] = page_token

        data = await self._get("search", params)
        page_info = data.get("pageInfo", {})
        return VideoPage(
            videos=[Video.from_api(item) for item in data.get("items", [])],
            next_page_token=data.get("nextPageToken"),
            prev_page_token=data.get("prevPageToken"),
            total_results=page_info.get("totalResults", 0),
            results_per_page=page_info.get("resultsPerPage", 0),
        )

    async def popular(
        self,
        max_results: int = VIDEO_PAGE_SIZE,
        region_code: str = "US"
    ) -> VideoPage:
        data = await self._get("videos", {
            "part": "snippet,statistics",
            "chart": "mostPopular",
            "maxResults": str(max_results),
            "regionCode": region_code,
            "videoCategoryId": "0",
        })
        page_info = data.get("pageInfo", {})
        return VideoPage(
            videos=[Video.from_api(item) for item in data.get("items", [])],
            total_results=page_info.get("totalResults", 0),
            results_per_page=page_info.get("resultsPerPage", 0),
        )

    async def video_details(self, video_id: str) -> Video | None:
        data = await self._get("videos", {
            "part": "snippet,statistics,contentDetails",
            "id": video_id,
        })
        items = data.get("items", [])
        return Video.from_api(items[0]) if items else None

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "YouTubeClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}/{endpoint}"
        try:
            response = await self._client.get(url, params={**params, "key": self._api_key})
        except httpx.HTTPError as e:
            raise VideoSearchError(f"YouTube API request failed: {e}") from e

        if response.status_code >= 400:
            logger.error("YouTube API error %d for %s", response.status_code, endpoint)
            raise VideoSearchError(f"YouTube API error: {response.status_code}")
        return response.json()
