from typing import Any

from pydantic import BaseModel, Field


class Thumbnail(BaseModel):
    url: str
    width: int | None = None
    height: int | None = None


class VideoStatistics(BaseModel):
    view_count: int | None = None
    like_count: int | None = None
    comment_count: int | None = None


class Video(BaseModel):
    """A YouTube video as shown in the browser."""

    video_id: str
    title: str
    description: str = ""
    channel_title: str = ""
    channel_id: str = ""
    published_at: str = ""
    thumbnails: dict[str, Thumbnail] = Field(default_factory=dict)
    statistics: VideoStatistics | None = None

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "Video":
        """Build from a ``search`` or ``videos`` API item.

        Search results nest the id as ``{"videoId": ...}``; the videos
        endpoint returns it as a plain string.
        """
        raw_id = item.get("id")
        video_id = raw_id.get("videoId", "") if isinstance(raw_id, dict) else str(raw_id or "")
        snippet = item.get("snippet", {})
        stats = item.get("statistics")
        return cls(
            video_id=video_id,
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            channel_title=snippet.get("channelTitle", ""),
            channel_id=snippet.get("channelId", ""),
            published_at=snippet.get("publishedAt", ""),
            thumbnails={
                name: Thumbnail.model_validate(thumb)
                for name, thumb in snippet.get("thumbnails", {}).items()
            },
            statistics=VideoStatistics(
                view_count=_as_int(stats.get("viewCount")),
                like_count=_as_int(stats.get("likeCount")),
                comment_count=_as_int(stats.get("commentCount")),
            ) if stats else None,
        )


class VideoPage(BaseModel):
    """One page of results."""

    videos: list[Video] = Field(default_factory=list)
    next_page_token: str | None = None
    prev_page_token: str | None = None
    total_results: int = 0
    results_per_page: int = 0


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
