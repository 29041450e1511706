"""Video browsing module for playground."""

from .browser import NOT_CONFIGURED_ERROR, VideoBrowser
from .client import VideoSearchError, YouTubeClient
from .models import Thumbnail, Video, VideoPage, VideoStatistics

__all__ = [
    "YouTubeClient",
    "VideoBrowser",
    "VideoSearchError",
    "Video",
    "VideoPage",
    "VideoStatistics",
    "Thumbnail",
    "NOT_CONFIGURED_ERROR",
]
