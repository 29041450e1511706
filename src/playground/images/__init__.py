"""Image generation module for playground."""

from .base import ImageGateway, build_request
from .models import (
    GeneratedImage,
    ImageGenerationRequest,
    ImageGenerationResult,
    ImageQuality,
    ImageSettings,
    ImageSize,
    ImageStyle,
)
from .providers import OpenAIImageGateway
from .studio import EMPTY_PROMPT_ERROR, ImageStudio, image_filename

__all__ = [
    "ImageGateway",
    "OpenAIImageGateway",
    "ImageStudio",
    "GeneratedImage",
    "ImageGenerationRequest",
    "ImageGenerationResult",
    "ImageSettings",
    "ImageSize",
    "ImageQuality",
    "ImageStyle",
    "EMPTY_PROMPT_ERROR",
    "build_request",
    "image_filename",
]
