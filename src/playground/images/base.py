from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from ..errors import GatewayError, GatewayErrorKind
from .models import ImageGenerationRequest, ImageGenerationResult, ImageSettings


class ImageGateway(ABC):
    """Abstract text-to-image gateway."""

    @abstractmethod
    async def generate(
        self,
        request: ImageGenerationRequest,
        **kwargs: Any
    ) -> ImageGenerationResult:
        """Generate one image.

        Raises:
            GatewayError: Classified remote failure
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "ImageGateway":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def build_request(
    prompt: str,
    size: str = "1024x1024",
    quality: str = "standard",
    style: str = "vivid"
) -> ImageGenerationRequest:
    """Validate raw request fields.

    Raises:
        GatewayError: INVALID_REQUEST naming the first invalid field
    """
    try:
        settings = ImageSettings(size=size, quality=quality, style=style)
    except ValidationError as e:
        field = str(e.errors()[0]["loc"][0])
        raise GatewayError(GatewayErrorKind.INVALID_REQUEST, _SETTING_MESSAGES[field]) from e

    try:
        return ImageGenerationRequest(prompt=prompt, settings=settings)
    except ValidationError as e:
        message = str(e.errors()[0]["msg"]).removeprefix("Value error, ")
        raise GatewayError(GatewayErrorKind.INVALID_REQUEST, message) from e


_SETTING_MESSAGES = {
    "size": "Invalid size. Must be one of: 256x256, 512x512, 1024x1024, 1792x1024, 1024x1792",
    "quality": 'Invalid quality. Must be either "standard" or "hd"',
    "style": 'Invalid style. Must be either "vivid" or "natural"',
}
