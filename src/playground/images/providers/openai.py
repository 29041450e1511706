import logging
from datetime import datetime, timezone
from typing import Any

from openai import AsyncOpenAI

from ...config import DEFAULT_IMAGE_MODEL
from ...errors import IMAGE_ERROR_MESSAGES, GatewayError, GatewayErrorKind, to_gateway_error
from ..base import ImageGateway
from ..models import ImageGenerationRequest, ImageGenerationResult

logger = logging.getLogger(__name__)


class OpenAIImageGateway(ImageGateway):
    """OpenAI (DALL-E) image generation gateway."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_IMAGE_MODEL,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            **client_kwargs
        )

    async def generate(
        self,
        request: ImageGenerationRequest,
        **kwargs: Any
    ) -> ImageGenerationResult:
        prompt = request.prompt.strip()
        settings = request.settings
        logger.info("Generating image with prompt: %s...", prompt[:100])

        try:
            response = await self._client.images.generate(
                model=self._model,
                prompt=prompt,
                n=1,
                size=settings.size,
                quality=settings.quality,
                style=settings.style,
                **kwargs
            )
        except Exception as e:
            error = to_gateway_error(e, IMAGE_ERROR_MESSAGES)
            logger.error("OpenAI image generation failed (%s): %s", error.kind.value, e)
            raise error from e

        image = response.data[0] if response.data else None
        if image is None or not image.url:
            logger.error("No image URL returned from OpenAI")
            raise GatewayError(
                GatewayErrorKind.UNKNOWN,
                IMAGE_ERROR_MESSAGES[GatewayErrorKind.UNKNOWN]
            )

        logger.debug("Image generated successfully")
        return ImageGenerationResult(
            image_url=image.url,
            original_prompt=request.prompt,
            revised_prompt=image.revised_prompt,
            settings=settings,
            timestamp=datetime.now(timezone.utc),
        )

    async def close(self) -> None:
        await self._client.close()
