"""Image generation studio.

Holds the generated-image history (newest first, persisted and capped),
the currently selected image and the last error.
"""

import logging
import re
import time
from pathlib import Path

import httpx
from pydantic import ValidationError

from ..config import IMAGE_FILENAME_PROMPT_LENGTH, IMAGES_KEY, MAX_IMAGE_HISTORY
from ..errors import GatewayError
from ..storage import LocalStorage, delete_key, read_json, write_json
from .base import ImageGateway, build_request
from .models import GeneratedImage, ImageSettings

logger = logging.getLogger(__name__)

EMPTY_PROMPT_ERROR = "Please enter a prompt to generate an image"
GENERATION_FAILED_ERROR = "Failed to generate image"
NOT_CONFIGURED_ERROR = "Image generation is not configured"


def image_filename(prompt: str, timestamp_ms: int | None = None) -> str:
    """Build a download filename from a prompt.

    >>> image_filename("A Cat, on the Moon!", 1700000000000)
    'ai_generated_a_cat_on_the_moon_1700000000000.png'
    """
    sanitized = re.sub(r"[^a-z0-9\s]", "", prompt.lower())
    sanitized = re.sub(r"\s+", "_", sanitized)[:IMAGE_FILENAME_PROMPT_LENGTH]
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    return f"ai_generated_{sanitized}_{stamp}.png"


class ImageStudio:
    """Generates images and keeps a local history of them.

    A studio without a gateway can still browse and edit the history.
    """

    def __init__(
        self,
        gateway: ImageGateway | None,
        storage: LocalStorage,
        max_history: int = MAX_IMAGE_HISTORY,
        http_client: httpx.AsyncClient | None = None
    ):
        self._gateway = gateway
        self._storage = storage
        self._max_history = max_history
        self._http_client = http_client
        self._images: list[GeneratedImage] = []
        self._current: GeneratedImage | None = None
        self._loading = False
        self._error: str | None = None

    @property
    def images(self) -> tuple[GeneratedImage, ...]:
        return tuple(self._images)

    @property
    def current_image(self) -> GeneratedImage | None:
        return self._current

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    async def load_history(self) -> None:
        """Restore the persisted history and select its newest image."""
        data = await read_json(self._storage, IMAGES_KEY)
        images = []
        if isinstance(data, list):
            for entry in data:
                try:
                    images.append(GeneratedImage.model_validate(entry))
                except ValidationError as e:
                    logger.warning("Skipping malformed image history entry: %s", e)
        self._images = images[:self._max_history]
        self._current = self._images[0] if self._images else None

    async def generate_image(
        self,
        prompt: str,
        settings: ImageSettings | None = None
    ) -> GeneratedImage | None:
        """Generate an image and add it to the history.

        Returns:
            The new image, or None when the prompt was blank, a generation
            was already running, or the gateway failed (see ``error``)
        """
        if not prompt.strip():
            self._error = EMPTY_PROMPT_ERROR
            return None
        if self._loading:
            return None
        if self._gateway is None:
            self._error = NOT_CONFIGURED_ERROR
            return None

        settings = settings or ImageSettings()
        self._loading = True
        self._error = None
        try:
            request = build_request(
                prompt.strip(),
                size=settings.size,
                quality=settings.quality,
                style=settings.style,
            )
            result = await self._gateway.generate(request)
        except GatewayError as e:
            logger.warning("Image generation error (%s): %s", e.kind.value, e.user_message)
            self._error = e.user_message
            return None
        except Exception:
            logger.exception("Image generation error")
            self._error = GENERATION_FAILED_ERROR
            return None
        finally:
            self._loading = False

        image = GeneratedImage.from_result(result)
        self._current = image
        self._images = [image, *self._images][:self._max_history]
        await self._save()
        return image

    def select_image(self, image: GeneratedImage) -> None:
        self._current = image

    async def delete_image(self, image_id: str) -> None:
        """Remove an image; the newest remaining one becomes current if needed."""
        self._images = [img for img in self._images if img.id != image_id]
        await self._save()
        if self._current is not None and self._current.id == image_id:
            self._current = self._images[0] if self._images else None

    async def clear_history(self) -> None:
        self._images = []
        self._current = None
        await delete_key(self._storage, IMAGES_KEY)

    async def download_image(self, image: GeneratedImage, directory: str | Path) -> Path:
        """Fetch an image's URL and write it into ``directory``.

        Raises:
            RuntimeError: If the download fails
        """
        target = Path(directory) / image_filename(image.original_prompt)
        client = self._http_client or httpx.AsyncClient()
        try:
            response = await client.get(image.image_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Error downloading image: %s", e)
            raise RuntimeError("Failed to download image") from e
        finally:
            if self._http_client is None:
                await client.aclose()

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(response.content)
        return target

    async def _save(self) -> None:
        payload = [img.model_dump(mode="json") for img in self._images]
        await write_json(self._storage, IMAGES_KEY, payload)
