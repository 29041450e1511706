import logging
from typing import Any

from openai import AsyncOpenAI

from ...config import DEFAULT_TRANSCRIPTION_MODEL, TRANSCRIPTION_LANGUAGE
from ...errors import TRANSCRIPTION_ERROR_MESSAGES, to_gateway_error
from ..base import TranscriptionGateway, validate_payload
from ..models import AudioPayload

logger = logging.getLogger(__name__)


class OpenAITranscriptionGateway(TranscriptionGateway):
    """OpenAI Whisper transcription gateway.

    Hidden design decisions:
    - OpenAI API client initialization (retries disabled)
    - Upload format (filename, MIME type)
    - Error classification
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_TRANSCRIPTION_MODEL,
        language: str | None = TRANSCRIPTION_LANGUAGE,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._language = language
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            **client_kwargs
        )

    async def transcribe(self, payload: AudioPayload, **kwargs: Any) -> str:
        validate_payload(payload)

        request_params: dict[str, Any] = {
            "file": (payload.filename, payload.data, payload.mime_type),
            "model": self._model,
            "response_format": "text",
            "temperature": 0.0,
            **kwargs
        }
        if self._language:
            request_params["language"] = self._language

        logger.info("Transcribing audio file: %s Size: %d", payload.filename, payload.size)
        try:
            transcription = await self._client.audio.transcriptions.create(**request_params)
        except Exception as e:
            error = to_gateway_error(e, TRANSCRIPTION_ERROR_MESSAGES)
            logger.error("OpenAI transcription failed (%s): %s", error.kind.value, e)
            raise error from e

        # response_format="text" returns a plain string; older SDKs return an object
        text = transcription if isinstance(transcription, str) else getattr(transcription, "text", "")
        logger.debug("Transcription completed successfully")
        return (text or "").strip()

    async def close(self) -> None:
        await self._client.close()
