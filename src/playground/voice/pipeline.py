"""Voice capture pipeline.

Idle -> Recording -> Transcribing -> Idle. A stopped recording always
yields a ``VoiceRecording``: when transcription fails the transcript is the
"Transcription failed" placeholder rather than the recording being dropped.
"""

import logging
import time
from collections.abc import Callable

from ..config import MICROPHONE_ERROR, NO_TRANSCRIPT, TRANSCRIPTION_FAILED
from ..errors import DeviceUnavailableError
from ..events import RECORDING_PRODUCED, Event, EventBus
from ..transcription import AudioPayload, TranscriptionGateway
from .devices import AudioInput
from .models import VoicePipelineState, VoiceRecording

logger = logging.getLogger(__name__)

TRANSCRIPTION_ERROR = (
    "Failed to transcribe audio. The recording was saved without transcription."
)


class VoiceCapturePipeline:
    """Records audio, transcribes it and keeps an in-memory recording list."""

    def __init__(
        self,
        audio_input: AudioInput,
        transcriber: TranscriptionGateway,
        event_bus: EventBus | None = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self._input = audio_input
        self._transcriber = transcriber
        self._events = event_bus
        self._clock = clock
        self._state = VoicePipelineState.IDLE
        self._error: str | None = None
        self._chunks: list[bytes] = []
        self._started_at = 0.0
        self._recordings: list[VoiceRecording] = []

    @property
    def state(self) -> VoicePipelineState:
        return self._state

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def recordings(self) -> tuple[VoiceRecording, ...]:
        """Recordings, newest first."""
        return tuple(self._recordings)

    @property
    def is_recording(self) -> bool:
        return self._state is VoicePipelineState.RECORDING

    @property
    def is_transcribing(self) -> bool:
        return self._state is VoicePipelineState.TRANSCRIBING

    @property
    def is_supported(self) -> bool:
        return self._input.is_supported

    async def start_recording(self) -> bool:
        """Acquire the audio input and start buffering.

        No-op unless idle. A device failure sets ``error`` and leaves the
        pipeline idle.

        Returns:
            True if recording started
        """
        if self._state is not VoicePipelineState.IDLE:
            return False

        self._error = None
        self._chunks = []
        self._state = VoicePipelineState.RECORDING
        try:
            await self._input.start(self._chunks.append)
        except DeviceUnavailableError as e:
            logger.error("Error starting recording: %s", e)
            self._state = VoicePipelineState.IDLE
            self._error = MICROPHONE_ERROR
            return False

        self._started_at = self._clock()
        return True

    async def stop_recording(self) -> VoiceRecording | None:
        """Finish the recording, transcribe it and publish the result.

        A failure to stop or encode the input still produces a recording,
        with the "Transcription failed" placeholder and no audio.

        Returns:
            The new recording, or None if the pipeline was not recording
        """
        if self._state is not VoicePipelineState.RECORDING:
            return None

        self._state = VoicePipelineState.TRANSCRIBING
        duration = max(0.0, self._clock() - self._started_at)
        try:
            payload = await self._finish_input()
            if payload is None:
                recording = self._failed_recording(duration)
            else:
                recording = await self._transcribe(payload, duration)
            self._recordings.insert(0, recording)
        finally:
            self._state = VoicePipelineState.IDLE

        if self._events is not None:
            await self._events.publish(Event(RECORDING_PRODUCED, recording))
        return recording

    def delete_recording(self, recording_id: str) -> None:
        self._recordings = [r for r in self._recordings if r.id != recording_id]

    def clear_all_recordings(self) -> None:
        self._recordings = []

    async def _finish_input(self) -> AudioPayload | None:
        chunks, self._chunks = self._chunks, []
        try:
            await self._input.stop()
            return self._input.encode(chunks)
        except Exception:
            logger.exception("Error finishing recording")
            return None

    def _failed_recording(self, duration: float) -> VoiceRecording:
        self._error = TRANSCRIPTION_ERROR
        return VoiceRecording(transcript=TRANSCRIPTION_FAILED, duration=duration)

    async def _transcribe(self, payload: AudioPayload, duration: float) -> VoiceRecording:
        try:
            transcript = await self._transcriber.transcribe(payload)
        except Exception as e:
            logger.error("Transcription error: %s", e)
            self._error = TRANSCRIPTION_ERROR
            transcript = TRANSCRIPTION_FAILED
        else:
            transcript = transcript or NO_TRANSCRIPT

        return VoiceRecording(
            audio=payload.data,
            transcript=transcript,
            duration=duration,
        )
