"""Audio input devices for voice capture.

``AudioInput`` hides where audio comes from. The pipeline starts it with a
chunk callback, stops it, and asks it to encode the buffered chunks into a
single payload.
"""

import asyncio
import io
import logging
import threading
import wave
from abc import ABC, abstractmethod
from collections.abc import Callable

import numpy as np

from ..config import AUDIO_CHUNK_SECONDS, AUDIO_SAMPLE_RATE
from ..errors import DeviceUnavailableError
from ..transcription import AudioPayload

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], None]


class AudioInput(ABC):
    """Abstract audio source."""

    @abstractmethod
    async def start(self, on_chunk: ChunkCallback) -> None:
        """Acquire the device and begin delivering chunks to ``on_chunk``.

        Chunks are delivered on the event loop thread.

        Raises:
            DeviceUnavailableError: Permission denied or capture unsupported
        """

    @abstractmethod
    async def stop(self) -> None:
        """Stop capturing and release the device.

        Every chunk captured before this returns has been delivered.
        """

    @abstractmethod
    def encode(self, chunks: list[bytes]) -> AudioPayload:
        """Combine captured chunks into one uploadable payload."""

    @property
    def is_supported(self) -> bool:
        """Whether capture is possible on this machine."""
        return True


def pcm16_from_float(frames: np.ndarray) -> bytes:
    """Convert float samples in [-1, 1] (frames x channels) to mono 16-bit PCM."""
    audio = np.asarray(frames, dtype=np.float32)
    if audio.ndim > 1:
        audio = audio.mean(axis=1)
    audio = np.clip(audio, -1.0, 1.0)
    return (audio * 32767.0).astype("<i2").tobytes()


def encode_wav(pcm: bytes, sample_rate: int) -> bytes:
    """Wrap mono 16-bit PCM in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(int(sample_rate))
        wf.writeframes(pcm)
    return buffer.getvalue()


class SoundcardAudioInput(AudioInput):
    """Default microphone captured with ``soundcard`` on a background thread."""

    def __init__(
        self,
        sample_rate: int = AUDIO_SAMPLE_RATE,
        chunk_seconds: float = AUDIO_CHUNK_SECONDS,
        open_timeout: float = 5.0
    ):
        self._sample_rate = sample_rate
        self._block_frames = max(1, int(sample_rate * chunk_seconds))
        self._open_timeout = open_timeout
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_supported(self) -> bool:
        try:
            import soundcard
            return soundcard.default_microphone() is not None
        except Exception as e:
            logger.debug("Audio capture unsupported: %s", e)
            return False

    async def start(self, on_chunk: ChunkCallback) -> None:
        if self._thread is not None:
            raise RuntimeError("Audio input already started")

        loop = asyncio.get_running_loop()
        ready = threading.Event()
        failures: list[BaseException] = []

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._capture,
            args=(loop, on_chunk, ready, failures),
            name="voice-capture",
            daemon=True,
        )
        self._thread.start()

        opened = await asyncio.to_thread(ready.wait, self._open_timeout)
        if failures or not opened:
            self._stop_event.set()
            await asyncio.to_thread(self._thread.join)
            self._thread = None
            cause = failures[0] if failures else None
            raise DeviceUnavailableError(f"Microphone unavailable: {cause or 'timed out'}") from cause

    async def stop(self) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        await asyncio.to_thread(self._thread.join)
        self._thread = None

    def encode(self, chunks: list[bytes]) -> AudioPayload:
        return AudioPayload(
            data=encode_wav(b"".join(chunks), self._sample_rate),
            mime_type="audio/wav",
            filename="recording.wav",
        )

    def _capture(
        self,
        loop: asyncio.AbstractEventLoop,
        on_chunk: ChunkCallback,
        ready: threading.Event,
        failures: list[BaseException],
    ) -> None:
        opened = False
        try:
            import soundcard

            microphone = soundcard.default_microphone()
            with microphone.recorder(samplerate=self._sample_rate, channels=1) as recorder:
                opened = True
                ready.set()
                while not self._stop_event.is_set():
                    frames = recorder.record(numframes=self._block_frames)
                    loop.call_soon_threadsafe(on_chunk, pcm16_from_float(frames))
        except Exception as e:
            if opened:
                logger.exception("Audio capture stopped unexpectedly")
            else:
                failures.append(e)
        finally:
            ready.set()
