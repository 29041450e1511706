"""Unit tests for voice capture, transcription and voice notes."""
import io
import wave
from datetime import datetime
from types import SimpleNamespace

import numpy as np
import pytest

from playground.config import MICROPHONE_ERROR, NO_TRANSCRIPT, TRANSCRIPTION_FAILED
from playground.errors import GatewayError, GatewayErrorKind
from playground.events import NOTE_CREATED, RECORDING_PRODUCED, Event, EventBus
from playground.notes import LocalNoteStore
from playground.transcription import AudioPayload, OpenAITranscriptionGateway, validate_payload
from playground.voice import (
    TRANSCRIPTION_ERROR,
    VoiceCapturePipeline,
    VoiceNoteConverter,
    VoicePipelineState,
    VoiceRecording,
    is_usable_transcript,
)
from playground.voice.devices import encode_wav, pcm16_from_float

from .conftest import FailingStorage, FakeAudioInput, FakeTranscriptionGateway


class FakeClock:
    def __init__(self, *readings: float):
        self._readings = list(readings)

    def __call__(self) -> float:
        return self._readings.pop(0)


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def note_store(storage):
    return LocalNoteStore(storage)


@pytest.fixture
def converter(note_store, events):
    return VoiceNoteConverter(
        note_store,
        "user-1",
        events,
        now=lambda: datetime(2026, 10, 19, 9, 30, 0),
    )


class TestTranscripts:
    @pytest.mark.parametrize("text,usable", [
        ("remember the dentist", True),
        ("", False),
        ("   ", False),
        (None, False),
        (TRANSCRIPTION_FAILED, False),
        (NO_TRANSCRIPT, False),
    ])
    def test_usable_transcript(self, text, usable):
        assert is_usable_transcript(text) is usable

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            VoiceRecording(transcript="x", duration=-1.0)


class TestVoiceCapturePipeline:
    async def test_successful_recording(self):
        transcriber = FakeTranscriptionGateway("buy milk")
        pipeline = VoiceCapturePipeline(FakeAudioInput(), transcriber, clock=FakeClock(10.0, 12.5))

        assert await pipeline.start_recording() is True
        assert pipeline.state is VoicePipelineState.RECORDING

        recording = await pipeline.stop_recording()

        assert recording.transcript == "buy milk"
        assert recording.duration == 2.5
        assert recording.audio == b"\x01\x02\x03\x04"
        assert transcriber.payloads[0].data == b"\x01\x02\x03\x04"
        assert pipeline.state is VoicePipelineState.IDLE
        assert pipeline.recordings == (recording,)

    async def test_transcription_failure_still_yields_recording(self, converter, events, note_store):
        transcriber = FakeTranscriptionGateway(
            GatewayError(GatewayErrorKind.UNKNOWN, "Failed to transcribe audio. Please try again.")
        )
        pipeline = VoiceCapturePipeline(FakeAudioInput(), transcriber, events)

        await pipeline.start_recording()
        recording = await pipeline.stop_recording()

        assert recording is not None
        assert recording.transcript == TRANSCRIPTION_FAILED
        assert len(pipeline.recordings) == 1
        assert pipeline.error == TRANSCRIPTION_ERROR
        assert pipeline.state is VoicePipelineState.IDLE
        assert await note_store.list_notes("user-1") == []

    @pytest.mark.parametrize("broken", ["stop", "encode"])
    async def test_input_failure_still_yields_recording(self, broken, converter, events, note_store):
        class BrokenAudioInput(FakeAudioInput):
            async def stop(self) -> None:
                await super().stop()
                if broken == "stop":
                    raise RuntimeError("device lost")

            def encode(self, chunks: list[bytes]) -> AudioPayload:
                if broken == "encode":
                    raise ValueError("bad frames")
                return super().encode(chunks)

        produced: list[Event] = []
        events.subscribe(RECORDING_PRODUCED, produced.append)
        transcriber = FakeTranscriptionGateway("never used")
        pipeline = VoiceCapturePipeline(
            BrokenAudioInput(), transcriber, events, clock=FakeClock(1.0, 4.0, 5.0)
        )

        await pipeline.start_recording()
        recording = await pipeline.stop_recording()

        assert recording is not None
        assert recording.transcript == TRANSCRIPTION_FAILED
        assert recording.duration == 3.0
        assert recording.audio == b""
        assert pipeline.recordings == (recording,)
        assert pipeline.error == TRANSCRIPTION_ERROR
        assert pipeline.state is VoicePipelineState.IDLE
        assert transcriber.payloads == []
        assert [e.payload for e in produced] == [recording]
        assert await note_store.list_notes("user-1") == []

        # The pipeline is usable again
        assert await pipeline.start_recording() is True
    async def test_empty_transcript_uses_placeholder(self, converter, events, note_store):
        pipeline = VoiceCapturePipeline(FakeAudioInput(), FakeTranscriptionGateway(""), events)

        await pipeline.start_recording()
        recording = await pipeline.stop_recording()

        assert recording.transcript == NO_TRANSCRIPT
        assert await note_store.list_notes("user-1") == []

    async def test_device_failure(self):
        pipeline = VoiceCapturePipeline(FakeAudioInput(fail=True), FakeTranscriptionGateway())

        assert await pipeline.start_recording() is False

        assert pipeline.state is VoicePipelineState.IDLE
        assert pipeline.error == MICROPHONE_ERROR
        assert await pipeline.stop_recording() is None

    async def test_start_while_recording_is_ignored(self):
        audio_input = FakeAudioInput()
        pipeline = VoiceCapturePipeline(audio_input, FakeTranscriptionGateway())

        await pipeline.start_recording()
        assert await pipeline.start_recording() is False
        assert audio_input.started == 1

    async def test_stop_when_idle_is_noop(self):
        pipeline = VoiceCapturePipeline(FakeAudioInput(), FakeTranscriptionGateway())
        assert await pipeline.stop_recording() is None
        assert pipeline.recordings == ()

    async def test_recordings_newest_first_and_deletion(self):
        transcriber = FakeTranscriptionGateway("one")
        pipeline = VoiceCapturePipeline(FakeAudioInput(), transcriber)

        await pipeline.start_recording()
        first = await pipeline.stop_recording()
        transcriber.result = "two"
        await pipeline.start_recording()
        second = await pipeline.stop_recording()

        assert [r.transcript for r in pipeline.recordings] == ["two", "one"]

        pipeline.delete_recording(second.id)
        assert pipeline.recordings == (first,)

        pipeline.clear_all_recordings()
        assert pipeline.recordings == ()


class TestVoiceNoteConverter:
    async def test_usable_recording_becomes_one_note(self, converter, events, note_store):
        created: list[Event] = []
        events.subscribe(NOTE_CREATED, created.append)
        pipeline = VoiceCapturePipeline(FakeAudioInput(), FakeTranscriptionGateway("call mom"), events)

        await pipeline.start_recording()
        recording = await pipeline.stop_recording()

        notes = await note_store.list_notes("user-1")
        assert len(notes) == 1
        note = notes[0]
        assert note.content == "call mom"
        assert note.title == "Voice Note - 10/19/26 09:30:00"
        assert note.tags == ["voice-note"]
        assert note.is_voice_note is True
        assert note.audio_url is None
        assert [e.payload.id for e in created] == [note.id]

        assert await converter.convert(recording) is None
        assert len(await note_store.list_notes("user-1")) == 1

    async def test_each_recording_converted_once(self, converter, note_store):
        first = VoiceRecording(transcript="first", duration=1.0)
        second = VoiceRecording(transcript="second", duration=1.0)

        await converter.convert(first)
        await converter.convert(second)
        await converter.convert(first)

        notes = await note_store.list_notes("user-1")
        assert [n.content for n in notes] == ["second", "first"]

    async def test_save_failure_is_reported_and_retryable(self, events):
        converter = VoiceNoteConverter(LocalNoteStore(FailingStorage()), "user-1", events)
        recording = VoiceRecording(transcript="hello", duration=1.0)

        assert await converter.convert(recording) is None
        assert converter.error == "Failed to save voice note: disk full"

    async def test_close_unsubscribes(self, converter, events, note_store):
        converter.close()
        pipeline = VoiceCapturePipeline(FakeAudioInput(), FakeTranscriptionGateway("later"), events)

        await pipeline.start_recording()
        await pipeline.stop_recording()

        assert await note_store.list_notes("user-1") == []


class TestAudioEncoding:
    def test_pcm16_from_float(self):
        frames = np.array([[0.0], [1.0], [-1.0], [2.0]], dtype=np.float32)
        samples = np.frombuffer(pcm16_from_float(frames), dtype="<i2")
        assert samples.tolist() == [0, 32767, -32767, 32767]

    def test_stereo_is_downmixed(self):
        frames = np.array([[0.5, -0.5], [1.0, 1.0]], dtype=np.float32)
        samples = np.frombuffer(pcm16_from_float(frames), dtype="<i2")
        assert samples.tolist() == [0, 32767]

    def test_encode_wav_header(self):
        data = encode_wav(b"\x00\x00" * 160, 16000)
        with wave.open(io.BytesIO(data), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == 16000
            assert wf.getnframes() == 160


class TestTranscriptionGateway:
    def test_empty_payload_rejected(self):
        with pytest.raises(GatewayError, match="No audio file provided"):
            validate_payload(AudioPayload(data=b""))

    def test_oversized_payload_rejected(self):
        payload = AudioPayload(data=b"\x00" * (25 * 1024 * 1024 + 1))
        with pytest.raises(GatewayError) as exc_info:
            validate_payload(payload)
        assert exc_info.value.kind == GatewayErrorKind.INVALID_REQUEST
        assert exc_info.value.user_message == "Audio file too large. Maximum size is 25MB."

    async def test_openai_request(self):
        requests = []

        async def create(**params):
            requests.append(params)
            return "  hello world \n"

        async def close():
            pass

        client = SimpleNamespace(
            audio=SimpleNamespace(transcriptions=SimpleNamespace(create=create)),
            close=close,
        )
        gateway = OpenAITranscriptionGateway(api_key="fake-key", client=client)

        text = await gateway.transcribe(AudioPayload(data=b"RIFF"))

        assert text == "hello world"
        assert requests[0]["model"] == "whisper-1"
        assert requests[0]["language"] == "en"
        assert requests[0]["response_format"] == "text"
        assert requests[0]["file"] == ("recording.wav", b"RIFF", "audio/wav")

    async def test_openai_failure_is_classified(self):
        async def create(**params):
            raise RuntimeError("invalid_request_error: unsupported format")

        async def close():
            pass

        client = SimpleNamespace(
            audio=SimpleNamespace(transcriptions=SimpleNamespace(create=create)),
            close=close,
        )
        gateway = OpenAITranscriptionGateway(api_key="fake-key", client=client)

        with pytest.raises(GatewayError) as exc_info:
            await gateway.transcribe(AudioPayload(data=b"RIFF"))
        assert exc_info.value.user_message == (
            "Invalid audio format. Please try again with a different recording."
        )
