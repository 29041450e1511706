"""Turns transcribed voice recordings into notes."""

import logging
from collections.abc import Callable
from datetime import datetime

from ..config import VOICE_NOTE_TAG
from ..events import NOTE_CREATED, RECORDING_PRODUCED, Event, EventBus
from ..notes import Note, NoteStore
from .models import VoiceRecording, is_usable_transcript

logger = logging.getLogger(__name__)


class VoiceNoteConverter:
    """Creates one voice note per recording with a usable transcript.

    Subscribes to ``RECORDING_PRODUCED`` on construction. Recordings whose
    note was saved are remembered by id and never converted again.
    """

    def __init__(
        self,
        note_store: NoteStore,
        user_id: str,
        event_bus: EventBus,
        now: Callable[[], datetime] = datetime.now
    ):
        self._notes = note_store
        self._user_id = user_id
        self._events = event_bus
        self._now = now
        self._seen: set[str] = set()
        self._error: str | None = None
        event_bus.subscribe(RECORDING_PRODUCED, self._on_recording)

    @property
    def error(self) -> str | None:
        return self._error

    def close(self) -> None:
        self._events.unsubscribe(RECORDING_PRODUCED, self._on_recording)

    async def _on_recording(self, event: Event) -> None:
        await self.convert(event.payload)

    async def convert(self, recording: VoiceRecording) -> Note | None:
        """Save ``recording`` as a note unless already converted or unusable."""
        if recording.id in self._seen or not is_usable_transcript(recording.transcript):
            return None

        self._seen.add(recording.id)
        created = self._now()
        note = Note(
            user_id=self._user_id,
            title=f"Voice Note - {created.strftime('%x')} {created.strftime('%X')}",
            content=recording.transcript,
            tags=[VOICE_NOTE_TAG],
            is_voice_note=True,
        )
        try:
            await self._notes.add_note(note)
        except Exception as e:
            self._seen.discard(recording.id)
            logger.exception("Failed to save voice note for recording %s", recording.id)
            self._error = f"Failed to save voice note: {e}"
            return None

        self._error = None
        await self._events.publish(Event(NOTE_CREATED, note))
        return note
