"""Voice capture module for playground.

Records audio, transcribes it and turns usable transcripts into notes.
"""

from .devices import AudioInput, SoundcardAudioInput
from .models import FAILURE_SENTINELS, VoicePipelineState, VoiceRecording, is_usable_transcript
from .notes import VoiceNoteConverter
from .pipeline import TRANSCRIPTION_ERROR, VoiceCapturePipeline

__all__ = [
    "AudioInput",
    "SoundcardAudioInput",
    "VoiceRecording",
    "VoicePipelineState",
    "VoiceCapturePipeline",
    "VoiceNoteConverter",
    "FAILURE_SENTINELS",
    "TRANSCRIPTION_ERROR",
    "is_usable_transcript",
]
