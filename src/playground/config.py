"""Configuration constants.

Centralizes limits, default models and storage keys shared across modules.
"""

# Assistant
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
CHAT_MAX_TOKENS = 1000
CHAT_TEMPERATURE = 0.7
MAX_CONVERSATIONS = 20
TITLE_MAX_LENGTH = 50
TITLE_ELLIPSIS = "..."

# Image generation
DEFAULT_IMAGE_MODEL = "dall-e-3"
MAX_PROMPT_LENGTH = 4000
MAX_IMAGE_HISTORY = 20
IMAGE_FILENAME_PROMPT_LENGTH = 50

# Quotes
QUOTE_MAX_TOKENS = 100
QUOTE_TEMPERATURE = 0.8
DEFAULT_ATTRIBUTION = "Personal Playground"
QUOTE_DATE_FORMAT = "%a %b %d %Y"  # Matches the browser's Date.toDateString()

# Transcription
DEFAULT_TRANSCRIPTION_MODEL = "whisper-1"
TRANSCRIPTION_LANGUAGE = "en"
MAX_AUDIO_BYTES = 25 * 1024 * 1024

# Voice capture
AUDIO_SAMPLE_RATE = 16000
AUDIO_CHUNK_SECONDS = 0.1
TRANSCRIPTION_FAILED = "Transcription failed"
NO_TRANSCRIPT = "Could not transcribe audio"
VOICE_NOTE_TAG = "voice-note"
MICROPHONE_ERROR = "Failed to access microphone. Please check permissions."

# Videos
YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
VIDEO_PAGE_SIZE = 12

# Local storage keys
CONVERSATIONS_KEY = "assistantConversations"
IMAGES_KEY = "generatedImages"
DAILY_QUOTE_KEY = "dailyQuote"
DAILY_QUOTE_DATE_KEY = "dailyQuoteDate"
NOTES_KEY_PREFIX = "notes:"
TODOS_KEY_PREFIX = "todos:"
