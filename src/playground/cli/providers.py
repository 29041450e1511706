"""Provider factory functions for CLI.

Centralizes creation of storage, gateways and clients from environment variables.
Hides configuration details from command implementations.
"""

import os

import typer
from rich.console import Console

from ..config import DEFAULT_CHAT_MODEL
from ..images import ImageGateway, OpenAIImageGateway
from ..llm import CompletionGateway, create_completion_gateway
from ..storage import LocalStorage, create_local_storage
from ..transcription import OpenAITranscriptionGateway, TranscriptionGateway
from ..videos import YouTubeClient

# Default console for output
_console = Console()


def get_storage() -> LocalStorage:
    """Create local storage from environment variables.

    Returns:
        Storage backend instance (not yet connected)

    Environment variables:
        PLAYGROUND_STORAGE: Backend type, sqlite or memory (default: sqlite)
        PLAYGROUND_STORAGE_PATH: SQLite file (default: ./playground.db)
    """
    backend = os.getenv("PLAYGROUND_STORAGE", "sqlite").lower()
    if backend == "sqlite":
        return create_local_storage(
            "sqlite",
            path=os.getenv("PLAYGROUND_STORAGE_PATH", "./playground.db")
        )
    return create_local_storage(backend)


def get_chat_model() -> str:
    return os.getenv("PLAYGROUND_CHAT_MODEL", DEFAULT_CHAT_MODEL)


def get_user_id() -> str:
    """Local user the notes belong to (PLAYGROUND_USER_ID, default: local)."""
    return os.getenv("PLAYGROUND_USER_ID", "local")


def _require_openai_key(console: Console | None) -> str:
    con = console or _console
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        con.print("[red]Error: OPENAI_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return api_key


def get_completion_gateway(console: Console | None = None) -> CompletionGateway:
    """Create the chat completion gateway.

    Raises:
        typer.Exit: If OPENAI_API_KEY is not set

    Environment variables:
        OPENAI_API_KEY: OpenAI API key (required)
        OPENAI_BASE_URL: Alternative API endpoint
        PLAYGROUND_CHAT_MODEL: Chat model (default: gpt-4o-mini)
    """
    return create_completion_gateway(
        "openai",
        api_key=_require_openai_key(console),
        model=get_chat_model(),
        base_url=os.getenv("OPENAI_BASE_URL"),
    )


def get_transcription_gateway(console: Console | None = None) -> TranscriptionGateway:
    return OpenAITranscriptionGateway(
        api_key=_require_openai_key(console),
        base_url=os.getenv("OPENAI_BASE_URL"),
    )


def get_image_gateway(console: Console | None = None) -> ImageGateway:
    return OpenAIImageGateway(
        api_key=_require_openai_key(console),
        base_url=os.getenv("OPENAI_BASE_URL"),
    )


def get_youtube_client(console: Console | None = None) -> YouTubeClient | None:
    """Create the YouTube client, or None if YOUTUBE_API_KEY is not set."""
    con = console or _console
    api_key = os.getenv("YOUTUBE_API_KEY")
    if not api_key:
        con.print("[yellow]Warning: YOUTUBE_API_KEY not set, video search disabled[/yellow]")
        return None
    return YouTubeClient(api_key)
