"""Logging configuration for the command line application."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL_ENV = "PLAYGROUND_LOG_LEVEL"


def setup_logging(level: str | None = None, console: Console | None = None) -> None:
    """Configure the root logger with a rich handler.

    Args:
        level: Level name; falls back to ``PLAYGROUND_LOG_LEVEL`` then WARNING
        console: Console to log to (default: stderr)
    """
    name = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {name}")

    logging.basicConfig(
        level=numeric,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console or Console(stderr=True),
                rich_tracebacks=True,
                show_path=False,
            )
        ],
        force=True,
    )
    # The OpenAI and HTTP clients are chatty at INFO
    for noisy in ("httpx", "httpcore", "openai"):
        logging.getLogger(noisy).setLevel(max(numeric, logging.WARNING))
