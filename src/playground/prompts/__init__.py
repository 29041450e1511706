"""Prompt texts for the assistant and the quote generator.

Each prompt is a ``.txt`` file next to this module. A ``prompts/`` directory
in the working directory takes precedence, so prompts can be customized
without touching the installed package.
"""

from functools import lru_cache
from pathlib import Path

_PACKAGE_DIR = Path(__file__).parent


def _search_paths(filename: str) -> list[Path]:
    return [Path.cwd() / "prompts" / filename, _PACKAGE_DIR / filename]


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Return the text of prompt ``name`` with surrounding whitespace removed.

    Raises:
        FileNotFoundError: If no prompt file with that name exists
    """
    candidates = _search_paths(f"{name}.txt")
    for path in candidates:
        if path.is_file():
            return path.read_text(encoding="utf-8").strip()

    searched = "\n".join(f"  - {path}" for path in candidates)
    raise FileNotFoundError(f"Prompt '{name}' not found. Searched:\n{searched}")


def render_prompt(name: str, **values: str) -> str:
    """Load prompt ``name`` and fill its ``{placeholder}`` fields.

    Only the given placeholders are replaced; other braces are left alone.
    """
    text = load_prompt(name)
    for key, value in values.items():
        text = text.replace(f"{{{key}}}", value)
    return text


def get_assistant_prompt() -> str:
    """System preamble for assistant conversations."""
    return load_prompt("assistant_system")


def get_quote_system_prompt() -> str:
    return load_prompt("quote_system")


def clear_cache() -> None:
    """Forget loaded prompts so edited files are picked up."""
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "render_prompt",
    "get_assistant_prompt",
    "get_quote_system_prompt",
    "clear_cache",
]
