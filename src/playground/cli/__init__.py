"""Command line interface for playground."""

from .app import app

__all__ = ["app"]
