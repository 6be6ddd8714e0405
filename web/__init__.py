"""Flask JSON API for playing checkers against the engine."""

from .app import create_app

__all__ = ["create_app"]
