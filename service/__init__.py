"""HTTP service for the MPP Parser."""

from .app import app, create_app

__all__ = [
    "app",
    "create_app",
]
