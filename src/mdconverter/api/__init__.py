"""HTTP API for md-converter."""

from .app import create_app

__all__ = ["create_app"]
