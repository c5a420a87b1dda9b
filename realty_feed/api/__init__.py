"""HTTP API for uploading feeds and browsing imported entities."""

from .app_factory import create_app

__all__ = ["create_app"]
