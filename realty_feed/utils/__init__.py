"""Utility helpers for the realty feed importer."""

from .io import ensure_directory, has_extension, safe_filename

__all__ = [
    "ensure_directory",
    "has_extension",
    "safe_filename",
]
