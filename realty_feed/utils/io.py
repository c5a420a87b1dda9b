"""File IO utilities."""

from __future__ import annotations

import os
import unicodedata
from pathlib import Path


def safe_filename(filename: str) -> str:
    """Return a filesystem safe filename."""

    normalized = unicodedata.normalize("NFKD", filename)
    sanitized = [c for c in normalized if c.isascii() and (c.isalnum() or c in {"-", "_", "."})]
    return "".join(sanitized).lstrip(".") or "feed"


def ensure_directory(path: os.PathLike[str] | str) -> Path:
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def has_extension(filename: str, extensions: tuple[str, ...]) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in extensions
