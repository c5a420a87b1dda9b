"""Runtime configuration for the realty feed importer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class StoragePaths:
    """Collection of filesystem paths used by the application."""

    uploads: Path

    def ensure(self) -> None:
        """Ensure the backing directories exist."""
        self.uploads.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class AppConfig:
    """High level runtime configuration values."""

    max_feed_size_mb: int = 100
    allowed_feed_extensions: tuple[str, ...] = ("xml", "zip", "gz", "tgz", "tar", "bz2", "xz")
    default_page_size: int = 50
    max_page_size: int = 500

    @property
    def max_upload_bytes(self) -> int:
        """Maximum upload payload in bytes."""
        return self.max_feed_size_mb * 1024 * 1024


@dataclass(frozen=True)
class DatabaseConfig:
    """Where imported entities are stored."""

    url: str = "sqlite:///realty_feed.db"


@dataclass(frozen=True)
class ImportConfig:
    """Defaults applied to every import run."""

    site_name: str = "Атлант-Недвижимость"
    site_url: str = "http://atlantnt.ru"
    on_listing_error: str = "abort"


@dataclass(frozen=True)
class QueueConfig:
    """Configuration for the Redis-backed task queue."""

    redis_url: str = "redis://localhost:6379/0"
    queue_name: str = "realty-feed"
    default_timeout: int = 60 * 30  # seconds


APP_CONFIG = AppConfig()
STORAGE_PATHS = StoragePaths(
    uploads=Path(os.environ.get("REALTY_FEED_UPLOADS", "uploads")),
)
DATABASE_CONFIG = DatabaseConfig(
    url=os.environ.get("REALTY_FEED_DATABASE_URL", DatabaseConfig.url),
)
IMPORT_CONFIG = ImportConfig(
    site_name=os.environ.get("REALTY_FEED_SITE_NAME", ImportConfig.site_name),
    site_url=os.environ.get("REALTY_FEED_SITE_URL", ImportConfig.site_url),
    on_listing_error=os.environ.get("REALTY_FEED_ON_LISTING_ERROR", ImportConfig.on_listing_error),
)
QUEUE_CONFIG = QueueConfig(
    redis_url=os.environ.get("REALTY_FEED_REDIS_URL", QueueConfig.redis_url),
    queue_name=os.environ.get("REALTY_FEED_QUEUE", QueueConfig.queue_name),
    default_timeout=int(
        os.environ.get("REALTY_FEED_QUEUE_TIMEOUT", QueueConfig.default_timeout)
    ),
)

STORAGE_PATHS.ensure()
