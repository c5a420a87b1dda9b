"""Top-level package for the realty feed importer."""

from .api.app_factory import create_app
from .pipelines.import_pipeline import FeedImporter

__all__ = ["create_app", "FeedImporter"]
