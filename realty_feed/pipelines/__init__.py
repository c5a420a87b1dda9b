from .import_pipeline import FeedImporter, ImportSettings

__all__ = ["FeedImporter", "ImportSettings"]
