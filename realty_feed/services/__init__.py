"""Service layer exports."""

from .document import DocumentLoader
from .listings import YANDEX_REALTY_NAMESPACE, ListingRecord, iter_listings
from .materializer import EntityMaterializer, MappedListing
from .source import ArchiveUnwrapper, resolve_source
from .vocabulary import FieldMapper

__all__ = [
    "ArchiveUnwrapper",
    "DocumentLoader",
    "EntityMaterializer",
    "FieldMapper",
    "ListingRecord",
    "MappedListing",
    "YANDEX_REALTY_NAMESPACE",
    "iter_listings",
    "resolve_source",
]
