"""Core domain primitives for the realty feed importer."""

from .models import (
    AreaUnit,
    BuildingType,
    Category,
    ImportSource,
    ImportSummary,
    ListingErrorPolicy,
    OfferType,
    PropertyType,
    ResolvedDocument,
    SkippedListing,
)
from .exceptions import (
    ConfigurationError,
    FeedImportError,
    FormatError,
    InvalidValueError,
    ListingError,
    MissingFieldError,
    OperationError,
    UnmappedValueError,
)

__all__ = [
    "AreaUnit",
    "BuildingType",
    "Category",
    "ImportSource",
    "ImportSummary",
    "ListingErrorPolicy",
    "OfferType",
    "PropertyType",
    "ResolvedDocument",
    "SkippedListing",
    "ConfigurationError",
    "FeedImportError",
    "FormatError",
    "InvalidValueError",
    "ListingError",
    "MissingFieldError",
    "OperationError",
    "UnmappedValueError",
]
