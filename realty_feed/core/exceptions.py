"""Custom exception hierarchy for the feed import pipeline."""

from __future__ import annotations


class FeedImportError(RuntimeError):
    """Base class for every failure raised while importing a feed."""

    def __init__(self, message: str, *, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def as_dict(self) -> dict:
        """Return a serializable representation."""
        payload = {"error": type(self).__name__, "message": str(self)}
        if self.details:
            payload["details"] = self.details
        return payload


class ConfigurationError(FeedImportError):
    """Raised when the importer was given an invalid combination of inputs."""


class FormatError(FeedImportError):
    """Raised when the feed is neither an archive with content nor well-formed XML."""


class OperationError(FeedImportError):
    """Raised when a required stream operation is not supported."""


class ListingError(FeedImportError):
    """Failure scoped to a single listing of the feed."""


class MissingFieldError(ListingError):
    """Raised when an expected element or attribute is absent from a listing."""


class UnmappedValueError(ListingError, LookupError):
    """Raised when a feed term has no entry in the relevant lookup table."""


class InvalidValueError(ListingError):
    """Raised when a listing value cannot be converted to the expected type."""
