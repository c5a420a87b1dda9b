"""Domain primitives shared by the import pipeline."""

from __future__ import annotations

import enum
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from .exceptions import ConfigurationError


class OfferType(enum.Enum):
    SALE = "sale"
    RENT = "rent"
    PURCHASE = "purchase"


class AreaUnit(enum.Enum):
    SQUARE_METERS = "sq_m"


class BuildingType(enum.Enum):
    BRICK = "brick"
    BRICK_MONOLITH = "brick_monolith"
    MONOLITH = "monolith"
    PANEL = "panel"
    FOAM_CONCRETE = "foam_concrete"


class PropertyType(enum.Enum):
    LIVING = "living"


class Category(enum.Enum):
    ROOM = "room"
    FLAT = "flat"
    HOUSE = "house"


class ListingErrorPolicy(enum.Enum):
    """What the importer does when a single listing cannot be mapped."""

    ABORT = "abort"
    SKIP = "skip"

    @classmethod
    def parse(cls, value: "ListingErrorPolicy | str") -> "ListingErrorPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ConfigurationError(
                f"unknown listing error policy: {value!r}",
                details={"allowed": [policy.value for policy in cls]},
            ) from exc


@dataclass(frozen=True, slots=True)
class ImportSource:
    """Where the feed comes from: a filesystem path or an open binary stream."""

    path: Path | str | None = None
    stream: BinaryIO | None = None

    def validate(self) -> None:
        """Reject ambiguous or empty sources before any I/O happens."""
        if self.path is not None and self.stream is not None:
            raise ConfigurationError("file and a stream supplied for import")
        if self.path is None and self.stream is None:
            raise ConfigurationError("no file nor a stream supplied for import")

    def describe(self) -> str:
        if self.path is not None:
            return str(self.path)
        return getattr(self.stream, "name", None) or "<stream>"


@dataclass(frozen=True, slots=True)
class ResolvedDocument:
    """Parsed feed document together with where its bytes came from."""

    tree: ET.ElementTree
    archive_format: str | None = None
    entry_name: str | None = None

    @property
    def root(self) -> ET.Element:
        return self.tree.getroot()

    @property
    def from_archive(self) -> bool:
        return self.archive_format is not None


@dataclass(slots=True)
class SkippedListing:
    position: int
    internal_id: str | None
    reason: str

    def as_dict(self) -> dict:
        return {"position": self.position, "internal_id": self.internal_id, "reason": self.reason}


@dataclass(slots=True)
class ImportSummary:
    """Information returned to callers after an import run."""

    source: str
    started_at: datetime
    completed_at: datetime | None = None
    only_load: bool = False
    archive_format: str | None = None
    entry_name: str | None = None
    listings_seen: int = 0
    imported: int = 0
    skipped: list[SkippedListing] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "source": self.source,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "only_load": self.only_load,
            "archive_format": self.archive_format,
            "entry_name": self.entry_name,
            "listings_seen": self.listings_seen,
            "imported": self.imported,
            "skipped": [listing.as_dict() for listing in self.skipped],
        }
