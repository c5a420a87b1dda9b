"""Feed import orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Iterator

from sqlalchemy.orm import Session

from ..config import IMPORT_CONFIG
from ..core import (
    ImportSource,
    ImportSummary,
    ListingErrorPolicy,
    ResolvedDocument,
    SkippedListing,
)
from ..core.exceptions import ConfigurationError, ListingError
from ..services import (
    DocumentLoader,
    EntityMaterializer,
    FieldMapper,
    ListingRecord,
    YANDEX_REALTY_NAMESPACE,
    iter_listings,
)
from ..storage import EntityContext, Site

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportSettings:
    site_name: str = IMPORT_CONFIG.site_name
    site_url: str = IMPORT_CONFIG.site_url
    on_listing_error: ListingErrorPolicy | str = IMPORT_CONFIG.on_listing_error
    namespace: str = YANDEX_REALTY_NAMESPACE


@dataclass(slots=True)
class FeedImporter:
    """Load a realty feed and persist one Object/Offer pair per listing.

    The document is read lazily on first access and cached for the
    lifetime of the importer. ``context`` may be omitted for importers that
    only ever validate feeds with ``only_load=True``.
    """

    loader: DocumentLoader
    context: EntityContext | None = None
    settings: ImportSettings = field(default_factory=ImportSettings)
    mapper: FieldMapper = field(default_factory=FieldMapper)

    @classmethod
    def from_path(cls, path: Path | str, session: Session | None = None, **settings) -> "FeedImporter":
        return cls._build(ImportSource(path=path), session, settings)

    @classmethod
    def from_stream(cls, stream: BinaryIO, session: Session | None = None, **settings) -> "FeedImporter":
        return cls._build(ImportSource(stream=stream), session, settings)

    @classmethod
    def _build(cls, source: ImportSource, session: Session | None, settings: dict) -> "FeedImporter":
        return cls(
            loader=DocumentLoader(source),
            context=EntityContext(session) if session is not None else None,
            settings=ImportSettings(**settings),
        )

    @property
    def document(self) -> ResolvedDocument:
        return self.loader.load()

    def listings(self) -> Iterator[ListingRecord]:
        return iter_listings(self.document, namespace=self.settings.namespace)

    def import_feed(self, only_load: bool = False, site: Site | None = None) -> ImportSummary:
        """Import every listing of the feed.

        With ``only_load`` the document is parsed and nothing is written,
        which validates a feed without side effects. A caller-supplied
        ``site`` is merged into the importer's session once before the
        first listing, so it may come from another session.
        """

        policy = ListingErrorPolicy.parse(self.settings.on_listing_error)
        if not only_load and self.context is None:
            raise ConfigurationError("an entity context is required to import listings")

        summary = ImportSummary(
            source=self.loader.source.describe(),
            started_at=datetime.now(timezone.utc),
            only_load=only_load,
        )

        document = self.document
        summary.archive_format = document.archive_format
        summary.entry_name = document.entry_name

        if only_load:
            summary.listings_seen = sum(1 for _ in self.listings())
            summary.completed_at = datetime.now(timezone.utc)
            logger.info("Feed %s loaded with %s listing(s); nothing imported", summary.source, summary.listings_seen)
            return summary

        if site is None:
            site = self.context.create_site()
            site.name = self.settings.site_name
            site.url = self.settings.site_url
        else:
            site = self.context.attach(site)

        materializer = EntityMaterializer(self.context, self.mapper)
        logger.info("Importing feed %s for site %s", summary.source, site.name)

        for record in self.listings():
            summary.listings_seen += 1
            try:
                materializer.materialize(record, site)
            except ListingError as exc:
                if policy is ListingErrorPolicy.ABORT:
                    raise
                logger.warning("Skipping listing #%s: %s", record.position, exc)
                summary.skipped.append(
                    SkippedListing(
                        position=record.position,
                        internal_id=record.internal_id_or_none,
                        reason=str(exc),
                    )
                )
                continue
            summary.imported += 1

        summary.completed_at = datetime.now(timezone.utc)
        logger.info(
            "Feed %s imported: %s of %s listing(s), %s skipped",
            summary.source,
            summary.imported,
            summary.listings_seen,
            len(summary.skipped),
        )
        return summary
