from __future__ import annotations

import io
from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from feeds import feed_xml, offer_xml, zip_bytes
from realty_feed.core import AreaUnit, BuildingType, Category, OfferType, PropertyType
from realty_feed.core.exceptions import ConfigurationError, MissingFieldError, UnmappedValueError
from realty_feed.pipelines import FeedImporter
from realty_feed.storage import EntityContext, Offer, RealtyObject, Site, session_factory


def count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


class RecordingContext(EntityContext):
    """Entity context that records the unit-of-work calls it receives."""

    def __init__(self, session, *, fail_on_commit: bool = False):
        super().__init__(session)
        self.calls: list[str] = []
        self.fail_on_commit = fail_on_commit

    def add(self, entity) -> None:
        self.calls.append(f"add:{type(entity).__name__}")
        super().add(entity)

    def save_changes(self) -> None:
        self.calls.append("save")
        if self.fail_on_commit:
            self.session.rollback()
            raise SQLAlchemyError("database is read-only")
        super().save_changes()


def test_only_load_creates_nothing(session, two_offer_feed: bytes):
    importer = FeedImporter.from_stream(io.BytesIO(two_offer_feed), session)

    summary = importer.import_feed(only_load=True)

    assert summary.only_load
    assert summary.listings_seen == 2
    assert summary.imported == 0
    assert count(session, Site) == 0
    assert count(session, RealtyObject) == 0
    assert count(session, Offer) == 0


def test_only_load_works_without_a_context(two_offer_feed: bytes):
    importer = FeedImporter.from_stream(io.BytesIO(two_offer_feed))

    assert importer.import_feed(only_load=True).listings_seen == 2


def test_import_without_a_context_is_rejected(two_offer_feed: bytes):
    stream = io.BytesIO(two_offer_feed)
    importer = FeedImporter.from_stream(stream)

    with pytest.raises(ConfigurationError):
        importer.import_feed()
    assert not importer.loader.loaded


def test_import_creates_one_object_and_offer_per_listing(session, two_offer_feed: bytes):
    importer = FeedImporter.from_stream(io.BytesIO(two_offer_feed), session)

    summary = importer.import_feed()

    assert summary.imported == 2
    assert count(session, RealtyObject) == 2
    assert count(session, Offer) == 2

    offers = session.scalars(select(Offer).order_by(Offer.offer_id)).all()
    assert [offer.site_listing_id for offer in offers] == ["A", "B"]
    assert [offer.offer_type for offer in offers] == [OfferType.SALE, OfferType.RENT]
    assert offers[0].realty_object.category is Category.FLAT
    assert offers[1].realty_object.category is Category.ROOM
    assert offers[0].realty_object.property_type is PropertyType.LIVING
    assert offers[0].realty_object.url == "http://atlantnt.ru/offers/1"

    site = session.scalars(select(Site)).one()
    assert site.name == "Атлант-Недвижимость"
    assert site.url == "http://atlantnt.ru"
    assert all(offer.site is site for offer in offers)


def test_caller_supplied_site_is_used(session, two_offer_feed: bytes):
    site = Site(name="Example Realty", url="http://example.com")
    session.add(site)
    session.commit()

    FeedImporter.from_stream(io.BytesIO(two_offer_feed), session).import_feed(site=site)

    assert count(session, Site) == 1
    assert {offer.site_id for offer in session.scalars(select(Offer))} == {site.site_id}


def test_site_from_another_session_is_merged(engine, session, two_offer_feed: bytes):
    other = session_factory(engine)()
    site = Site(name="Example Realty", url="http://example.com")
    other.add(site)
    other.commit()

    try:
        FeedImporter.from_stream(io.BytesIO(two_offer_feed), session).import_feed(site=site)
    finally:
        other.close()

    assert count(session, Site) == 1
    assert {offer.site_id for offer in session.scalars(select(Offer))} == {site.site_id}


def test_site_settings_are_configurable(session, two_offer_feed: bytes):
    importer = FeedImporter.from_stream(
        io.BytesIO(two_offer_feed),
        session,
        site_name="Другое агентство",
        site_url="http://example.org",
    )

    importer.import_feed()

    site = session.scalars(select(Site)).one()
    assert (site.name, site.url) == ("Другое агентство", "http://example.org")


def test_unknown_offer_type_aborts_after_committing_previous_listings(session):
    feed = feed_xml(
        offer_xml("A", offer_type="продажа", property_type="жилая", category="Квартира", url="X"),
        offer_xml("B", offer_type="обмен"),
    )
    importer = FeedImporter.from_stream(io.BytesIO(feed), session)

    with pytest.raises(UnmappedValueError):
        importer.import_feed()

    session.rollback()
    offers = session.scalars(select(Offer)).all()
    assert [offer.site_listing_id for offer in offers] == ["A"]
    assert count(session, RealtyObject) == 1
    assert offers[0].realty_object.url == "X"


def test_missing_internal_id_is_a_missing_field(session):
    importer = FeedImporter.from_stream(io.BytesIO(feed_xml(offer_xml(None))), session)

    with pytest.raises(MissingFieldError):
        importer.import_feed()

    assert count(session, RealtyObject) == 0
    assert count(session, Offer) == 0


def test_skip_policy_continues_past_bad_listings(session):
    feed = feed_xml(
        offer_xml("A"),
        offer_xml("B", offer_type="обмен"),
        offer_xml(None),
        offer_xml("D", category="Дом"),
    )
    importer = FeedImporter.from_stream(io.BytesIO(feed), session, on_listing_error="skip")

    summary = importer.import_feed()

    assert summary.listings_seen == 4
    assert summary.imported == 2
    assert [(skipped.position, skipped.internal_id) for skipped in summary.skipped] == [(2, "B"), (3, None)]
    assert sorted(session.scalars(select(Offer.site_listing_id))) == ["A", "D"]
    assert count(session, RealtyObject) == 2


def test_unknown_policy_is_a_configuration_error(session, two_offer_feed: bytes):
    importer = FeedImporter.from_stream(io.BytesIO(two_offer_feed), session, on_listing_error="ignore")

    with pytest.raises(ConfigurationError):
        importer.import_feed()


def test_optional_area_and_building_attributes_are_stored(session):
    feed = feed_xml(
        offer_xml(
            "A",
            extra=(
                "<area><value>42</value><unit>кв.м</unit></area>"
                "<building-type>панельный</building-type>"
            ),
        ),
        offer_xml("B"),
    )

    FeedImporter.from_stream(io.BytesIO(feed), session).import_feed()

    with_area, without_area = session.scalars(select(RealtyObject).order_by(RealtyObject.object_id)).all()
    assert with_area.area == 42.0
    assert with_area.area_unit is AreaUnit.SQUARE_METERS
    assert with_area.building_type is BuildingType.PANEL
    assert without_area.area is None
    assert without_area.building_type is None


def test_each_listing_is_committed_separately(session, two_offer_feed: bytes):
    context = RecordingContext(session)
    importer = FeedImporter.from_stream(io.BytesIO(two_offer_feed))
    importer.context = context

    importer.import_feed()

    unit = ["add:Site", "add:RealtyObject", "add:Offer", "save"]
    assert context.calls == unit + unit


def test_persistence_errors_propagate_unchanged(session, two_offer_feed: bytes):
    importer = FeedImporter.from_stream(io.BytesIO(two_offer_feed), on_listing_error="skip")
    importer.context = RecordingContext(session, fail_on_commit=True)

    with pytest.raises(SQLAlchemyError, match="read-only"):
        importer.import_feed()

    assert count(session, Offer) == 0


def test_reimporting_creates_new_entities(session, two_offer_feed: bytes):
    FeedImporter.from_stream(io.BytesIO(two_offer_feed), session).import_feed()
    FeedImporter.from_stream(io.BytesIO(two_offer_feed), session).import_feed()

    assert count(session, Offer) == 4
    assert count(session, RealtyObject) == 4
    assert sorted(session.scalars(select(Offer.site_listing_id))) == ["A", "A", "B", "B"]


def test_import_from_archived_file(tmp_path: Path, session, two_offer_feed: bytes):
    feed_path = tmp_path / "feed.zip"
    feed_path.write_bytes(zip_bytes({"export/": b"", "export/feed.xml": two_offer_feed}))

    summary = FeedImporter.from_path(feed_path, session).import_feed()

    assert summary.archive_format == "zip"
    assert summary.entry_name == "export/feed.xml"
    assert summary.imported == 2
    assert summary.as_dict()["source"] == str(feed_path)
