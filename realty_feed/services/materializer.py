"""Turn mapped listings into persisted Site/Object/Offer entities."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core import AreaUnit, BuildingType, Category, OfferType, PropertyType
from ..storage import EntityContext, Offer, RealtyObject, Site
from .listings import ListingRecord
from .vocabulary import FieldMapper

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MappedListing:
    """Field values of one listing, resolved before any entity exists."""

    internal_id: str
    offer_type: OfferType
    property_type: PropertyType
    category: Category
    url: str
    area: float | None = None
    area_unit: AreaUnit | None = None
    building_type: BuildingType | None = None


class EntityMaterializer:
    """Create and commit one Object/Offer pair per listing."""

    def __init__(self, context: EntityContext, mapper: FieldMapper | None = None):
        self.context = context
        self.mapper = mapper or FieldMapper()

    def map(self, record: ListingRecord) -> MappedListing:
        mapper = self.mapper
        area = area_unit = None
        if mapper.has(record, "area"):
            area = mapper.area_value(record)
            area_unit = mapper.area_unit(record)
        building_type = mapper.building_type(record) if mapper.has(record, "building-type") else None

        return MappedListing(
            internal_id=record.internal_id,
            offer_type=mapper.offer_type(record),
            property_type=mapper.property_type(record),
            category=mapper.category(record),
            url=mapper.text(record, "url").strip(),
            area=area,
            area_unit=area_unit,
            building_type=building_type,
        )

    def materialize(self, record: ListingRecord, site: Site) -> tuple[RealtyObject, Offer]:
        """Map, create and commit the entities for ``record``.

        Mapping happens first so a listing that fails leaves nothing staged.
        """

        mapped = self.map(record)

        realty_object = self.context.create_object()
        realty_object.property_type = mapped.property_type
        realty_object.category = mapped.category
        realty_object.url = mapped.url
        realty_object.area = mapped.area
        realty_object.area_unit = mapped.area_unit
        realty_object.building_type = mapped.building_type

        offer = self.context.create_offer()
        offer.site_listing_id = mapped.internal_id
        offer.offer_type = mapped.offer_type
        offer.realty_object = realty_object
        offer.site = site

        self.context.add(site)
        self.context.add(realty_object)
        self.context.add(offer)
        self.context.save_changes()

        logger.debug("Committed listing #%s (internal-id %s)", record.position, mapped.internal_id)
        return realty_object, offer
