"""Translate feed vocabulary into domain enumerations."""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping, TypeVar

from ..core import AreaUnit, BuildingType, Category, OfferType, PropertyType
from ..core.exceptions import InvalidValueError, MissingFieldError, UnmappedValueError
from .listings import ListingRecord

E = TypeVar("E")


def _table(entries: Mapping[str, E]) -> Mapping[str, E]:
    return MappingProxyType(dict(entries))


OFFER_TYPES: Final[Mapping[str, OfferType]] = _table(
    {
        "продажа": OfferType.SALE,
        "аренда": OfferType.RENT,
        "покупка": OfferType.PURCHASE,
    }
)

AREA_UNITS: Final[Mapping[str, AreaUnit]] = _table(
    {
        "кв.м": AreaUnit.SQUARE_METERS,
    }
)

BUILDING_TYPES: Final[Mapping[str, BuildingType]] = _table(
    {
        "кирпичный": BuildingType.BRICK,
        "кирпично-монолитный": BuildingType.BRICK_MONOLITH,
        "монолитный": BuildingType.MONOLITH,
        "панельный": BuildingType.PANEL,
        "пенобетонный": BuildingType.FOAM_CONCRETE,
    }
)

PROPERTY_TYPES: Final[Mapping[str, PropertyType]] = _table(
    {
        "жилая": PropertyType.LIVING,
    }
)

CATEGORIES: Final[Mapping[str, Category]] = _table(
    {
        "Комната": Category.ROOM,
        "Квартира": Category.FLAT,
        "Дом": Category.HOUSE,
    }
)


class FieldMapper:
    """Read listing fields and resolve them through the lookup tables.

    Every accessor takes the tag name to read as an override, so feeds that
    spell an element differently can reuse the same tables. Lookups are
    strict: an absent element raises :class:`MissingFieldError` and an
    unknown term raises :class:`UnmappedValueError` rather than falling back
    to a default. Terms must match a table key exactly, including case;
    only whitespace around the element text is ignored.
    """

    def offer_type(self, record: ListingRecord, tag: str = "type") -> OfferType:
        return self._lookup(OFFER_TYPES, "offer type", record, tag)

    def property_type(self, record: ListingRecord, tag: str = "property-type") -> PropertyType:
        return self._lookup(PROPERTY_TYPES, "property type", record, tag)

    def category(self, record: ListingRecord, tag: str = "category") -> Category:
        return self._lookup(CATEGORIES, "category", record, tag)

    def building_type(self, record: ListingRecord, tag: str = "building-type") -> BuildingType:
        return self._lookup(BUILDING_TYPES, "building type", record, tag)

    def area_unit(self, record: ListingRecord, tag: str = "area") -> AreaUnit:
        area = self._area(record, tag)
        return self._lookup(AREA_UNITS, "area unit", area, "unit")

    def area_value(self, record: ListingRecord, tag: str = "area") -> float:
        raw = self.text(self._area(record, tag), "value")
        try:
            return float(raw.strip().replace(",", "."))
        except ValueError as exc:
            raise InvalidValueError(
                f"listing #{record.position} has a non-numeric area value {raw!r}",
                details={"position": record.position, "field": tag, "value": raw},
            ) from exc

    def text(self, record: ListingRecord, tag: str) -> str:
        """Return the full text content of the first ``tag`` element."""
        element = record.find(tag)
        if element is None:
            raise MissingFieldError(
                f"listing #{record.position} has no '{tag}' element",
                details={"position": record.position, "field": tag},
            )
        return "".join(element.itertext())

    def has(self, record: ListingRecord, tag: str) -> bool:
        return record.find(tag) is not None

    def _area(self, record: ListingRecord, tag: str) -> ListingRecord:
        element = record.find(tag)
        if element is None:
            raise MissingFieldError(
                f"listing #{record.position} has no '{tag}' element",
                details={"position": record.position, "field": tag},
            )
        return ListingRecord(element=element, position=record.position, namespace=record.namespace)

    def _lookup(self, table: Mapping[str, E], family: str, record: ListingRecord, tag: str) -> E:
        term = self.text(record, tag)
        try:
            return table[term.strip()]
        except KeyError:
            raise UnmappedValueError(
                f"unknown {family} {term!r} in listing #{record.position}",
                details={"position": record.position, "field": tag, "value": term},
            ) from None
