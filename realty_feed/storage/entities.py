"""ORM entities created by the feed import."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Enum, Float, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core import AreaUnit, BuildingType, Category, OfferType, PropertyType
from .base import Base


class Site(Base):
    """A publisher of listings."""

    __tablename__ = "sites"

    site_id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    url: Mapped[Optional[str]] = mapped_column(String(1024))

    offers: Mapped[List["Offer"]] = relationship(back_populates="site")

    def as_dict(self) -> dict:
        return {"site_id": self.site_id, "name": self.name, "url": self.url}


class RealtyObject(Base):
    """A physical property, independent of who advertises it."""

    __tablename__ = "objects"

    object_id: Mapped[int] = mapped_column(primary_key=True)
    property_type: Mapped[PropertyType] = mapped_column(Enum(PropertyType), nullable=False)
    category: Mapped[Category] = mapped_column(Enum(Category), nullable=False)
    url: Mapped[Optional[str]] = mapped_column(String(2048))
    area: Mapped[Optional[float]] = mapped_column(Float)
    area_unit: Mapped[Optional[AreaUnit]] = mapped_column(Enum(AreaUnit))
    building_type: Mapped[Optional[BuildingType]] = mapped_column(Enum(BuildingType))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    offers: Mapped[List["Offer"]] = relationship(back_populates="realty_object")

    def as_dict(self) -> dict:
        return {
            "object_id": self.object_id,
            "property_type": self.property_type.value if self.property_type else None,
            "category": self.category.value if self.category else None,
            "url": self.url,
            "area": self.area,
            "area_unit": self.area_unit.value if self.area_unit else None,
            "building_type": self.building_type.value if self.building_type else None,
        }


class Offer(Base):
    """One advertisement of an object by a site."""

    __tablename__ = "offers"

    offer_id: Mapped[int] = mapped_column(primary_key=True)
    site_listing_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="internal-id assigned by the feed",
    )
    offer_type: Mapped[OfferType] = mapped_column(Enum(OfferType), nullable=False)
    site_id: Mapped[int] = mapped_column(ForeignKey("sites.site_id"), nullable=False)
    object_id: Mapped[int] = mapped_column(ForeignKey("objects.object_id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    site: Mapped[Site] = relationship(back_populates="offers")
    realty_object: Mapped[RealtyObject] = relationship(back_populates="offers")

    def as_dict(self) -> dict:
        return {
            "offer_id": self.offer_id,
            "site_listing_id": self.site_listing_id,
            "offer_type": self.offer_type.value if self.offer_type else None,
            "site_id": self.site_id,
            "object_id": self.object_id,
        }
