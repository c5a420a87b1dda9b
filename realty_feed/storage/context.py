"""Unit-of-work boundary used by the importer to persist entities."""

from __future__ import annotations

import logging
from typing import TypeVar

from sqlalchemy.orm import Session

from .base import Base
from .entities import Offer, RealtyObject, Site

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Base)


class EntityContext:
    """Create, stage and commit entities on a SQLAlchemy session.

    Created entities are detached until :meth:`add` stages them; nothing
    becomes visible to other sessions before :meth:`save_changes`.
    """

    def __init__(self, session: Session):
        self.session = session

    def create_site(self) -> Site:
        return Site()

    def create_object(self) -> RealtyObject:
        return RealtyObject()

    def create_offer(self) -> Offer:
        return Offer()

    def add(self, entity: Base) -> None:
        self.session.add(entity)

    def attach(self, entity: T) -> T:
        """Return the instance of ``entity`` that belongs to this session.

        Entities loaded or created elsewhere, possibly through another
        session, are merged by primary key.
        """
        return self.session.merge(entity)

    def save_changes(self) -> None:
        """Commit staged entities; the session is rolled back if the commit fails."""
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.error("Commit failed, pending entities rolled back", exc_info=True)
            raise
