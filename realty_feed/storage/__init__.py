"""Persistence layer for imported entities."""

from .base import Base, build_engine, session_factory, session_scope
from .context import EntityContext
from .entities import Offer, RealtyObject, Site
from .listing import EntityList

__all__ = [
    "Base",
    "build_engine",
    "session_factory",
    "session_scope",
    "EntityContext",
    "EntityList",
    "Offer",
    "RealtyObject",
    "Site",
]
