"""SQLAlchemy declarative base and session factories."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM entities."""


def build_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine for ``url`` and make sure the schema exists."""

    engine = create_engine(url, echo=echo, hide_parameters=True)
    # Imported for its side effect of registering the tables on ``Base``.
    from . import entities  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info("Database initialised at %s", engine.url.render_as_string(hide_password=True))
    return engine


def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False, autoflush=True)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Yield a session that is always closed; commits are left to the caller."""

    session = factory()
    try:
        yield session
    finally:
        session.close()
