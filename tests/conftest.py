from __future__ import annotations

import pytest

from feeds import feed_xml, offer_xml
from realty_feed.storage import build_engine, session_factory


@pytest.fixture()
def two_offer_feed() -> bytes:
    return feed_xml(
        offer_xml("A", url="http://atlantnt.ru/offers/1"),
        offer_xml("B", offer_type="аренда", category="Комната", url="http://atlantnt.ru/offers/2"),
    )


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    session = session_factory(engine)()
    yield session
    session.close()
