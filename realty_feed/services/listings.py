"""Extract ``offer`` listings from a parsed feed."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterator

from ..core import ResolvedDocument
from ..core.exceptions import MissingFieldError

YANDEX_REALTY_NAMESPACE = "http://webmaster.yandex.ru/schemas/feed/realty/2010-06"
OFFER_TAG = "offer"
INTERNAL_ID_ATTRIBUTE = "internal-id"


def qualified(tag: str, namespace: str = YANDEX_REALTY_NAMESPACE) -> str:
    """Return ``tag`` in ElementTree's ``{namespace}tag`` notation."""
    return f"{{{namespace}}}{tag}" if namespace else tag


@dataclass(frozen=True, slots=True)
class ListingRecord:
    """Read-only view over one ``offer`` element."""

    element: ET.Element
    position: int
    namespace: str = YANDEX_REALTY_NAMESPACE

    @property
    def internal_id(self) -> str:
        value = self.element.get(INTERNAL_ID_ATTRIBUTE)
        if value is None:
            raise MissingFieldError(
                f"listing #{self.position} has no '{INTERNAL_ID_ATTRIBUTE}' attribute",
                details={"position": self.position, "field": INTERNAL_ID_ATTRIBUTE},
            )
        return value

    @property
    def internal_id_or_none(self) -> str | None:
        return self.element.get(INTERNAL_ID_ATTRIBUTE)

    def find(self, tag: str) -> ET.Element | None:
        """Return the first descendant named ``tag`` in document order."""
        return self.element.find(f".//{qualified(tag, self.namespace)}")

    @property
    def location(self) -> ET.Element | None:
        # Present in feeds but not projected into domain fields yet.
        return self.find("location")


def iter_listings(
    document: ResolvedDocument,
    *,
    namespace: str = YANDEX_REALTY_NAMESPACE,
) -> Iterator[ListingRecord]:
    """Yield every ``offer`` element at any depth, in document order."""

    for position, element in enumerate(document.root.iter(qualified(OFFER_TAG, namespace)), start=1):
        yield ListingRecord(element=element, position=position, namespace=namespace)
