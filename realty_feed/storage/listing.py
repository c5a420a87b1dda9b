"""Filtered, windowed listings of stored entities."""

from __future__ import annotations

from typing import Generic, Sequence, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import Session

from .base import Base

T = TypeVar("T", bound=Base)


class EntityList(Generic[T]):
    """A page of ``model`` rows matching a filter.

    ``total`` counts every matching row; ``objects`` returns the rows inside
    the ``start``/``limit`` window.
    """

    DEFAULT_SIZE = 50

    def __init__(
        self,
        session: Session,
        model: type[T],
        *criteria: ColumnElement[bool],
        start: int = 0,
        limit: int = DEFAULT_SIZE,
        update: bool = True,
    ):
        self.session = session
        self.model = model
        self.criteria: tuple[ColumnElement[bool], ...] = ()
        self.start = 0
        self.limit = self.DEFAULT_SIZE
        self._total: int | None = None
        self.set_filter(*criteria)
        self.set_limits(start, limit)
        if update:
            self.update()

    def set_filter(self, *criteria: ColumnElement[bool]) -> None:
        """Replace the filter; no criteria selects every row."""
        self.criteria = criteria
        self._total = None

    def set_limits(self, start: int = 0, limit: int = DEFAULT_SIZE) -> None:
        if start < 0 or limit < 0:
            raise ValueError("start and limit must be non-negative")
        self.start = start
        self.limit = limit

    def update(self) -> None:
        """Re-run the count query for the current filter."""
        statement = select(func.count()).select_from(self.model).where(*self.criteria)
        self._total = self.session.scalar(statement) or 0

    @property
    def total(self) -> int:
        if self._total is None:
            self.update()
        return self._total or 0

    @property
    def objects(self) -> Sequence[T]:
        primary_key = self.model.__mapper__.primary_key[0]
        statement = (
            select(self.model)
            .where(*self.criteria)
            .order_by(primary_key)
            .offset(self.start)
            .limit(self.limit)
        )
        return self.session.scalars(statement).all()
