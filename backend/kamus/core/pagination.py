"""
Seek-based cursor pagination.

A cursor is the primary key of the last row the client has seen. The next
page starts strictly after that row in the view's ordering, located with a
compound (ordering key, id) predicate rather than an offset, so rows inserted
or approved elsewhere in the ordering never shift the page boundaries.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, TypeVar

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Query, aliased
from sqlalchemy.orm.attributes import InstrumentedAttribute

from ..models import Definition

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ordering:
    """Primary sort column plus the id tie-breaker (always ascending)."""

    key: InstrumentedAttribute
    descending: bool = False

    @property
    def model(self):
        return self.key.class_

    def order_by(self) -> list:
        key = self.key.desc() if self.descending else self.key.asc()
        return [key, self.model.id.asc()]

    def after(self, cursor: str):
        """Predicate selecting rows that sort strictly after the cursor row."""
        anchor = aliased(self.model)
        anchor_key = (
            select(getattr(anchor, self.key.key))
            .where(anchor.id == cursor)
            .scalar_subquery()
        )
        # Unknown cursor => the subquery is NULL and nothing matches.
        beyond = self.key < anchor_key if self.descending else self.key > anchor_key
        return or_(beyond, and_(self.key == anchor_key, self.model.id > cursor))


# Home feed and "my definitions": newest approvals first.
PUBLIC_ORDER = Ordering(Definition.approved_at, descending=True)
# Moderation queue: oldest submissions first.
QUEUE_ORDER = Ordering(Definition.created_at)


@dataclass
class Page(Generic[T]):
    data: List[T] = field(default_factory=list)
    has_next_page: bool = False
    end_cursor: Optional[str] = None

    def map(self, fn: Callable[[List[T]], List[U]]) -> "Page[U]":
        """Replace the rows, keeping the cursor bookkeeping."""
        return Page(
            data=fn(self.data),
            has_next_page=self.has_next_page,
            end_cursor=self.end_cursor,
        )


def paginate(
    query: Query,
    ordering: Ordering,
    cursor: Optional[str],
    limit: int,
) -> Page:
    if limit < 1:
        raise ValueError("limit must be at least 1")

    if cursor:
        query = query.filter(ordering.after(cursor))

    rows = query.order_by(*ordering.order_by()).limit(limit + 1).all()

    has_next_page = len(rows) > limit
    rows = rows[:limit]
    end_cursor = rows[-1].id if rows else None

    return Page(data=rows, has_next_page=has_next_page, end_cursor=end_cursor)
