from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from app.services.beer_records import Beer, BeerStatus, Division

ALL_STATUSES = "All"

StatusFilter = BeerStatus | Literal["All"]
T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0


def _matches_query(beer: Beer, needle: str) -> bool:
    if not needle:
        return True
    haystacks = (beer.name, beer.style, beer.description or "")
    return any(needle in text.lower() for text in haystacks)


def filter_batches(
    beers: Iterable[Beer],
    *,
    division: Division | None = None,
    query: str = "",
    status: StatusFilter = ALL_STATUSES,
) -> list[Beer]:
    """Batches visible for a division, search text and status filter.

    Newest brew date first; batches brewed the same day keep their order.
    """
    needle = query.lower()
    visible = [
        beer
        for beer in beers
        if (division is None or beer.division == division)
        and _matches_query(beer, needle)
        and (status == ALL_STATUSES or beer.status == status)
    ]
    return sorted(visible, key=lambda beer: beer.brew_date, reverse=True)


def paginate(items: Sequence[T], *, page: int = 1, page_size: int = 12) -> Page[T]:
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be positive")

    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        total=len(items),
        page=page,
        page_size=page_size,
    )
