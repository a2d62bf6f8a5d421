from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum

ABV_FACTOR = 131.25
SECONDS_PER_DAY = 24 * 60 * 60


class Division(str, Enum):
    OTTERDAL_BRYGGERI = "Otterdal Bryggeri"
    JOHANS_PUB = "Johans Pub"


class BeerStatus(str, Enum):
    PLANNING = "Planning"
    BREWING = "Brewing"
    FERMENTING = "Fermenting"
    CONDITIONING = "Conditioning"
    READY = "Ready"


STATUS_PIPELINE: tuple[BeerStatus, ...] = tuple(BeerStatus)


@dataclass(frozen=True)
class MaltIngredient:
    id: str
    amount: float
    name: str | None = None
    batch_number: str | None = None
    supplier: str | None = None


@dataclass(frozen=True)
class HopIngredient:
    id: str
    amount: float
    name: str | None = None
    alpha_acid: float | None = None
    # Minutes from end of boil; 0 means dry hop.
    timing: int | None = None
    batch_number: str | None = None
    supplier: str | None = None


@dataclass(frozen=True)
class YeastIngredient:
    id: str
    amount: float
    name: str | None = None
    type: str | None = None
    temperature: float | None = None
    batch_number: str | None = None
    supplier: str | None = None


@dataclass(frozen=True)
class Ingredients:
    malts: tuple[MaltIngredient, ...] = ()
    hops: tuple[HopIngredient, ...] = ()
    yeast: tuple[YeastIngredient, ...] = ()


@dataclass(frozen=True)
class BeerNote:
    id: str
    date: datetime
    text: str


@dataclass(frozen=True, kw_only=True)
class BeerDraft:
    """Everything needed to register a batch, before the store assigns an id."""

    name: str
    style: str
    original_gravity: float
    final_gravity: float
    brew_date: date
    division: Division
    batch_size: float
    status: BeerStatus = BeerStatus.PLANNING
    completion_date: date | None = None
    best_before_date: date | None = None
    description: str | None = None
    allergens: str | None = None
    ingredients: Ingredients = field(default_factory=Ingredients)

    @property
    def abv(self) -> float:
        return calculate_abv(self.original_gravity, self.final_gravity)


@dataclass(frozen=True, kw_only=True)
class Beer(BeerDraft):
    id: str
    notes: tuple[BeerNote, ...] = ()

    def with_note(self, note: BeerNote) -> Beer:
        return replace(self, notes=(*self.notes, note))


def calculate_abv(og: float, fg: float) -> float:
    """ABV from original and final gravity. Unrounded and unvalidated."""
    return (og - fg) * ABV_FACTOR


def naive_utc(value: datetime) -> datetime:
    """Timestamps are kept as naive UTC; aware values are converted."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def next_status(status: BeerStatus) -> BeerStatus | None:
    index = STATUS_PIPELINE.index(status)
    if index + 1 >= len(STATUS_PIPELINE):
        return None
    return STATUS_PIPELINE[index + 1]


def resolve_completion_date(
    status: BeerStatus,
    *,
    requested: date | None = None,
    current: date | None = None,
    today: date | None = None,
) -> date | None:
    """Completion date a batch should carry once it is in ``status``.

    Only Ready batches have one. An explicitly requested date wins, then a
    date the batch already had, then today. Any other status clears it.
    """
    if status != BeerStatus.READY:
        return None
    if requested is not None:
        return requested
    if current is not None:
        return current
    return today or date.today()


def production_days(beer: BeerDraft, now: date | None = None) -> int:
    if beer.status == BeerStatus.READY and beer.completion_date is not None:
        end = beer.completion_date
    else:
        end = now or date.today()

    elapsed = end - beer.brew_date
    return math.ceil(elapsed.total_seconds() / SECONDS_PER_DAY)
