from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from app.services.beer_records import Beer, BeerStatus, production_days


@dataclass(frozen=True)
class DivisionStats:
    total: int
    ready: int
    in_progress: int
    average_abv: float
    total_volume: float
    average_production_days: int


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def build_division_stats(beers: Sequence[Beer], now: date | None = None) -> DivisionStats:
    if not beers:
        return DivisionStats(
            total=0,
            ready=0,
            in_progress=0,
            average_abv=0.0,
            total_volume=0.0,
            average_production_days=0,
        )

    today = now or date.today()
    ready = sum(1 for beer in beers if beer.status == BeerStatus.READY)
    day_counts = [production_days(beer, now=today) for beer in beers]

    return DivisionStats(
        total=len(beers),
        ready=ready,
        in_progress=len(beers) - ready,
        average_abv=sum(beer.abv for beer in beers) / len(beers),
        total_volume=sum(beer.batch_size for beer in beers),
        average_production_days=_round_half_up(sum(day_counts) / len(day_counts)),
    )
