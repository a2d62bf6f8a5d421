from datetime import date

import pytest

from app.services.beer_records import Beer, BeerStatus, Division
from app.services.division_stats import build_division_stats


def _beer(beer_id: str, **overrides: object) -> Beer:
    values: dict[str, object] = {
        "id": beer_id,
        "name": f"Batch {beer_id}",
        "style": "Pale Ale",
        "original_gravity": 1.050,
        "final_gravity": 1.010,
        "brew_date": date(2024, 1, 1),
        "division": Division.JOHANS_PUB,
        "batch_size": 20.0,
    }
    values.update(overrides)
    return Beer(**values)


def test_empty_division_yields_zeros() -> None:
    stats = build_division_stats([], now=date(2024, 1, 11))

    assert stats.total == 0
    assert stats.ready == 0
    assert stats.in_progress == 0
    assert stats.average_abv == 0
    assert stats.total_volume == 0
    assert stats.average_production_days == 0


def test_counts_volume_and_average_abv() -> None:
    beers = [
        _beer("a", status=BeerStatus.READY, completion_date=date(2024, 1, 15), batch_size=25.0),
        _beer("b", status=BeerStatus.FERMENTING, original_gravity=1.060, final_gravity=1.012, batch_size=15.5),
        _beer("c", status=BeerStatus.PLANNING, batch_size=10.0),
    ]

    stats = build_division_stats(beers, now=date(2024, 1, 11))

    assert stats.total == 3
    assert stats.ready == 1
    assert stats.in_progress == 2
    assert stats.total_volume == pytest.approx(50.5)
    assert stats.average_abv == pytest.approx((5.25 + 6.3 + 5.25) / 3)


def test_average_production_days_uses_completion_for_ready_batches() -> None:
    beers = [
        _beer("a", status=BeerStatus.READY, completion_date=date(2024, 1, 15)),
        _beer("b", status=BeerStatus.BREWING),
    ]

    stats = build_division_stats(beers, now=date(2024, 1, 11))

    assert stats.average_production_days == 12


def test_average_production_days_rounds_half_up() -> None:
    beers = [
        _beer("a", brew_date=date(2024, 1, 1)),
        _beer("b", brew_date=date(2024, 1, 2)),
    ]

    stats = build_division_stats(beers, now=date(2024, 1, 11))

    # (10 + 9) / 2 == 9.5
    assert stats.average_production_days == 10
