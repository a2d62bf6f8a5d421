from datetime import date, datetime

import pytest

from app.services.beer_records import (
    Beer,
    BeerNote,
    BeerStatus,
    Division,
    calculate_abv,
    next_status,
    production_days,
    resolve_completion_date,
)


def _beer(**overrides: object) -> Beer:
    values: dict[str, object] = {
        "id": "b1",
        "name": "IPA Deluxe",
        "style": "American IPA",
        "original_gravity": 1.060,
        "final_gravity": 1.012,
        "brew_date": date(2024, 1, 1),
        "division": Division.OTTERDAL_BRYGGERI,
        "batch_size": 20.0,
    }
    values.update(overrides)
    return Beer(**values)


def test_calculate_abv_known_value() -> None:
    assert calculate_abv(1.050, 1.010) == pytest.approx(5.25)


@pytest.mark.parametrize(
    ("og", "fg"),
    [(1.060, 1.012), (1.2, 0.995), (1.010, 1.030), (1.0, 1.0)],
)
def test_calculate_abv_is_unrounded_linear_formula(og: float, fg: float) -> None:
    assert calculate_abv(og, fg) == (og - fg) * 131.25


def test_calculate_abv_goes_negative_when_fg_exceeds_og() -> None:
    assert calculate_abv(1.010, 1.030) < 0


def test_abv_follows_gravity_changes() -> None:
    beer = _beer(original_gravity=1.050, final_gravity=1.010)
    assert beer.abv == pytest.approx(5.25)

    stronger = _beer(original_gravity=1.070, final_gravity=1.010)
    assert stronger.abv == pytest.approx(7.875)


def test_new_batch_defaults_to_planning_with_empty_collections() -> None:
    beer = _beer()

    assert beer.status == BeerStatus.PLANNING
    assert beer.notes == ()
    assert beer.ingredients.malts == ()
    assert beer.ingredients.hops == ()
    assert beer.ingredients.yeast == ()
    assert beer.completion_date is None


def test_next_status_walks_the_pipeline() -> None:
    assert next_status(BeerStatus.PLANNING) == BeerStatus.BREWING
    assert next_status(BeerStatus.BREWING) == BeerStatus.FERMENTING
    assert next_status(BeerStatus.FERMENTING) == BeerStatus.CONDITIONING
    assert next_status(BeerStatus.CONDITIONING) == BeerStatus.READY
    assert next_status(BeerStatus.READY) is None


def test_ready_without_requested_date_uses_today() -> None:
    assert resolve_completion_date(BeerStatus.READY, today=date(2024, 2, 3)) == date(2024, 2, 3)
    assert resolve_completion_date(BeerStatus.READY) == date.today()


def test_ready_prefers_requested_then_existing_date() -> None:
    requested = date(2024, 1, 20)
    existing = date(2024, 1, 18)

    assert resolve_completion_date(BeerStatus.READY, requested=requested, current=existing) == requested
    assert resolve_completion_date(BeerStatus.READY, current=existing, today=date(2024, 3, 1)) == existing


@pytest.mark.parametrize("status", [s for s in BeerStatus if s != BeerStatus.READY])
def test_non_ready_status_has_no_completion_date(status: BeerStatus) -> None:
    assert resolve_completion_date(status, requested=date(2024, 1, 20), current=date(2024, 1, 18)) is None


def test_production_days_for_batch_in_progress() -> None:
    beer = _beer(status=BeerStatus.FERMENTING)
    assert production_days(beer, now=date(2024, 1, 11)) == 10


def test_production_days_for_ready_batch_ignores_now() -> None:
    beer = _beer(status=BeerStatus.READY, completion_date=date(2024, 1, 15))

    assert production_days(beer, now=date(2024, 1, 11)) == 14
    assert production_days(beer, now=date(2030, 6, 1)) == 14


def test_production_days_for_ready_batch_without_completion_falls_back_to_now() -> None:
    beer = _beer(status=BeerStatus.READY)
    assert production_days(beer, now=date(2024, 1, 5)) == 4


def test_with_note_appends_without_touching_existing_notes() -> None:
    first = BeerNote(id="n1", date=datetime(2024, 1, 2, 9, 0), text="Pitched yeast")
    second = BeerNote(id="n2", date=datetime(2024, 1, 1, 9, 0), text="Older timestamp, added later")
    beer = _beer(notes=(first,))

    updated = beer.with_note(second)

    assert beer.notes == (first,)
    assert updated.notes == (first, second)
