from datetime import date

import pytest

from app.services.batch_search import filter_batches, paginate
from app.services.beer_records import Beer, BeerStatus, Division


def _beer(beer_id: str, **overrides: object) -> Beer:
    values: dict[str, object] = {
        "id": beer_id,
        "name": f"Batch {beer_id}",
        "style": "Stout",
        "original_gravity": 1.050,
        "final_gravity": 1.010,
        "brew_date": date(2024, 1, 1),
        "division": Division.OTTERDAL_BRYGGERI,
        "batch_size": 20.0,
    }
    values.update(overrides)
    return Beer(**values)


@pytest.fixture
def beers() -> list[Beer]:
    return [
        _beer("jan", name="IPA Deluxe", style="American IPA", brew_date=date(2024, 1, 1)),
        _beer("mar", name="Vinterstout", description="Roasty and dark", brew_date=date(2024, 3, 1), status=BeerStatus.READY),
        _beer("feb", name="Pilsner", style="Czech Pils", brew_date=date(2024, 2, 1), status=BeerStatus.FERMENTING),
        _beer("pub", name="Pub IPA", style="IPA", division=Division.JOHANS_PUB, brew_date=date(2024, 4, 1)),
    ]


def test_sorts_by_brew_date_newest_first(beers: list[Beer]) -> None:
    visible = filter_batches(beers, division=Division.OTTERDAL_BRYGGERI)

    assert [beer.brew_date for beer in visible] == [date(2024, 3, 1), date(2024, 2, 1), date(2024, 1, 1)]


def test_query_is_case_insensitive_substring(beers: list[Beer]) -> None:
    visible = filter_batches(beers, division=Division.OTTERDAL_BRYGGERI, query="ipa")

    assert [beer.id for beer in visible] == ["jan"]


def test_query_matches_style_and_description(beers: list[Beer]) -> None:
    assert [b.id for b in filter_batches(beers, division=Division.OTTERDAL_BRYGGERI, query="PILS")] == ["feb"]
    assert [b.id for b in filter_batches(beers, division=Division.OTTERDAL_BRYGGERI, query="roasty")] == ["mar"]


def test_unmatched_query_yields_empty_list(beers: list[Beer]) -> None:
    assert filter_batches(beers, division=Division.OTTERDAL_BRYGGERI, query="weizen") == []


def test_status_filter_and_all_sentinel(beers: list[Beer]) -> None:
    ready = filter_batches(beers, division=Division.OTTERDAL_BRYGGERI, status=BeerStatus.READY)
    everything = filter_batches(beers, division=Division.OTTERDAL_BRYGGERI, status="All")

    assert [beer.id for beer in ready] == ["mar"]
    assert len(everything) == 3


def test_query_and_status_combine(beers: list[Beer]) -> None:
    visible = filter_batches(beers, division=Division.OTTERDAL_BRYGGERI, query="ipa", status=BeerStatus.READY)
    assert visible == []


def test_division_is_optional(beers: list[Beer]) -> None:
    assert [beer.id for beer in filter_batches(beers, query="ipa")] == ["pub", "jan"]


def test_same_brew_date_keeps_input_order() -> None:
    beers = [_beer("first"), _beer("second"), _beer("third")]
    assert [beer.id for beer in filter_batches(beers)] == ["first", "second", "third"]


def test_paginate_slices_and_counts() -> None:
    page = paginate(list(range(25)), page=2, page_size=10)

    assert page.items == list(range(10, 20))
    assert page.total == 25
    assert page.pages == 3


def test_paginate_past_last_page_is_empty() -> None:
    page = paginate([1, 2, 3], page=5, page_size=2)

    assert page.items == []
    assert page.total == 3
    assert page.pages == 2


def test_paginate_rejects_non_positive_values() -> None:
    with pytest.raises(ValueError):
        paginate([1], page=0)
