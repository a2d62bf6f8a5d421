from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.models.beer import BeerBatch
from app.services.beer_records import (
    BeerDraft,
    BeerNote,
    BeerStatus,
    Division,
    HopIngredient,
    Ingredients,
    MaltIngredient,
    YeastIngredient,
)
from app.services.beer_store import SqlBeerStore
from app.services.exceptions import BatchNotFoundError, PersistenceError


def _draft(**overrides: object) -> BeerDraft:
    values: dict[str, object] = {
        "name": "Bryggeriets IPA",
        "style": "IPA",
        "original_gravity": 1.062,
        "final_gravity": 1.011,
        "brew_date": date(2024, 3, 1),
        "division": Division.OTTERDAL_BRYGGERI,
        "batch_size": 40.0,
        "allergens": "bygg, hvete",
        "ingredients": Ingredients(
            malts=(
                MaltIngredient(id="m1", name="Pale Ale", amount=8.5, supplier="Weyermann"),
                MaltIngredient(id="m2", name="Crystal 60", amount=0.4),
            ),
            hops=(
                HopIngredient(id="h1", name="Citra", amount=60, alpha_acid=12.5, timing=10),
                HopIngredient(id="h2", name="Mosaic", amount=100, timing=0, batch_number="L-22"),
            ),
            yeast=(YeastIngredient(id="y1", name="US-05", type="dry", amount=2, temperature=19.0),),
        ),
    }
    values.update(overrides)
    return BeerDraft(**values)


@pytest.fixture
def store(db: Session) -> SqlBeerStore:
    return SqlBeerStore(db)


def test_create_and_list_round_trip(store: SqlBeerStore) -> None:
    draft = _draft()

    beer_id = store.create(draft)
    [beer] = store.list_all()

    assert beer.id == beer_id
    assert beer.brew_date == date(2024, 3, 1)
    assert beer.division == Division.OTTERDAL_BRYGGERI
    assert beer.status == BeerStatus.PLANNING
    assert beer.ingredients == draft.ingredients
    assert beer.allergens == "bygg, hvete"
    assert beer.notes == ()


def test_find_loads_a_single_batch(store: SqlBeerStore) -> None:
    wanted = store.create(_draft(name="Stout"))
    store.create(_draft(name="Pils"))

    beer = store.find(wanted)

    assert beer is not None
    assert beer.id == wanted
    assert beer.name == "Stout"
    assert beer.ingredients == _draft().ingredients
    assert store.find("nope") is None


def test_dates_are_stored_as_timestamps(store: SqlBeerStore, db: Session) -> None:
    beer_id = store.create(_draft(status=BeerStatus.READY, completion_date=date(2024, 3, 20)))

    row = db.get(BeerBatch, beer_id)

    assert row.brewed_at == datetime(2024, 3, 1)
    assert row.completed_at == datetime(2024, 3, 20)
    assert row.best_before_at is None


def test_partial_update_changes_only_given_fields(store: SqlBeerStore) -> None:
    beer_id = store.create(_draft())

    store.update(beer_id, {"status": BeerStatus.READY, "completion_date": date(2024, 3, 30)})
    [beer] = store.list_all()

    assert beer.status == BeerStatus.READY
    assert beer.completion_date == date(2024, 3, 30)
    assert beer.name == "Bryggeriets IPA"
    assert len(beer.ingredients.malts) == 2


def test_update_replaces_ingredients_and_keeps_order(store: SqlBeerStore) -> None:
    beer_id = store.create(_draft())
    replacement = Ingredients(
        malts=(
            MaltIngredient(id="m2", name="Crystal 60", amount=0.5),
            MaltIngredient(id="m3", name="Munich", amount=1.0),
            MaltIngredient(id="m1", name="Pale Ale", amount=8.0),
        ),
    )

    store.update(beer_id, {"ingredients": replacement})
    [beer] = store.list_all()

    assert [malt.id for malt in beer.ingredients.malts] == ["m2", "m3", "m1"]
    assert beer.ingredients.hops == ()
    assert beer.ingredients.yeast == ()


def test_append_note_preserves_order_and_normalizes_timezone(store: SqlBeerStore) -> None:
    beer_id = store.create(_draft())
    plus_two = timezone(timedelta(hours=2))

    store.append_note(beer_id, BeerNote(id="n1", date=datetime(2024, 3, 2, 10, 0), text="Kraftig gjæring"))
    store.append_note(beer_id, BeerNote(id="n2", date=datetime(2024, 3, 1, 12, 0, tzinfo=plus_two), text="Earlier"))
    [beer] = store.list_all()

    assert [note.id for note in beer.notes] == ["n1", "n2"]
    assert beer.notes[1].date == datetime(2024, 3, 1, 10, 0)


def test_delete_removes_batch_and_children(store: SqlBeerStore, db: Session) -> None:
    beer_id = store.create(_draft())
    store.append_note(beer_id, BeerNote(id="n1", date=datetime(2024, 3, 2), text="note"))

    store.delete(beer_id)

    assert store.list_all() == []
    assert db.get(BeerBatch, beer_id) is None


def test_missing_batch_raises_not_found(store: SqlBeerStore) -> None:
    with pytest.raises(BatchNotFoundError):
        store.update("nope", {"name": "x"})
    with pytest.raises(BatchNotFoundError):
        store.delete("nope")
    with pytest.raises(BatchNotFoundError):
        store.append_note("nope", BeerNote(id="n1", date=datetime(2024, 1, 1), text="x"))


def test_database_failure_becomes_persistence_error(
    store: SqlBeerStore,
    db: Session,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def broken_commit() -> None:
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", broken_commit)

    with pytest.raises(PersistenceError):
        store.create(_draft())

    monkeypatch.undo()
    assert store.list_all() == []
