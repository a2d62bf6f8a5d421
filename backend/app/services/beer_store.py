from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import fields
from datetime import date, datetime, time
from typing import Protocol
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from app.models.beer import BeerBatch, BeerNoteEntry, HopAddition, MaltAddition, YeastAddition
from app.services.beer_records import (
    Beer,
    BeerDraft,
    BeerNote,
    BeerStatus,
    Division,
    HopIngredient,
    Ingredients,
    MaltIngredient,
    YeastIngredient,
    naive_utc,
)
from app.services.exceptions import BatchNotFoundError, PersistenceError

logger = logging.getLogger("bryggeri.store")

_DATE_COLUMNS = {
    "brew_date": "brewed_at",
    "completion_date": "completed_at",
    "best_before_date": "best_before_at",
}
_PLAIN_COLUMNS = {
    "name",
    "style",
    "original_gravity",
    "final_gravity",
    "description",
    "batch_size",
    "allergens",
}


class BeerStore(Protocol):
    def list_all(self) -> list[Beer]: ...

    def find(self, beer_id: str) -> Beer | None: ...

    def create(self, draft: BeerDraft) -> str: ...

    def update(self, beer_id: str, changes: Mapping[str, object]) -> None: ...

    def delete(self, beer_id: str) -> None: ...

    def append_note(self, beer_id: str, note: BeerNote) -> None: ...


def to_timestamp(value: date | None) -> datetime | None:
    if value is None:
        return None
    return datetime.combine(value, time.min)


def to_date(value: datetime | None) -> date | None:
    if value is None:
        return None
    return value.date()


def beer_from_row(row: BeerBatch) -> Beer:
    return Beer(
        id=row.id,
        name=row.name,
        style=row.style,
        original_gravity=row.original_gravity,
        final_gravity=row.final_gravity,
        brew_date=to_date(row.brewed_at),
        completion_date=to_date(row.completed_at),
        best_before_date=to_date(row.best_before_at),
        description=row.description,
        division=Division(row.division),
        batch_size=row.batch_size,
        status=BeerStatus(row.status),
        allergens=row.allergens,
        notes=tuple(BeerNote(id=entry.id, date=entry.recorded_at, text=entry.text) for entry in row.notes),
        ingredients=Ingredients(
            malts=tuple(
                MaltIngredient(
                    id=malt.id,
                    name=malt.name,
                    amount=malt.amount,
                    batch_number=malt.batch_number,
                    supplier=malt.supplier,
                )
                for malt in row.malts
            ),
            hops=tuple(
                HopIngredient(
                    id=hop.id,
                    name=hop.name,
                    amount=hop.amount,
                    alpha_acid=hop.alpha_acid,
                    timing=hop.timing,
                    batch_number=hop.batch_number,
                    supplier=hop.supplier,
                )
                for hop in row.hops
            ),
            yeast=tuple(
                YeastIngredient(
                    id=yeast.id,
                    name=yeast.name,
                    type=yeast.yeast_type,
                    amount=yeast.amount,
                    temperature=yeast.temperature_c,
                    batch_number=yeast.batch_number,
                    supplier=yeast.supplier,
                )
                for yeast in row.yeasts
            ),
        ),
    )


class SqlBeerStore:
    """Batch persistence over a SQLAlchemy session.

    Calendar dates are stored as midnight timestamps and handed back as
    ``date`` values. Every write commits on success and rolls back on any
    database error, which surfaces as ``PersistenceError``.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _query(self) -> Query[BeerBatch]:
        return self.db.query(BeerBatch).options(
            selectinload(BeerBatch.notes),
            selectinload(BeerBatch.malts),
            selectinload(BeerBatch.hops),
            selectinload(BeerBatch.yeasts),
        )

    def list_all(self) -> list[Beer]:
        try:
            rows = self._query().order_by(BeerBatch.created_at.asc()).all()
        except SQLAlchemyError as exc:
            logger.exception("Loading batches failed")
            raise PersistenceError("Could not load batches") from exc
        return [beer_from_row(row) for row in rows]

    def find(self, beer_id: str) -> Beer | None:
        try:
            row = self._query().filter(BeerBatch.id == beer_id).one_or_none()
        except SQLAlchemyError as exc:
            logger.exception("Loading batch %s failed", beer_id)
            raise PersistenceError(f"Could not load batch {beer_id}") from exc
        return beer_from_row(row) if row is not None else None

    def create(self, draft: BeerDraft) -> str:
        beer_id = uuid4().hex
        with self._write("create", beer_id):
            row = BeerBatch(id=beer_id)
            self.db.add(row)
            self._apply(row, {item.name: getattr(draft, item.name) for item in fields(BeerDraft)})
        return beer_id

    def update(self, beer_id: str, changes: Mapping[str, object]) -> None:
        with self._write("update", beer_id):
            row = self._get_row(beer_id)
            self._apply(row, changes)

    def delete(self, beer_id: str) -> None:
        with self._write("delete", beer_id):
            self.db.delete(self._get_row(beer_id))

    def append_note(self, beer_id: str, note: BeerNote) -> None:
        with self._write("append note to", beer_id):
            row = self._get_row(beer_id)
            row.notes.append(
                BeerNoteEntry(
                    id=note.id,
                    position=len(row.notes),
                    recorded_at=naive_utc(note.date),
                    text=note.text,
                )
            )

    @contextmanager
    def _write(self, action: str, beer_id: str) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Could not %s batch %s", action, beer_id)
            raise PersistenceError(f"Could not {action} batch") from exc

    def _get_row(self, beer_id: str) -> BeerBatch:
        row = self.db.get(BeerBatch, beer_id)
        if row is None:
            raise BatchNotFoundError(beer_id)
        return row

    def _apply(self, row: BeerBatch, changes: Mapping[str, object]) -> None:
        for key, value in changes.items():
            if key in _DATE_COLUMNS:
                setattr(row, _DATE_COLUMNS[key], to_timestamp(value))
            elif key in _PLAIN_COLUMNS:
                setattr(row, key, value)
            elif key == "division":
                row.division = Division(value).value
            elif key == "status":
                row.status = BeerStatus(value).value
            elif key == "ingredients":
                self._replace_ingredients(row, value)
            else:
                raise ValueError(f"Unknown batch field '{key}'")

    def _replace_ingredients(self, row: BeerBatch, ingredients: Ingredients) -> None:
        # Old rows must be gone before new ones reuse their ids.
        row.malts.clear()
        row.hops.clear()
        row.yeasts.clear()
        self.db.flush()

        row.malts.extend(
            MaltAddition(
                id=malt.id,
                position=position,
                name=malt.name,
                amount=malt.amount,
                batch_number=malt.batch_number,
                supplier=malt.supplier,
            )
            for position, malt in enumerate(ingredients.malts)
        )
        row.hops.extend(
            HopAddition(
                id=hop.id,
                position=position,
                name=hop.name,
                amount=hop.amount,
                alpha_acid=hop.alpha_acid,
                timing=hop.timing,
                batch_number=hop.batch_number,
                supplier=hop.supplier,
            )
            for position, hop in enumerate(ingredients.hops)
        )
        row.yeasts.extend(
            YeastAddition(
                id=yeast.id,
                position=position,
                name=yeast.name,
                yeast_type=yeast.type,
                amount=yeast.amount,
                temperature_c=yeast.temperature,
                batch_number=yeast.batch_number,
                supplier=yeast.supplier,
            )
            for position, yeast in enumerate(ingredients.yeast)
        )
