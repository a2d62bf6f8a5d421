from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import fields, replace
from datetime import date, datetime
from uuid import uuid4

from app.services.batch_search import ALL_STATUSES, StatusFilter, filter_batches
from app.services.beer_records import (
    Beer,
    BeerDraft,
    BeerNote,
    BeerStatus,
    Division,
    naive_utc,
    next_status,
    resolve_completion_date,
)
from app.services.beer_store import BeerStore
from app.services.division_stats import DivisionStats, build_division_stats
from app.services.exceptions import BatchNotFoundError, BatchValidationError, InvalidTransitionError

logger = logging.getLogger("bryggeri.catalog")

EDITABLE_FIELDS = frozenset(item.name for item in fields(BeerDraft))


def _check_dates(beer: BeerDraft) -> None:
    if (
        beer.best_before_date is not None
        and beer.completion_date is not None
        and beer.best_before_date < beer.completion_date
    ):
        raise BatchValidationError("Best before date cannot be earlier than the completion date")


class BatchCatalog:
    """The batches one session works on, kept in step with the store.

    Every mutation goes to the store first. The in-memory list only changes
    once that call has returned, so a failed write leaves it untouched.
    """

    def __init__(self, store: BeerStore, beers: Iterable[Beer] = ()) -> None:
        self.store = store
        self._beers: list[Beer] = list(beers)

    @classmethod
    def load(cls, store: BeerStore) -> BatchCatalog:
        return cls(store, store.list_all())

    @classmethod
    def load_one(cls, store: BeerStore, beer_id: str) -> BatchCatalog:
        """Catalog holding only ``beer_id``, or nothing when it is not stored."""
        beer = store.find(beer_id)
        return cls(store, [beer] if beer is not None else [])

    @property
    def beers(self) -> list[Beer]:
        return list(self._beers)

    def get(self, beer_id: str) -> Beer:
        for beer in self._beers:
            if beer.id == beer_id:
                return beer
        raise BatchNotFoundError(beer_id)

    def visible(
        self,
        *,
        division: Division | None = None,
        query: str = "",
        status: StatusFilter = ALL_STATUSES,
    ) -> list[Beer]:
        return filter_batches(self._beers, division=division, query=query, status=status)

    def stats(self, division: Division, now: date | None = None) -> DivisionStats:
        return build_division_stats([beer for beer in self._beers if beer.division == division], now=now)

    def add(self, draft: BeerDraft, today: date | None = None) -> Beer:
        draft = replace(
            draft,
            completion_date=resolve_completion_date(
                draft.status,
                requested=draft.completion_date,
                today=today,
            ),
        )
        _check_dates(draft)

        beer_id = self.store.create(draft)
        beer = Beer(id=beer_id, **{item.name: getattr(draft, item.name) for item in fields(BeerDraft)})
        self._beers.append(beer)
        logger.info("Registered batch %s (%s, %s)", beer.id, beer.name, beer.division.value)
        return beer

    def edit(self, beer_id: str, changes: Mapping[str, object], today: date | None = None) -> Beer:
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise BatchValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        changes = dict(changes)
        if "status" in changes:
            changes["status"] = BeerStatus(changes["status"])
        if "division" in changes:
            changes["division"] = Division(changes["division"])

        current = self.get(beer_id)
        updated = replace(current, **changes)
        completion_date = resolve_completion_date(
            updated.status,
            requested=changes.get("completion_date"),
            current=current.completion_date if current.status == BeerStatus.READY else None,
            today=today,
        )
        updated = replace(updated, completion_date=completion_date)
        _check_dates(updated)

        self.store.update(beer_id, {**changes, "completion_date": completion_date})
        self._swap(updated)
        if updated.status != current.status:
            logger.info("Batch %s moved from %s to %s", beer_id, current.status.value, updated.status.value)
        return updated

    def advance(self, beer_id: str, today: date | None = None) -> Beer:
        current = self.get(beer_id)
        target = next_status(current.status)
        if target is None:
            raise InvalidTransitionError(f"Batch is already {current.status.value}")
        return self.edit(beer_id, {"status": target}, today=today)

    def remove(self, beer_id: str) -> None:
        self.get(beer_id)
        self.store.delete(beer_id)
        self._beers = [beer for beer in self._beers if beer.id != beer_id]
        logger.info("Deleted batch %s", beer_id)

    def add_note(
        self,
        beer_id: str,
        text: str,
        *,
        note_id: str | None = None,
        at: datetime | None = None,
    ) -> BeerNote:
        current = self.get(beer_id)
        note_id = note_id or uuid4().hex
        if any(existing.id == note_id for existing in current.notes):
            raise BatchValidationError(f"Note id '{note_id}' already exists on this batch")

        recorded_at = naive_utc(at) if at is not None else datetime.utcnow()
        note = BeerNote(id=note_id, date=recorded_at, text=text)
        self.store.append_note(beer_id, note)
        self._swap(current.with_note(note))
        return note

    def _swap(self, beer: Beer) -> None:
        self._beers = [beer if existing.id == beer.id else existing for existing in self._beers]
