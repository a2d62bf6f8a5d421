from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from datetime import date
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.beer import (
    BeerCreate,
    BeerNoteCreate,
    BeerNoteRead,
    BeerPageRead,
    BeerRead,
    BeerUpdate,
    IngredientsSchema,
)
from app.services.batch_catalog import BatchCatalog
from app.services.batch_search import ALL_STATUSES, StatusFilter, paginate
from app.services.beer_records import (
    Beer,
    BeerDraft,
    BeerStatus,
    Division,
    HopIngredient,
    Ingredients,
    MaltIngredient,
    YeastIngredient,
    production_days,
)
from app.services.beer_report import render_beer_report, render_report_archive, report_filename
from app.services.beer_store import SqlBeerStore
from app.services.exceptions import (
    BatchNotFoundError,
    BatchValidationError,
    InvalidTransitionError,
    PersistenceError,
)

router = APIRouter(prefix="/beers", tags=["beers"])


@contextmanager
def translate_batch_errors() -> Iterator[None]:
    try:
        yield
    except BatchNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found") from exc
    except BatchValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage unavailable, please retry",
        ) from exc


def get_catalog(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BatchCatalog:
    _ = current_user
    with translate_batch_errors():
        return BatchCatalog.load(SqlBeerStore(db))


def get_new_batch_catalog(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BatchCatalog:
    _ = current_user
    return BatchCatalog(SqlBeerStore(db))


def get_batch_catalog(
    beer_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BatchCatalog:
    _ = current_user
    with translate_batch_errors():
        return BatchCatalog.load_one(SqlBeerStore(db), beer_id)


def _ingredients_from_schema(payload: IngredientsSchema) -> Ingredients:
    return Ingredients(
        malts=tuple(MaltIngredient(**item.model_dump()) for item in payload.malts),
        hops=tuple(HopIngredient(**item.model_dump()) for item in payload.hops),
        yeast=tuple(YeastIngredient(**item.model_dump()) for item in payload.yeast),
    )


def _parse_status_filter(value: str) -> StatusFilter:
    if value == ALL_STATUSES:
        return ALL_STATUSES
    try:
        return BeerStatus(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown status filter '{value}'",
        ) from exc


def beer_to_read(beer: Beer, today: date | None = None) -> BeerRead:
    return BeerRead(
        **asdict(beer),
        abv=beer.abv,
        production_days=production_days(beer, now=today),
    )


@router.get("", response_model=BeerPageRead)
def list_beers(
    division: Division | None = None,
    q: str = Query(default="", max_length=140),
    status_filter: str = Query(default=ALL_STATUSES, alias="status"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    catalog: BatchCatalog = Depends(get_catalog),
) -> BeerPageRead:
    visible = catalog.visible(division=division, query=q, status=_parse_status_filter(status_filter))
    result = paginate(visible, page=page, page_size=page_size)
    today = date.today()

    return BeerPageRead(
        items=[beer_to_read(beer, today) for beer in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        pages=result.pages,
    )


@router.post("", response_model=BeerRead, status_code=status.HTTP_201_CREATED)
def create_beer(payload: BeerCreate, catalog: BatchCatalog = Depends(get_new_batch_catalog)) -> BeerRead:
    draft = BeerDraft(
        **payload.model_dump(exclude={"ingredients"}),
        ingredients=_ingredients_from_schema(payload.ingredients),
    )
    with translate_batch_errors():
        beer = catalog.add(draft)
    return beer_to_read(beer)


@router.get("/reports", response_class=Response)
def export_beer_reports(
    ids: list[str] = Query(),
    catalog: BatchCatalog = Depends(get_catalog),
) -> Response:
    with translate_batch_errors():
        beers = [catalog.get(beer_id) for beer_id in dict.fromkeys(ids)]

    return Response(
        content=render_report_archive(beers),
        media_type="application/zip",
        headers={"Content-Disposition": "attachment; filename=bryggerapporter.zip"},
    )


@router.get("/{beer_id}", response_model=BeerRead)
def get_beer(beer_id: str, catalog: BatchCatalog = Depends(get_batch_catalog)) -> BeerRead:
    with translate_batch_errors():
        return beer_to_read(catalog.get(beer_id))


@router.patch("/{beer_id}", response_model=BeerRead)
def update_beer(beer_id: str, payload: BeerUpdate, catalog: BatchCatalog = Depends(get_batch_catalog)) -> BeerRead:
    changes = payload.model_dump(exclude_unset=True, exclude={"ingredients"})
    if payload.ingredients is not None:
        changes["ingredients"] = _ingredients_from_schema(payload.ingredients)

    with translate_batch_errors():
        beer = catalog.edit(beer_id, changes)
    return beer_to_read(beer)


@router.delete("/{beer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_beer(beer_id: str, catalog: BatchCatalog = Depends(get_batch_catalog)) -> Response:
    with translate_batch_errors():
        catalog.remove(beer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{beer_id}/notes", response_model=BeerNoteRead, status_code=status.HTTP_201_CREATED)
def add_beer_note(
    beer_id: str,
    payload: BeerNoteCreate,
    catalog: BatchCatalog = Depends(get_batch_catalog),
) -> BeerNoteRead:
    with translate_batch_errors():
        note = catalog.add_note(beer_id, payload.text, note_id=payload.id, at=payload.date)
    return BeerNoteRead(id=note.id, date=note.date, text=note.text)


@router.post("/{beer_id}/advance", response_model=BeerRead)
def advance_beer(beer_id: str, catalog: BatchCatalog = Depends(get_batch_catalog)) -> BeerRead:
    with translate_batch_errors():
        beer = catalog.advance(beer_id)
    return beer_to_read(beer)


@router.get("/{beer_id}/report", response_class=Response)
def export_beer_report(beer_id: str, catalog: BatchCatalog = Depends(get_batch_catalog)) -> Response:
    with translate_batch_errors():
        beer = catalog.get(beer_id)

    return Response(
        content=render_beer_report(beer),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(report_filename(beer))}"},
    )
