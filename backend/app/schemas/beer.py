from datetime import date, datetime
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from app.services.beer_records import BeerStatus, Division


def _new_id() -> str:
    return uuid4().hex


class MaltIngredientSchema(BaseModel):
    id: str = Field(default_factory=_new_id, min_length=1, max_length=64)
    name: str | None = Field(default=None, max_length=120)
    amount: float = Field(ge=0)
    batch_number: str | None = Field(default=None, max_length=60)
    supplier: str | None = Field(default=None, max_length=120)


class HopIngredientSchema(BaseModel):
    id: str = Field(default_factory=_new_id, min_length=1, max_length=64)
    name: str | None = Field(default=None, max_length=120)
    amount: float = Field(ge=0)
    alpha_acid: float | None = Field(default=None, ge=0, le=100)
    timing: int | None = Field(default=None, ge=0, le=300)
    batch_number: str | None = Field(default=None, max_length=60)
    supplier: str | None = Field(default=None, max_length=120)


class YeastIngredientSchema(BaseModel):
    id: str = Field(default_factory=_new_id, min_length=1, max_length=64)
    name: str | None = Field(default=None, max_length=120)
    type: str | None = Field(default=None, max_length=40)
    amount: float = Field(ge=0)
    temperature: float | None = Field(default=None, gt=-10, lt=60)
    batch_number: str | None = Field(default=None, max_length=60)
    supplier: str | None = Field(default=None, max_length=120)


class IngredientsSchema(BaseModel):
    malts: list[MaltIngredientSchema] = Field(default_factory=list)
    hops: list[HopIngredientSchema] = Field(default_factory=list)
    yeast: list[YeastIngredientSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "IngredientsSchema":
        for kind in ("malts", "hops", "yeast"):
            ids = [item.id for item in getattr(self, kind)]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Ingredient ids must be unique within {kind}")
        return self


def _check_best_before(completion_date: date | None, best_before_date: date | None) -> None:
    if completion_date is not None and best_before_date is not None and best_before_date < completion_date:
        raise ValueError("best_before_date cannot be earlier than completion_date")


class BeerBase(BaseModel):
    name: str = Field(min_length=1, max_length=140)
    style: str = Field(min_length=1, max_length=80)
    original_gravity: float = Field(ge=1.0, le=1.2)
    final_gravity: float = Field(ge=0.995, le=1.2)
    brew_date: date
    completion_date: date | None = None
    best_before_date: date | None = None
    description: str | None = Field(default=None, max_length=2000)
    division: Division
    batch_size: float = Field(gt=0)
    status: BeerStatus = BeerStatus.PLANNING
    allergens: str | None = Field(default=None, max_length=255)
    ingredients: IngredientsSchema = Field(default_factory=IngredientsSchema)


class BeerCreate(BeerBase):
    @model_validator(mode="after")
    def check_dates(self) -> "BeerCreate":
        # Unfinished batches drop their completion date.
        if self.status == BeerStatus.READY:
            _check_best_before(self.completion_date, self.best_before_date)
        return self


_REQUIRED_ON_UPDATE = (
    "name",
    "style",
    "original_gravity",
    "final_gravity",
    "brew_date",
    "division",
    "batch_size",
    "status",
    "ingredients",
)


class BeerUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=140)
    style: str | None = Field(default=None, min_length=1, max_length=80)
    original_gravity: float | None = Field(default=None, ge=1.0, le=1.2)
    final_gravity: float | None = Field(default=None, ge=0.995, le=1.2)
    brew_date: date | None = None
    completion_date: date | None = None
    best_before_date: date | None = None
    description: str | None = Field(default=None, max_length=2000)
    division: Division | None = None
    batch_size: float | None = Field(default=None, gt=0)
    status: BeerStatus | None = None
    allergens: str | None = Field(default=None, max_length=255)
    ingredients: IngredientsSchema | None = None

    @model_validator(mode="after")
    def check_required_not_null(self) -> "BeerUpdate":
        cleared = [name for name in _REQUIRED_ON_UPDATE if name in self.model_fields_set and getattr(self, name) is None]
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class BeerNoteCreate(BaseModel):
    id: str | None = Field(default=None, min_length=1, max_length=64)
    text: str = Field(min_length=1, max_length=4000)
    date: datetime | None = None

    @field_validator("text")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Note text cannot be blank")
        return value


class BeerNoteRead(BaseModel):
    id: str
    date: datetime
    text: str


class BeerRead(BeerBase):
    id: str
    abv: float
    production_days: int
    notes: list[BeerNoteRead] = Field(default_factory=list)


class BeerPageRead(BaseModel):
    items: list[BeerRead]
    total: int
    page: int
    page_size: int
    pages: int


class DivisionStatsRead(BaseModel):
    division: Division
    total: int
    ready: int
    in_progress: int
    average_abv: float
    total_volume: float
    average_production_days: int
