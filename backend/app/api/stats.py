from dataclasses import asdict

from fastapi import APIRouter, Depends

from app.api.beers import get_catalog
from app.schemas.beer import DivisionStatsRead
from app.services.batch_catalog import BatchCatalog
from app.services.beer_records import Division

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=DivisionStatsRead)
def get_division_stats(division: Division, catalog: BatchCatalog = Depends(get_catalog)) -> DivisionStatsRead:
    return DivisionStatsRead(division=division, **asdict(catalog.stats(division)))
