# bagtag/api/routers/meta.py
from fastapi import APIRouter

from bagtag.domain.equipment import CLUB_POSITION_ORDER, GOLF_BRANDS, Category, Location
from bagtag.schemas.meta import MetaOption

router = APIRouter(prefix="/meta", tags=["meta"])


@router.get("/categories", response_model=list[MetaOption], summary="Equipment types")
async def list_categories():
    return [MetaOption(key=c.value, label=c.value) for c in Category]


@router.get("/locations", response_model=list[MetaOption], summary="Bag and Locker")
async def list_locations():
    return [MetaOption(key=loc.value, label=loc.title) for loc in Location]


@router.get(
    "/club-positions",
    response_model=list[str],
    summary="Iron-set positions in canonical order",
)
async def list_club_positions():
    return list(CLUB_POSITION_ORDER)


@router.get("/brands", response_model=list[str], summary="Known golf brands")
async def list_brands():
    return list(GOLF_BRANDS)
