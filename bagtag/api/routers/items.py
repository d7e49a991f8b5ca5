"""/items routers: the signed-in user's equipment."""

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from bagtag.api.deps import (
    get_delete_confirmations,
    get_equipment_service,
    get_extraction_service,
    get_session_context,
)
from bagtag.domain.equipment import Location
from bagtag.schemas.common import ErrorResponse
from bagtag.schemas.equipment import (
    DeleteArmedResponse,
    EquipmentForm,
    EquipmentItem,
    EquipmentUpdateRequest,
    InventoryTotalsResponse,
    LaunchDataIn,
)
from bagtag.schemas.mappers import map_record_to_item, map_totals
from bagtag.services.accounts import SessionContext
from bagtag.services.delete_confirmation import ConfirmOutcome, DeleteConfirmationRegistry
from bagtag.services.equipment import EquipmentService
from bagtag.services.extraction import AIExtractionService

router = APIRouter(prefix="/items", tags=["items"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Not Found"}}


@router.get(
    "",
    response_model=list[EquipmentItem],
    summary="List equipment",
    description="Newest first. `location` limits to Bag or Locker; `q` matches brand, "
    "model or type (case-insensitive substring).",
)
async def list_items(
    location: Location | None = Query(None),
    q: str | None = Query(None, max_length=200),
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
):
    records = await svc.list(session.user_id, location=location, q=q)
    return [map_record_to_item(r) for r in records]


@router.post(
    "",
    response_model=EquipmentItem,
    status_code=status.HTTP_201_CREATED,
    summary="Add equipment",
    responses={400: {"model": ErrorResponse, "description": "invalid form"}},
)
async def create_item(
    form: EquipmentForm,
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
):
    return map_record_to_item(await svc.create(session.user_id, form))


@router.get(
    "/totals",
    response_model=InventoryTotalsResponse,
    summary="Club count and value per location",
    description="A set counts once per club in it; records without a price add nothing.",
)
async def inventory_totals(
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
):
    totals = await svc.totals(session.user_id)
    return map_totals(totals.bag, totals.locker, totals.overall)


@router.get("/{item_id}", response_model=EquipmentItem, responses=_NOT_FOUND)
async def get_item(
    item_id: str,
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
):
    return map_record_to_item(await svc.get(session.user_id, item_id))


@router.put(
    "/{item_id}",
    response_model=EquipmentItem,
    summary="Replace equipment fields",
    description="Full replace of the editable fields. When `expected_version` is sent "
    "and the stored version differs the write is refused with 409.",
    responses={
        **_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "invalid form"},
        409: {"model": ErrorResponse, "description": "stale version"},
    },
)
async def update_item(
    item_id: str,
    body: EquipmentUpdateRequest,
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
):
    record = await svc.update(
        session.user_id, item_id, body, expected_version=body.expected_version
    )
    return map_record_to_item(record)


@router.post(
    "/{item_id}/toggle-location",
    response_model=EquipmentItem,
    summary="Move between Bag and Locker",
    responses=_NOT_FOUND,
)
async def toggle_location(
    item_id: str,
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
):
    return map_record_to_item(await svc.toggle_location(session.user_id, item_id))


@router.put(
    "/{item_id}/launch-data",
    response_model=EquipmentItem,
    summary="Save launch monitor numbers",
    description="An empty body clears the launch data.",
    responses=_NOT_FOUND,
)
async def update_launch_data(
    item_id: str,
    body: LaunchDataIn,
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
):
    return map_record_to_item(await svc.update_launch_data(session.user_id, item_id, body))


@router.post(
    "/{item_id}/trade-in",
    response_model=EquipmentItem,
    summary="Refresh the trade-in estimate",
    description="On failure the previous estimate is left untouched.",
    responses={**_NOT_FOUND, 502: {"model": ErrorResponse, "description": "estimate failed"}},
)
async def refresh_trade_in(
    item_id: str,
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
    estimator: AIExtractionService = Depends(get_extraction_service),
):
    return map_record_to_item(await svc.refresh_trade_in(session.user_id, item_id, estimator))


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete equipment (two-step)",
    description="The first call arms a short confirmation window and answers 202; "
    "a second call inside the window deletes and answers 204.",
    responses={202: {"model": DeleteArmedResponse}, **_NOT_FOUND},
)
async def delete_item(
    item_id: str,
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
    confirmations: DeleteConfirmationRegistry = Depends(get_delete_confirmations),
):
    await svc.get(session.user_id, item_id)
    outcome, remaining = confirmations.request(session.user_id, item_id)
    if outcome is ConfirmOutcome.ARMED:
        body = DeleteArmedResponse(expires_in=round(remaining, 3))
        return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content=body.model_dump())
    await svc.delete(session.user_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
