from fastapi import APIRouter, Depends, Response

from bagtag.api.deps import get_equipment_service, get_session_context
from bagtag.services.accounts import SessionContext
from bagtag.services.equipment import EquipmentService
from bagtag.services.report import render_pdf, report_filename

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get(
    "/inventory.pdf",
    summary="Export the inventory as PDF",
    description="Current Bag first, then Locker Room; empty sections are left out.",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def inventory_pdf(
    session: SessionContext = Depends(get_session_context),
    svc: EquipmentService = Depends(get_equipment_service),
):
    records = await svc.list(session.user_id)
    return Response(
        content=render_pdf(records),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report_filename()}"'},
    )
