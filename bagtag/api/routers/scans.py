"""/scans routers: AI-assisted form pre-fill."""

from fastapi import APIRouter, Depends, File, Query, UploadFile

from bagtag.api.deps import get_extraction_service, get_intake_service, get_session_context
from bagtag.domain.equipment import Category
from bagtag.schemas.common import ErrorResponse
from bagtag.schemas.suggestion import CatalogSearchRequest, ModelList, ScanResponse
from bagtag.services.accounts import SessionContext
from bagtag.services.extraction import AIExtractionService
from bagtag.services.intake import IntakeService

router = APIRouter(prefix="/scans", tags=["scans"])

_SCAN_DESC = (
    "Stores the image, then asks the model about it. Upload and analysis fail "
    "independently: `status` says which step failed and a stored image URL is "
    "returned even when analysis fails."
)


@router.post(
    "/photo",
    response_model=ScanResponse,
    response_model_by_alias=False,
    summary="Identify equipment from a photo",
    description=_SCAN_DESC,
)
async def scan_photo(
    file: UploadFile = File(...),
    _: SessionContext = Depends(get_session_context),
    svc: IntakeService = Depends(get_intake_service),
):
    data = await file.read()
    return await svc.scan_photo(data, file.content_type or "", file.filename)


@router.post(
    "/receipt",
    response_model=ScanResponse,
    response_model_by_alias=False,
    summary="Read price and purchase date from a receipt",
    description=_SCAN_DESC,
)
async def scan_receipt(
    file: UploadFile = File(...),
    _: SessionContext = Depends(get_session_context),
    svc: IntakeService = Depends(get_intake_service),
):
    data = await file.read()
    return await svc.scan_receipt(data, file.content_type or "", file.filename)


@router.post(
    "/search",
    response_model=ScanResponse,
    response_model_by_alias=False,
    summary="Look up equipment by name",
)
async def search_catalog(
    body: CatalogSearchRequest,
    _: SessionContext = Depends(get_session_context),
    svc: IntakeService = Depends(get_intake_service),
):
    return await svc.search(body.query)


@router.get(
    "/models",
    response_model=ModelList,
    summary="Popular models for a brand and type",
    responses={502: {"model": ErrorResponse, "description": "lookup failed"}},
)
async def list_models(
    brand: str = Query(..., min_length=1, max_length=120),
    category: Category = Query(...),
    _: SessionContext = Depends(get_session_context),
    extractor: AIExtractionService = Depends(get_extraction_service),
):
    return ModelList(models=await extractor.list_models(brand, category))
