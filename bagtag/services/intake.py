"""Scan flows: upload an image, then ask the model about it.

The upload and the analysis fail independently. A stored image is kept even
when analysis fails, and analysis is skipped when the upload fails.
"""

from __future__ import annotations

import structlog

from bagtag.core.exceptions import ExtractionError, UploadError
from bagtag.schemas.suggestion import ScanResponse
from bagtag.services.extraction import AIExtractionService
from bagtag.services.storage import CLUB_PHOTOS, RECEIPT_PHOTOS, BlobStore

ANALYSIS_COMPLETE = "AI analysis complete!"
RECEIPT_FOUND = "Receipt details found!"
UPLOAD_FAILED = "Upload failed."
SCAN_FAILED = "Scan failed."
RESULT_FOUND = "Result found!"
NOT_FOUND = "Not found."

logger = structlog.get_logger(__name__)


class IntakeService:
    def __init__(self, store: BlobStore, extractor: AIExtractionService) -> None:
        self._store = store
        self._extractor = extractor

    async def _upload(self, data: bytes, mime_type: str, folder: str, filename: str | None):
        try:
            return await self._store.upload(data, mime_type, folder, filename)
        except UploadError as exc:
            logger.warning("scan_upload_failed", folder=folder, error=str(exc))
            return None

    async def scan_photo(
        self, data: bytes, mime_type: str, filename: str | None = None
    ) -> ScanResponse:
        url = await self._upload(data, mime_type, CLUB_PHOTOS, filename)
        if url is None:
            return ScanResponse(status=UPLOAD_FAILED)
        try:
            suggestion = await self._extractor.identify_equipment(data, mime_type)
        except ExtractionError as exc:
            logger.warning("scan_analysis_failed", kind="photo", error=str(exc))
            return ScanResponse(status=SCAN_FAILED, photo_url=url)
        return ScanResponse(status=ANALYSIS_COMPLETE, photo_url=url, suggestion=suggestion)

    async def scan_receipt(
        self, data: bytes, mime_type: str, filename: str | None = None
    ) -> ScanResponse:
        url = await self._upload(data, mime_type, RECEIPT_PHOTOS, filename)
        if url is None:
            return ScanResponse(status=UPLOAD_FAILED)
        try:
            receipt = await self._extractor.extract_receipt(data, mime_type)
        except ExtractionError as exc:
            logger.warning("scan_analysis_failed", kind="receipt", error=str(exc))
            return ScanResponse(status=SCAN_FAILED, receipt_url=url)
        return ScanResponse(status=RECEIPT_FOUND, receipt_url=url, receipt=receipt)

    async def search(self, query: str) -> ScanResponse:
        try:
            suggestion = await self._extractor.search_catalog(query)
        except ExtractionError as exc:
            logger.info("catalog_search_missed", error=str(exc))
            return ScanResponse(status=NOT_FOUND)
        return ScanResponse(status=RESULT_FOUND, suggestion=suggestion)
