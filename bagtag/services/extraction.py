"""AI Extraction Service: equipment, receipt and valuation lookups.

Every call asks the model for a single JSON object and validates it into a
suggestion type. Anything that is not JSON, fails validation, or comes back
from a failed API call surfaces as :class:`ExtractionError`.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Sequence
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bagtag.core.config import settings
from bagtag.core.exceptions import ExtractionError
from bagtag.domain.equipment import Category
from bagtag.schemas.suggestion import (
    IdentifiedEquipment,
    ModelList,
    ReceiptSuggestion,
    TradeInQuote,
)
from bagtag.utils.openai_client import OpenAIClientWrapper

SchemaT = TypeVar("SchemaT", bound=BaseModel)

logger = structlog.get_logger(__name__)

_CATEGORIES = ", ".join(c.value for c in Category)

EQUIPMENT_FORMAT = (
    "Respond with a JSON object with keys: "
    '"brand" (manufacturer, e.g. TaylorMade, Callaway), '
    '"model" (specific model name, e.g. R540, Great Big Bertha), '
    f'"type" (one of: {_CATEGORIES}), '
    '"loft" (degrees as text, e.g. "9.5"), '
    '"setComposition" (array of club labels such as "4", "PW" when it is an iron set), '
    '"shaftMakeModel" (shaft manufacturer and model), '
    '"shaftStiffness" (shaft flex). '
    "brand, model and type are required; omit anything you cannot tell."
)
RECEIPT_FORMAT = (
    'Respond with a JSON object with keys "price" (number, total price on the receipt) '
    'and "purchaseDate" (date as YYYY-MM-DD). price is required.'
)
TRADE_IN_FORMAT = (
    'Respond with a JSON object with numeric keys "low" and "high": the low and high '
    "trade-in estimates in USD."
)
MODELS_FORMAT = 'Respond with a JSON object {"models": [<model name>, ...]}.'


def _image_part(image: bytes, mime_type: str) -> dict[str, Any]:
    encoded = base64.b64encode(image).decode("ascii")
    return {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}}


class AIExtractionService:
    def __init__(self, client: OpenAIClientWrapper | None = None, model: str | None = None):
        self._client = client
        self._model = model or settings.openai_model

    def _get_client(self) -> OpenAIClientWrapper:
        if self._client is None:
            try:
                self._client = OpenAIClientWrapper()
            except ValueError as exc:
                raise ExtractionError("AI extraction is not configured") from exc
        return self._client

    async def _ask(
        self,
        operation: str,
        schema: type[SchemaT],
        content: str | list[dict[str, Any]],
        *,
        temperature: float,
    ) -> SchemaT:
        log = logger.bind(operation=operation, model=self._model)
        try:
            text = await self._get_client().json_completion(
                model=self._model,
                messages=[{"role": "user", "content": content}],
                temperature=temperature,
                operation=operation,
            )
        except ExtractionError:
            raise
        except Exception as exc:
            log.warning("extraction_request_failed", error=str(exc))
            raise ExtractionError(f"{operation} failed") from exc

        if not text:
            log.warning("extraction_empty_response")
            raise ExtractionError(f"{operation} returned no content")
        try:
            payload = json.loads(text)
            return schema.model_validate(payload)
        except (json.JSONDecodeError, PydanticValidationError) as exc:
            log.warning("extraction_malformed_response", error=str(exc))
            raise ExtractionError(f"{operation} returned malformed data") from exc

    async def identify_equipment(self, image: bytes, mime_type: str) -> IdentifiedEquipment:
        prompt = (
            "Identify this golf equipment. Return Brand, Model, Type, and specifications. "
            + EQUIPMENT_FORMAT
        )
        return await self._ask(
            "identify_equipment",
            IdentifiedEquipment,
            [{"type": "text", "text": prompt}, _image_part(image, mime_type)],
            temperature=0.1,
        )

    async def extract_receipt(self, image: bytes, mime_type: str) -> ReceiptSuggestion:
        prompt = "Extract price and date from this receipt. " + RECEIPT_FORMAT
        receipt = await self._ask(
            "extract_receipt",
            ReceiptSuggestion,
            [{"type": "text", "text": prompt}, _image_part(image, mime_type)],
            temperature=0.1,
        )
        if receipt.price is None:
            raise ExtractionError("extract_receipt returned no price")
        return receipt

    async def search_catalog(self, query: str) -> IdentifiedEquipment:
        prompt = (
            "You are an expert golf equipment database (2000-present). "
            f'Find item: "{query}". ' + EQUIPMENT_FORMAT
        )
        return await self._ask("search_catalog", IdentifiedEquipment, prompt, temperature=0.2)

    async def estimate_trade_in(
        self,
        brand: str,
        model: str,
        category: Category,
        set_composition: Sequence[str] | None = None,
    ) -> TradeInQuote:
        item = f"{brand} {model} {category.value}"
        if set_composition:
            item += f" set ({', '.join(set_composition)})"
        prompt = f"Estimate trade-in value for {item} in USD. " + TRADE_IN_FORMAT
        return await self._ask("estimate_trade_in", TradeInQuote, prompt, temperature=0.1)

    async def list_models(self, brand: str, category: Category) -> list[str]:
        prompt = (
            f"List 30 popular {brand} {category.value} models released since 2000. "
            + MODELS_FORMAT
        )
        result = await self._ask("list_models", ModelList, prompt, temperature=0.3)
        return result.models
