"""AI suggestion payloads.

These mirror the JSON the extraction prompts ask for. They are kept apart from
``EquipmentRecord`` on purpose: a suggestion only ever lands in a form.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bagtag.domain.equipment import Category


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EquipmentSuggestion(BaseModel):
    brand: str | None = None
    model: str | None = None
    category: Category | None = Field(default=None, alias="type")
    loft: str | None = None
    set_composition: list[str] | None = Field(default=None, alias="setComposition")
    shaft_make_model: str | None = Field(default=None, alias="shaftMakeModel")
    shaft_stiffness: str | None = Field(default=None, alias="shaftStiffness")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("category", mode="before")
    @classmethod
    def _drop_unknown_category(cls, value):
        if value is None:
            return None
        try:
            return Category(value)
        except ValueError:
            return None

    @field_validator("loft", mode="before")
    @classmethod
    def _loft_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value:g}"
        return _blank_to_none(value)

    @field_validator("brand", "model", "shaft_make_model", "shaft_stiffness", mode="before")
    @classmethod
    def _strip_blank(cls, value):
        return _blank_to_none(value)


class IdentifiedEquipment(EquipmentSuggestion):
    """Suggestion variant where brand, model and type are mandatory."""

    @model_validator(mode="after")
    def _require_identity(self) -> IdentifiedEquipment:
        if not self.brand or not self.model or self.category is None:
            raise ValueError("brand, model and type are required")
        return self


class ReceiptSuggestion(BaseModel):
    price: float | None = None
    purchase_date: str | None = Field(default=None, alias="purchaseDate")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("purchase_date", mode="before")
    @classmethod
    def _strip_blank(cls, value):
        return _blank_to_none(value)


class TradeInQuote(BaseModel):
    """Valuation bounds in USD; rejected unless ``0 <= low <= high`` and ``high > 0``."""

    low: float
    high: float

    @model_validator(mode="after")
    def _check_bounds(self) -> TradeInQuote:
        if self.low < 0 or self.high < 0:
            raise ValueError("trade-in bounds must be non-negative")
        if self.low > self.high:
            raise ValueError("trade-in low bound exceeds high bound")
        if self.high <= 0:
            raise ValueError("trade-in estimate is empty")
        return self


class ModelList(BaseModel):
    models: list[str] = Field(default_factory=list)

    @field_validator("models", mode="before")
    @classmethod
    def _clean(cls, value):
        if not isinstance(value, list):
            return value
        seen: set[str] = set()
        out: list[str] = []
        for item in value:
            if not isinstance(item, str):
                continue
            name = item.strip()
            if name and name not in seen:
                seen.add(name)
                out.append(name)
        return out


class CatalogSearchRequest(BaseModel):
    query: str = Field(min_length=1, max_length=200, description="Free-text equipment query")


class ScanResponse(BaseModel):
    status: str
    photo_url: str | None = None
    receipt_url: str | None = None
    suggestion: EquipmentSuggestion | None = None
    receipt: ReceiptSuggestion | None = None
