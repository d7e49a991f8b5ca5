"""Turn raw form input into canonical equipment records.

All category-dependent suppression rules live here and nowhere else:

- Accessory records never carry loft or shaft fields.
- An Iron record flagged as a set keeps its composition (canonically ordered)
  and drops loft; any other record drops the composition.
- Empty strings and unset numbers become ``None``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone

from bagtag.core.exceptions import ValidationError
from bagtag.domain.equipment import (
    CLUB_POSITION_ORDER,
    Category,
    EquipmentRecord,
    LaunchData,
)
from bagtag.schemas.equipment import EquipmentForm, LaunchDataIn
from bagtag.schemas.suggestion import EquipmentSuggestion

_POSITION_RANK = {label: idx for idx, label in enumerate(CLUB_POSITION_ORDER)}


def sort_set_composition(labels: Iterable[str]) -> list[str]:
    """Deduplicate and order club positions as 2..9, PW, AW, GW, SW, LW.

    Unknown labels follow the known ones in their original relative order.
    """
    seen: set[str] = set()
    unique: list[str] = []
    for raw in labels:
        label = (raw or "").strip()
        if label and label not in seen:
            seen.add(label)
            unique.append(label)
    unknown_rank = len(CLUB_POSITION_ORDER)
    # sorted() is stable, so unknown labels keep insertion order
    return sorted(unique, key=lambda label: _POSITION_RANK.get(label, unknown_rank))


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_price(raw: str | float | None) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        price = float(raw)
    else:
        text = raw.strip()
        if not text:
            return None
        try:
            price = float(text)
        except ValueError:
            return None
    if price != price or price in (float("inf"), float("-inf")):
        return None
    if price < 0:
        raise ValidationError("price must not be negative")
    return price


def normalize_launch_data(raw: LaunchDataIn | None) -> LaunchData | None:
    if raw is None:
        return None
    data = raw.to_domain()
    if data.notes is not None:
        data = replace(data, notes=_text(data.notes))
    return None if data.is_empty() else data


def normalize_for_save(
    form: EquipmentForm,
    existing: EquipmentRecord | None = None,
    *,
    now: datetime | None = None,
) -> EquipmentRecord:
    """Validate ``form`` and build the record to persist.

    ``existing`` supplies id, created_at and version on update. On create the
    id stays ``None`` for the store to assign and created_at is ``now``.

    Raises:
        ValidationError: brand/model missing or negative price.
    """
    brand = _text(form.brand)
    model = _text(form.model)
    if not brand:
        raise ValidationError("brand is required")
    if not model:
        raise ValidationError("model is required")

    category = form.category
    is_accessory = category is Category.ACCESSORY

    composition: tuple[str, ...] | None = None
    if category is Category.IRON and form.is_set:
        ordered = sort_set_composition(form.set_composition)
        if ordered:
            composition = tuple(ordered)

    loft = None if is_accessory or composition else _text(form.loft)

    low, high, checked = form.trade_in_low, form.trade_in_high, form.last_trade_in_checked_at
    if low is None and high is None and checked is None and existing is not None:
        low, high, checked = (
            existing.trade_in_low,
            existing.trade_in_high,
            existing.last_trade_in_checked_at,
        )
    if low is None or high is None or checked is None:
        low = high = checked = None
    elif low > high:
        raise ValidationError("trade-in low bound exceeds high bound")

    if existing is not None:
        record_id = existing.id
        created_at = existing.created_at
        version = existing.version
    else:
        record_id = None
        created_at = now or datetime.now(timezone.utc)
        version = 0

    return EquipmentRecord(
        id=record_id,
        category=category,
        brand=brand,
        model=model,
        created_at=created_at,
        location=form.location,
        loft=loft,
        set_composition=composition,
        shaft_make_model=None if is_accessory else _text(form.shaft_make_model),
        shaft_stiffness=None if is_accessory else _text(form.shaft_stiffness),
        photo_url=_text(form.photo_url),
        receipt_url=_text(form.receipt_url),
        purchase_date=_text(form.purchase_date),
        price=_parse_price(form.price),
        notes=_text(form.notes),
        launch_data=normalize_launch_data(form.launch_data),
        trade_in_low=low,
        trade_in_high=high,
        last_trade_in_checked_at=checked,
        version=version,
    )


def form_from_record(record: EquipmentRecord) -> EquipmentForm:
    """Pre-fill an edit form from a stored record."""
    return EquipmentForm(
        category=record.category,
        location=record.location,
        brand=record.brand,
        model=record.model,
        loft=record.loft or "",
        is_set=record.is_set,
        set_composition=list(record.set_composition or ()),
        shaft_make_model=record.shaft_make_model or "",
        shaft_stiffness=record.shaft_stiffness or "",
        photo_url=record.photo_url,
        receipt_url=record.receipt_url,
        purchase_date=record.purchase_date or "",
        price="" if record.price is None else record.price,
        notes=record.notes or "",
        launch_data=LaunchDataIn.from_domain(record.launch_data),
        trade_in_low=record.trade_in_low,
        trade_in_high=record.trade_in_high,
        last_trade_in_checked_at=record.last_trade_in_checked_at,
    )


def apply_suggestion(form: EquipmentForm, suggestion: EquipmentSuggestion) -> EquipmentForm:
    """Overlay the non-empty parts of an AI suggestion onto ``form``.

    The merged form is still raw input and must pass through
    :func:`normalize_for_save` before anything is stored.
    """
    updates: dict = {}
    for name in ("brand", "model", "loft", "shaft_make_model", "shaft_stiffness"):
        value = getattr(suggestion, name)
        if value:
            updates[name] = value
    if suggestion.category is not None:
        updates["category"] = suggestion.category
    if suggestion.set_composition:
        updates["set_composition"] = list(suggestion.set_composition)
        updates["is_set"] = True
    return form.model_copy(update=updates)
