"""Utilities to map domain records into response schemas."""

from __future__ import annotations

from datetime import datetime

from bagtag.domain.equipment import EquipmentRecord
from bagtag.schemas.equipment import (
    EquipmentItem,
    InventoryTotalsResponse,
    LaunchDataIn,
    SetLabelOut,
    TotalsOut,
)
from bagtag.services.summary import DerivedTotals, format_display_date, format_set_label


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def map_record_to_item(record: EquipmentRecord) -> EquipmentItem:
    label = format_set_label(record.set_composition)
    return EquipmentItem(
        id=str(record.id),
        category=record.category,
        brand=record.brand,
        model=record.model,
        location=record.location,
        loft=record.loft,
        set_composition=list(record.set_composition) if record.set_composition else None,
        set_label=SetLabelOut(text=label.text, count=label.count) if label else None,
        shaft_make_model=record.shaft_make_model,
        shaft_stiffness=record.shaft_stiffness,
        photo_url=record.photo_url,
        receipt_url=record.receipt_url,
        purchase_date=record.purchase_date,
        purchase_date_display=format_display_date(record.purchase_date),
        price=record.price,
        notes=record.notes,
        launch_data=LaunchDataIn.from_domain(record.launch_data),
        trade_in_low=record.trade_in_low,
        trade_in_high=record.trade_in_high,
        last_trade_in_checked_at=_iso(record.last_trade_in_checked_at),
        created_at=_iso(record.created_at) or "",
        version=record.version,
    )


def _totals(totals: DerivedTotals) -> TotalsOut:
    return TotalsOut(item_count=totals.item_count, total_value=totals.total_value)


def map_totals(bag: DerivedTotals, locker: DerivedTotals, overall: DerivedTotals):
    return InventoryTotalsResponse(bag=_totals(bag), locker=_totals(locker), overall=_totals(overall))
