"""SQLAlchemy implementation of the equipment repository."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bagtag.domain.equipment import (
    LAUNCH_DATA_FIELDS,
    Category,
    EquipmentRecord,
    LaunchData,
    Location,
)
from bagtag.models import EquipmentItem
from bagtag.repositories.interfaces import EquipmentRepository


def _category(raw: Any) -> Category:
    try:
        return Category(raw)
    except ValueError:
        return Category.OTHER


def _location(raw: Any) -> Location:
    # Older rows stored the display labels "In Bag" / "Locker Room".
    if raw in (Location.LOCKER.value, "Locker Room"):
        return Location.LOCKER
    return Location.BAG


def _launch_data_from_json(raw: Any) -> LaunchData | None:
    if not isinstance(raw, Mapping):
        return None
    values = {name: raw.get(name) for name in LAUNCH_DATA_FIELDS}
    data = LaunchData(**values)
    return None if data.is_empty() else data


def _launch_data_to_json(data: LaunchData | None) -> dict[str, Any] | None:
    if data is None or data.is_empty():
        return None
    return {
        name: getattr(data, name)
        for name in LAUNCH_DATA_FIELDS
        if getattr(data, name) is not None
    }


def _aware(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def to_record(row: EquipmentItem) -> EquipmentRecord:
    """Map a stored row to a record; missing optional columns read as absent."""
    composition = row.set_composition or None
    low = row.trade_in_low
    high = row.trade_in_high
    checked = _aware(row.last_trade_in_check)
    if low is None or high is None or checked is None:
        low = high = checked = None
    return EquipmentRecord(
        id=str(row.id),
        category=_category(row.type),
        brand=row.brand or "",
        model=row.model or "",
        created_at=_aware(row.created_at) or datetime.now(timezone.utc),
        location=_location(row.status),
        loft=row.loft or None,
        set_composition=tuple(composition) if composition else None,
        shaft_make_model=row.shaft_make_model or None,
        shaft_stiffness=row.shaft_stiffness or None,
        photo_url=row.photo_url or None,
        receipt_url=row.receipt_url or None,
        purchase_date=row.purchase_date or None,
        price=row.price,
        notes=row.notes or None,
        launch_data=_launch_data_from_json(row.launch_data),
        trade_in_low=low,
        trade_in_high=high,
        last_trade_in_checked_at=checked,
        version=int(row.version or 0),
    )


def _write_fields(row: EquipmentItem, record: EquipmentRecord) -> None:
    row.type = record.category.value
    row.brand = record.brand
    row.model = record.model
    row.loft = record.loft
    row.set_composition = list(record.set_composition) if record.set_composition else None
    row.shaft_make_model = record.shaft_make_model
    row.shaft_stiffness = record.shaft_stiffness
    row.photo_url = record.photo_url
    row.receipt_url = record.receipt_url
    row.purchase_date = record.purchase_date
    row.price = record.price
    row.notes = record.notes
    row.launch_data = _launch_data_to_json(record.launch_data)
    row.status = record.location.value
    row.trade_in_low = record.trade_in_low
    row.trade_in_high = record.trade_in_high
    row.last_trade_in_check = record.last_trade_in_checked_at


class SqlAlchemyEquipmentRepository(EquipmentRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _row(self, user_id: str, record_id: str) -> EquipmentItem | None:
        stmt = select(EquipmentItem).where(
            EquipmentItem.id == record_id, EquipmentItem.user_id == user_id
        )
        return (await self._session.scalars(stmt)).first()

    async def list_for_user(self, user_id: str) -> list[EquipmentRecord]:
        stmt = (
            select(EquipmentItem)
            .where(EquipmentItem.user_id == user_id)
            .order_by(EquipmentItem.created_at.desc(), EquipmentItem.id.desc())
        )
        rows = (await self._session.scalars(stmt)).all()
        return [to_record(row) for row in rows]

    async def get(self, user_id: str, record_id: str) -> EquipmentRecord | None:
        row = await self._row(user_id, record_id)
        return to_record(row) if row is not None else None

    async def add(self, user_id: str, record: EquipmentRecord) -> EquipmentRecord:
        row = EquipmentItem(user_id=user_id, version=1)
        _write_fields(row, record)
        self._session.add(row)
        await self._session.flush()
        # load the server-assigned created_at
        await self._session.refresh(row)
        return to_record(row)

    async def replace(self, user_id: str, record: EquipmentRecord) -> EquipmentRecord | None:
        if record.id is None:
            return None
        row = await self._row(user_id, record.id)
        if row is None:
            return None
        _write_fields(row, record)
        row.version = int(row.version or 0) + 1
        await self._session.flush()
        return to_record(row)

    async def set_location(
        self, user_id: str, record_id: str, location: Location
    ) -> EquipmentRecord | None:
        row = await self._row(user_id, record_id)
        if row is None:
            return None
        row.status = location.value
        row.version = int(row.version or 0) + 1
        await self._session.flush()
        return to_record(row)

    async def set_launch_data(
        self, user_id: str, record_id: str, launch_data: LaunchData | None
    ) -> EquipmentRecord | None:
        row = await self._row(user_id, record_id)
        if row is None:
            return None
        row.launch_data = _launch_data_to_json(launch_data)
        row.version = int(row.version or 0) + 1
        await self._session.flush()
        return to_record(row)

    async def set_trade_in(
        self,
        user_id: str,
        record_id: str,
        *,
        low: float,
        high: float,
        checked_at: datetime,
    ) -> EquipmentRecord | None:
        row = await self._row(user_id, record_id)
        if row is None:
            return None
        row.trade_in_low = low
        row.trade_in_high = high
        row.last_trade_in_check = checked_at
        row.version = int(row.version or 0) + 1
        await self._session.flush()
        return to_record(row)

    async def delete(self, user_id: str, record_id: str) -> bool:
        stmt = delete(EquipmentItem).where(
            EquipmentItem.id == record_id, EquipmentItem.user_id == user_id
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)
