"""Equipment use cases backed by the Unit of Work."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

import structlog
from sqlalchemy.exc import SQLAlchemyError

from bagtag.core.exceptions import ConflictError, ExtractionError, InfrastructureError, NotFoundError
from bagtag.domain.equipment import Category, EquipmentRecord, Location
from bagtag.infra.unit_of_work import UnitOfWork
from bagtag.schemas.equipment import EquipmentForm, LaunchDataIn
from bagtag.schemas.suggestion import TradeInQuote
from bagtag.services.normalizer import normalize_for_save, normalize_launch_data
from bagtag.services.summary import DerivedTotals, compute_derived_totals, matches_search

UnitOfWorkFactory = Callable[[], UnitOfWork]

logger = structlog.get_logger(__name__)


class TradeInEstimator(Protocol):
    async def estimate_trade_in(
        self,
        brand: str,
        model: str,
        category: Category,
        set_composition: Sequence[str] | None = None,
    ) -> TradeInQuote: ...


@dataclass(frozen=True)
class InventoryTotals:
    bag: DerivedTotals
    locker: DerivedTotals
    overall: DerivedTotals


def _without_trade_in(form: EquipmentForm) -> EquipmentForm:
    # Trade-in values are only ever written by refresh_trade_in.
    return form.model_copy(
        update={"trade_in_low": None, "trade_in_high": None, "last_trade_in_checked_at": None}
    )


class EquipmentService:
    """Per-user equipment use cases."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    @asynccontextmanager
    async def _unit(self) -> AsyncIterator[UnitOfWork]:
        try:
            async with self._uow_factory() as uow:
                yield uow
        except SQLAlchemyError as exc:
            logger.error("equipment_store_error", error=str(exc))
            raise InfrastructureError("database unavailable") from exc

    async def list(
        self,
        user_id: str,
        location: Location | None = None,
        q: str | None = None,
    ) -> list[EquipmentRecord]:
        async with self._unit() as uow:
            records = await uow.items.list_for_user(user_id)
        return [
            record
            for record in records
            if (location is None or record.location is location) and matches_search(record, q)
        ]

    async def get(self, user_id: str, record_id: str) -> EquipmentRecord:
        async with self._unit() as uow:
            record = await uow.items.get(user_id, record_id)
        if record is None:
            raise NotFoundError("item not found")
        return record

    async def create(self, user_id: str, form: EquipmentForm) -> EquipmentRecord:
        record = normalize_for_save(_without_trade_in(form))
        async with self._unit() as uow:
            saved = await uow.items.add(user_id, record)
        logger.info(
            "equipment_created",
            user_id=user_id,
            item_id=saved.id,
            category=saved.category.value,
        )
        return saved

    async def update(
        self,
        user_id: str,
        record_id: str,
        form: EquipmentForm,
        expected_version: int | None = None,
    ) -> EquipmentRecord:
        """Replace every mutable field of a record with the normalized form.

        Trade-in values already on the record are carried over untouched.

        Raises:
            NotFoundError: no such record for this user.
            ConflictError: ``expected_version`` is given and the stored
                version differs.
            ValidationError: the form does not normalize.
        """
        async with self._unit() as uow:
            existing = await uow.items.get(user_id, record_id)
            if existing is None:
                raise NotFoundError("item not found")
            if expected_version is not None and existing.version != expected_version:
                raise ConflictError("item was modified by another request")
            record = normalize_for_save(_without_trade_in(form), existing)
            saved = await uow.items.replace(user_id, record)
            if saved is None:
                raise NotFoundError("item not found")
        logger.info("equipment_updated", user_id=user_id, item_id=record_id, version=saved.version)
        return saved

    async def toggle_location(self, user_id: str, record_id: str) -> EquipmentRecord:
        async with self._unit() as uow:
            existing = await uow.items.get(user_id, record_id)
            if existing is None:
                raise NotFoundError("item not found")
            saved = await uow.items.set_location(user_id, record_id, existing.location.toggled())
            if saved is None:
                raise NotFoundError("item not found")
        logger.info(
            "equipment_location_toggled",
            user_id=user_id,
            item_id=record_id,
            location=saved.location.value,
        )
        return saved

    async def update_launch_data(
        self, user_id: str, record_id: str, launch_data: LaunchDataIn | None
    ) -> EquipmentRecord:
        data = normalize_launch_data(launch_data)
        async with self._unit() as uow:
            saved = await uow.items.set_launch_data(user_id, record_id, data)
        if saved is None:
            raise NotFoundError("item not found")
        logger.info("launch_data_saved", user_id=user_id, item_id=record_id, empty=data is None)
        return saved

    async def refresh_trade_in(
        self,
        user_id: str,
        record_id: str,
        estimator: TradeInEstimator,
        *,
        now: datetime | None = None,
    ) -> EquipmentRecord:
        """Ask ``estimator`` for a fresh valuation and store it.

        The three trade-in fields are written together in a single update. If
        the estimate fails nothing is written and the previous values stay.
        """
        record = await self.get(user_id, record_id)
        log = logger.bind(user_id=user_id, item_id=record_id)
        try:
            quote = await estimator.estimate_trade_in(
                record.brand, record.model, record.category, record.set_composition
            )
        except ExtractionError as exc:
            log.warning("trade_in_refresh_failed", error=str(exc))
            raise

        checked_at = now or datetime.now(timezone.utc)
        async with self._unit() as uow:
            saved = await uow.items.set_trade_in(
                user_id, record_id, low=quote.low, high=quote.high, checked_at=checked_at
            )
        if saved is None:
            raise NotFoundError("item not found")
        log.info("trade_in_refreshed", low=quote.low, high=quote.high)
        return saved

    async def delete(self, user_id: str, record_id: str) -> None:
        async with self._unit() as uow:
            deleted = await uow.items.delete(user_id, record_id)
        if not deleted:
            raise NotFoundError("item not found")
        logger.info("equipment_deleted", user_id=user_id, item_id=record_id)

    async def totals(self, user_id: str) -> InventoryTotals:
        records = await self.list(user_id)
        return InventoryTotals(
            bag=compute_derived_totals(records, Location.BAG),
            locker=compute_derived_totals(records, Location.LOCKER),
            overall=compute_derived_totals(records),
        )
