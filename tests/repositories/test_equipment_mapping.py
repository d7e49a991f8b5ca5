from __future__ import annotations

from datetime import datetime, timezone

import pytest

from bagtag.domain.equipment import Category, EquipmentRecord, LaunchData, Location
from bagtag.models import EquipmentItem
from bagtag.repositories.sqlalchemy.equipment import _write_fields, to_record

pytestmark = pytest.mark.unit

CREATED = datetime(2023, 9, 1, 8, 30, tzinfo=timezone.utc)


def _row(**overrides) -> EquipmentItem:
    data = dict(
        id="abc",
        user_id="u1",
        type="Iron",
        brand="Srixon",
        model="ZX5",
        status="Bag",
        version=3,
        created_at=CREATED,
    )
    data.update(overrides)
    return EquipmentItem(**data)


def test_missing_optional_columns_read_as_absent():
    record = to_record(_row(loft="", set_composition=[], notes=None, launch_data=None))

    assert record.category is Category.IRON
    assert record.location is Location.BAG
    assert record.loft is None
    assert record.set_composition is None
    assert record.launch_data is None
    assert record.trade_in is None
    assert record.version == 3


def test_legacy_and_unknown_values_are_tolerated():
    record = to_record(
        _row(type="Rangefinder", status="Locker Room", created_at=datetime(2023, 9, 1))
    )

    assert record.category is Category.OTHER
    assert record.location is Location.LOCKER
    assert record.created_at.tzinfo is not None


def test_partial_trade_in_columns_are_dropped():
    record = to_record(_row(trade_in_low=10.0, trade_in_high=None, last_trade_in_check=CREATED))

    assert record.trade_in_low is None
    assert record.last_trade_in_checked_at is None


def test_launch_data_json_is_read_field_by_field():
    record = to_record(_row(launch_data={"carry_distance": 180, "junk": 1}))

    assert record.launch_data == LaunchData(carry_distance=180)


def test_fields_round_trip_through_a_row():
    record = EquipmentRecord(
        id="abc",
        category=Category.IRON,
        brand="Srixon",
        model="ZX5",
        created_at=CREATED,
        location=Location.LOCKER,
        set_composition=("5", "6", "PW"),
        shaft_stiffness="Stiff",
        price=899.0,
        launch_data=LaunchData(carry_distance=165.0, notes="7i"),
        trade_in_low=300.0,
        trade_in_high=420.0,
        last_trade_in_checked_at=CREATED,
    )
    row = _row()

    _write_fields(row, record)

    assert row.type == "Iron"
    assert row.status == "Locker"
    assert row.set_composition == ["5", "6", "PW"]
    assert row.launch_data == {"carry_distance": 165.0, "notes": "7i"}
    assert to_record(row) == record
