from __future__ import annotations

from datetime import datetime, timezone

import pytest

from bagtag.core.exceptions import ValidationError
from bagtag.domain.equipment import Category, EquipmentRecord, LaunchData, Location
from bagtag.schemas.equipment import EquipmentForm, LaunchDataIn
from bagtag.schemas.suggestion import EquipmentSuggestion
from bagtag.services.normalizer import (
    apply_suggestion,
    form_from_record,
    normalize_for_save,
    sort_set_composition,
)

pytestmark = pytest.mark.unit

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _form(**overrides) -> EquipmentForm:
    data = {"category": Category.DRIVER, "brand": "TaylorMade", "model": "Stealth 2"}
    data.update(overrides)
    return EquipmentForm(**data)


@pytest.mark.parametrize("category", list(Category))
def test_accessory_never_keeps_loft_or_shaft(category):
    form = _form(
        category=category,
        loft="10.5",
        shaft_make_model="Fujikura Ventus",
        shaft_stiffness="Stiff",
    )

    record = normalize_for_save(form, now=NOW)

    if category is Category.ACCESSORY:
        assert record.loft is None
        assert record.shaft_make_model is None
        assert record.shaft_stiffness is None
    else:
        assert record.loft == "10.5"
        assert record.shaft_stiffness == "Stiff"


def test_iron_set_is_sorted_and_drops_loft():
    form = _form(category=Category.IRON, is_set=True, set_composition=["PW", "5", "7"], loft="27")

    record = normalize_for_save(form, now=NOW)

    assert record.set_composition == ("5", "7", "PW")
    assert record.loft is None


def test_iron_without_set_flag_keeps_loft_and_drops_composition():
    form = _form(category=Category.IRON, is_set=False, set_composition=["5", "6"], loft="27")

    record = normalize_for_save(form, now=NOW)

    assert record.set_composition is None
    assert record.loft == "27"


def test_set_flag_with_empty_selection_keeps_loft():
    form = _form(category=Category.IRON, is_set=True, set_composition=[], loft="30")

    record = normalize_for_save(form, now=NOW)

    assert record.set_composition is None
    assert record.loft == "30"


def test_composition_ignored_for_non_iron():
    form = _form(category=Category.WEDGE, is_set=True, set_composition=["SW", "LW"], loft="56")

    record = normalize_for_save(form, now=NOW)

    assert record.set_composition is None
    assert record.loft == "56"


def test_sort_set_composition_puts_unknown_labels_last_in_input_order():
    assert sort_set_composition(["XW", "9", "Chipper", "4", "9", " PW "]) == [
        "4",
        "9",
        "PW",
        "XW",
        "Chipper",
    ]


def test_empty_strings_become_absent():
    form = _form(loft="", shaft_make_model="  ", purchase_date="", notes="", price="")

    record = normalize_for_save(form, now=NOW)

    assert record.loft is None
    assert record.shaft_make_model is None
    assert record.purchase_date is None
    assert record.notes is None
    assert record.price is None


@pytest.mark.parametrize("field", ["brand", "model"])
def test_brand_and_model_are_required(field):
    with pytest.raises(ValidationError):
        normalize_for_save(_form(**{field: "   "}), now=NOW)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("149.99", 149.99), (" 20 ", 20.0), ("abc", None), (0, 0.0), (75.5, 75.5)],
)
def test_price_parsing(raw, expected):
    assert normalize_for_save(_form(price=raw), now=NOW).price == expected


def test_negative_price_is_rejected():
    with pytest.raises(ValidationError):
        normalize_for_save(_form(price="-5"), now=NOW)


def test_create_leaves_id_for_store_and_stamps_created_at():
    record = normalize_for_save(_form(), now=NOW)

    assert record.id is None
    assert record.created_at == NOW


def test_update_preserves_id_and_created_at():
    created = datetime(2020, 1, 1, tzinfo=timezone.utc)
    existing = EquipmentRecord(
        id="abc", category=Category.DRIVER, brand="Old", model="Old", created_at=created, version=4
    )

    record = normalize_for_save(_form(brand="New"), existing, now=NOW)

    assert record.id == "abc"
    assert record.created_at == created
    assert record.version == 4
    assert record.brand == "New"


def test_update_carries_existing_trade_in():
    checked = datetime(2024, 1, 1, tzinfo=timezone.utc)
    existing = EquipmentRecord(
        id="abc",
        category=Category.DRIVER,
        brand="Ping",
        model="G425",
        created_at=NOW,
        trade_in_low=100.0,
        trade_in_high=150.0,
        last_trade_in_checked_at=checked,
    )

    record = normalize_for_save(_form(), existing)

    assert (record.trade_in_low, record.trade_in_high) == (100.0, 150.0)
    assert record.last_trade_in_checked_at == checked


def test_incomplete_trade_in_triple_is_dropped():
    record = normalize_for_save(_form(trade_in_low=10.0, trade_in_high=20.0), now=NOW)

    assert record.trade_in is None
    assert record.trade_in_low is None


def test_inverted_trade_in_bounds_are_rejected():
    form = _form(trade_in_low=50.0, trade_in_high=20.0, last_trade_in_checked_at=NOW)
    with pytest.raises(ValidationError):
        normalize_for_save(form, now=NOW)


def test_empty_launch_data_becomes_absent():
    record = normalize_for_save(_form(launch_data=LaunchDataIn(notes="  ")), now=NOW)

    assert record.launch_data is None


def test_launch_data_is_kept():
    record = normalize_for_save(
        _form(launch_data=LaunchDataIn(carry_distance=245, spin_rate=2600)), now=NOW
    )

    assert record.launch_data == LaunchData(carry_distance=245, spin_rate=2600)


@pytest.mark.parametrize(
    "form",
    [
        _form(loft="", price="399"),
        _form(category=Category.IRON, is_set=True, set_composition=["PW", "4", "9", "GW"]),
        _form(category=Category.ACCESSORY, loft="9", shaft_stiffness="X", notes=" towel "),
        _form(
            category=Category.PUTTER,
            location=Location.LOCKER,
            purchase_date="2018-06-01",
            launch_data=LaunchDataIn(notes="rolls true"),
            trade_in_low=40.0,
            trade_in_high=60.0,
            last_trade_in_checked_at=NOW,
        ),
    ],
)
def test_normalize_is_idempotent(form):
    first = normalize_for_save(form, now=NOW)
    second = normalize_for_save(form_from_record(first), first)

    assert second == first


def test_apply_suggestion_only_overlays_present_fields():
    form = _form(brand="Callaway", model="", shaft_stiffness="Regular")
    suggestion = EquipmentSuggestion.model_validate(
        {"brand": "Ping", "model": "i230", "type": "Iron", "setComposition": ["4", "PW"]}
    )

    merged = apply_suggestion(form, suggestion)

    assert merged.brand == "Ping"
    assert merged.model == "i230"
    assert merged.category is Category.IRON
    assert merged.is_set is True
    assert merged.set_composition == ["4", "PW"]
    assert merged.shaft_stiffness == "Regular"
    assert form.brand == "Callaway"
