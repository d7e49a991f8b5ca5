from __future__ import annotations

import pytest
from pydantic import ValidationError

from bagtag.domain.equipment import Category
from bagtag.schemas.suggestion import (
    EquipmentSuggestion,
    IdentifiedEquipment,
    ModelList,
    ReceiptSuggestion,
    TradeInQuote,
)

pytestmark = pytest.mark.unit


def test_suggestion_reads_camel_case_keys():
    suggestion = EquipmentSuggestion.model_validate(
        {
            "brand": "Titleist",
            "model": "T200",
            "type": "Iron",
            "loft": 30,
            "setComposition": ["5", "6"],
            "shaftMakeModel": "",
            "shaftStiffness": "Stiff",
        }
    )

    assert suggestion.category is Category.IRON
    assert suggestion.loft == "30"
    assert suggestion.set_composition == ["5", "6"]
    assert suggestion.shaft_make_model is None
    assert suggestion.shaft_stiffness == "Stiff"


def test_unknown_category_is_dropped():
    suggestion = EquipmentSuggestion.model_validate({"brand": "X", "type": "Golf Cart"})

    assert suggestion.category is None


def test_identified_equipment_requires_identity():
    with pytest.raises(ValidationError):
        IdentifiedEquipment.model_validate({"brand": "Ping", "type": "Driver"})


def test_receipt_reads_purchase_date_alias():
    receipt = ReceiptSuggestion.model_validate({"price": 59.5, "purchaseDate": "2022-07-04"})

    assert receipt.price == 59.5
    assert receipt.purchase_date == "2022-07-04"


@pytest.mark.parametrize(
    "payload",
    [
        {"low": -1, "high": 10},
        {"low": 30, "high": 10},
        {"low": 0, "high": 0},
        {"low": "a lot", "high": 10},
        {"high": 10},
    ],
)
def test_invalid_trade_in_quotes(payload):
    with pytest.raises(ValidationError):
        TradeInQuote.model_validate(payload)


def test_valid_trade_in_quote():
    quote = TradeInQuote.model_validate({"low": 0, "high": 45.5})

    assert (quote.low, quote.high) == (0.0, 45.5)


def test_model_list_is_cleaned():
    models = ModelList.model_validate({"models": [" G425 ", "G425", "", 7, "G430"]})

    assert models.models == ["G425", "G430"]
