from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from bagtag.core.exceptions import ExtractionError
from bagtag.domain.equipment import Category
from bagtag.services.extraction import AIExtractionService
from bagtag.utils.openai_client import OpenAIClientWrapper


class FakeCompletions:
    def __init__(self, replies):
        self._replies = list(replies)
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        content = reply if isinstance(reply, str) or reply is None else json.dumps(reply)
        return SimpleNamespace(
            model=kwargs["model"],
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )


def _service(*replies):
    completions = FakeCompletions(replies)
    client = OpenAIClientWrapper(client=SimpleNamespace(chat=SimpleNamespace(completions=completions)))
    return AIExtractionService(client, model="test-model"), completions


@pytest.mark.asyncio
async def test_identify_equipment_sends_image_and_parses_reply():
    service, completions = _service(
        {"brand": "Callaway", "model": "Paradym", "type": "Driver", "loft": 9}
    )

    suggestion = await service.identify_equipment(b"img", "image/jpeg")

    assert suggestion.brand == "Callaway"
    assert suggestion.category is Category.DRIVER
    assert suggestion.loft == "9"
    request = completions.requests[0]
    assert request["model"] == "test-model"
    assert request["response_format"] == {"type": "json_object"}
    parts = request["messages"][0]["content"]
    assert parts[1]["image_url"]["url"].startswith("data:image/jpeg;base64,")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply",
    [
        "not json",
        None,
        {"brand": "Callaway", "type": "Driver"},
        RuntimeError("boom"),
    ],
)
async def test_identify_equipment_failures_raise_extraction_error(reply):
    service, _ = _service(reply)

    with pytest.raises(ExtractionError):
        await service.identify_equipment(b"img", "image/png")


@pytest.mark.asyncio
async def test_extract_receipt():
    service, _ = _service({"price": 89.99, "purchaseDate": "2023-02-14"})

    receipt = await service.extract_receipt(b"img", "image/png")

    assert receipt.price == 89.99
    assert receipt.purchase_date == "2023-02-14"


@pytest.mark.asyncio
async def test_extract_receipt_without_price_fails():
    service, _ = _service({"purchaseDate": "2023-02-14"})

    with pytest.raises(ExtractionError):
        await service.extract_receipt(b"img", "image/png")


@pytest.mark.asyncio
async def test_search_catalog_puts_query_in_prompt():
    service, completions = _service({"brand": "Ping", "model": "Anser", "type": "Putter"})

    suggestion = await service.search_catalog("ping anser 2")

    assert suggestion.model == "Anser"
    assert 'Find item: "ping anser 2"' in completions.requests[0]["messages"][0]["content"]


@pytest.mark.asyncio
async def test_estimate_trade_in_mentions_set():
    service, completions = _service({"low": 200, "high": 260})

    quote = await service.estimate_trade_in("Mizuno", "JPX 923", Category.IRON, ("5", "PW"))

    assert (quote.low, quote.high) == (200.0, 260.0)
    assert "Mizuno JPX 923 Iron set (5, PW)" in completions.requests[0]["messages"][0]["content"]


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [{"low": 300, "high": 100}, {"low": -5, "high": 10}, {"low": 0}])
async def test_estimate_trade_in_rejects_bad_valuations(reply):
    service, _ = _service(reply)

    with pytest.raises(ExtractionError):
        await service.estimate_trade_in("Ping", "G425", Category.DRIVER)


@pytest.mark.asyncio
async def test_list_models():
    service, _ = _service({"models": ["Stealth", "Stealth", "Qi10"]})

    assert await service.list_models("TaylorMade", Category.DRIVER) == ["Stealth", "Qi10"]


@pytest.mark.asyncio
async def test_missing_api_key_is_an_extraction_error(monkeypatch):
    from bagtag.core.config import settings

    monkeypatch.setattr(settings, "openai_api_key", None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ExtractionError):
        await AIExtractionService().list_models("Ping", Category.PUTTER)
