from .common import ErrorResponse, MessageResponse, OkResponse
from .equipment import (
    DeleteArmedResponse,
    EquipmentForm,
    EquipmentItem,
    EquipmentUpdateRequest,
    InventoryTotalsResponse,
    LaunchDataIn,
)
from .suggestion import EquipmentSuggestion, ReceiptSuggestion, ScanResponse, TradeInQuote

__all__ = [
    "DeleteArmedResponse",
    "EquipmentForm",
    "EquipmentItem",
    "EquipmentSuggestion",
    "EquipmentUpdateRequest",
    "ErrorResponse",
    "InventoryTotalsResponse",
    "LaunchDataIn",
    "MessageResponse",
    "OkResponse",
    "ReceiptSuggestion",
    "ScanResponse",
    "TradeInQuote",
]
