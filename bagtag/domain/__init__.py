"""Domain types for equipment records."""

from .equipment import (
    CLUB_POSITION_ORDER,
    GOLF_BRANDS,
    Category,
    EquipmentRecord,
    LaunchData,
    Location,
    TradeInEstimate,
)

__all__ = [
    "CLUB_POSITION_ORDER",
    "GOLF_BRANDS",
    "Category",
    "EquipmentRecord",
    "LaunchData",
    "Location",
    "TradeInEstimate",
]
