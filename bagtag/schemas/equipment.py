# bagtag/schemas/equipment.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from bagtag.domain.equipment import Category, LaunchData, Location

__all__ = [
    "LaunchDataIn",
    "EquipmentForm",
    "EquipmentUpdateRequest",
    "EquipmentItem",
    "SetLabelOut",
    "TotalsOut",
    "InventoryTotalsResponse",
    "DeleteArmedResponse",
]


class LaunchDataIn(BaseModel):
    carry_distance: float | None = Field(default=None, description="Carry distance (yards)")
    total_distance: float | None = Field(default=None, description="Total distance (yards)")
    ball_speed: float | None = Field(default=None, description="Ball speed (mph)")
    club_speed: float | None = Field(default=None, description="Club speed (mph)")
    smash_factor: float | None = None
    spin_rate: float | None = Field(default=None, description="Spin rate (rpm)")
    launch_angle: float | None = Field(default=None, description="Launch angle (degrees)")
    notes: str | None = None

    def to_domain(self) -> LaunchData:
        return LaunchData(**self.model_dump())

    @classmethod
    def from_domain(cls, data: LaunchData | None) -> LaunchDataIn | None:
        if data is None:
            return None
        return cls(**{name: getattr(data, name) for name in cls.model_fields})


class EquipmentForm(BaseModel):
    """Raw add/edit form input.

    Every optional field may arrive as an empty string; the normalizer decides
    what survives. ``price`` keeps the raw text the user typed.
    """

    category: Category = Field(default=Category.DRIVER, description="Equipment category")
    location: Location = Field(default=Location.BAG, description="Bag or Locker")
    brand: str = ""
    model: str = ""
    loft: str | None = ""
    is_set: bool = Field(default=False, description="Iron record is a multi-piece set")
    set_composition: list[str] = Field(default_factory=list, description="Selected positions")
    shaft_make_model: str | None = ""
    shaft_stiffness: str | None = ""
    photo_url: str | None = None
    receipt_url: str | None = None
    purchase_date: str | None = ""
    price: str | float | None = ""
    notes: str | None = ""
    launch_data: LaunchDataIn | None = None
    trade_in_low: float | None = None
    trade_in_high: float | None = None
    last_trade_in_checked_at: datetime | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "category": "Iron",
                "location": "Bag",
                "brand": "Ping",
                "model": "G400",
                "is_set": True,
                "set_composition": ["PW", "5", "7", "6", "4", "8", "9"],
                "shaft_make_model": "AWT 2.0",
                "shaft_stiffness": "Regular",
                "price": "399.00",
                "purchase_date": "2019-03-20",
            }
        }
    )


class EquipmentUpdateRequest(EquipmentForm):
    expected_version: int | None = Field(
        default=None, description="Reject the write if the stored version differs"
    )


class SetLabelOut(BaseModel):
    text: str
    count: int


class EquipmentItem(BaseModel):
    id: str
    category: Category
    brand: str
    model: str
    location: Location
    loft: str | None = None
    set_composition: list[str] | None = None
    set_label: SetLabelOut | None = None
    shaft_make_model: str | None = None
    shaft_stiffness: str | None = None
    photo_url: str | None = None
    receipt_url: str | None = None
    purchase_date: str | None = None
    purchase_date_display: str = "—"
    price: float | None = None
    notes: str | None = None
    launch_data: LaunchDataIn | None = None
    trade_in_low: float | None = None
    trade_in_high: float | None = None
    last_trade_in_checked_at: str | None = None
    created_at: str
    version: int


class TotalsOut(BaseModel):
    item_count: int
    total_value: float


class InventoryTotalsResponse(BaseModel):
    bag: TotalsOut
    locker: TotalsOut
    overall: TotalsOut


class DeleteArmedResponse(BaseModel):
    state: str = "armed"
    expires_in: float
