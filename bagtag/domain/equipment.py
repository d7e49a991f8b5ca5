"""Equipment record model shared by every layer of the service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Category(str, Enum):
    DRIVER = "Driver"
    FAIRWAY_WOOD = "Fairway Wood"
    HYBRID = "Hybrid"
    IRON = "Iron"
    WEDGE = "Wedge"
    PUTTER = "Putter"
    ACCESSORY = "Accessory"
    OTHER = "Other"


class Location(str, Enum):
    BAG = "Bag"
    LOCKER = "Locker"

    @property
    def title(self) -> str:
        return LOCATION_TITLES[self]

    def toggled(self) -> Location:
        return Location.LOCKER if self is Location.BAG else Location.BAG


LOCATION_TITLES = {
    Location.BAG: "Current Bag",
    Location.LOCKER: "Locker Room (Backup/Retired)",
}

# Canonical club-position order for iron sets.
CLUB_POSITION_ORDER: tuple[str, ...] = (
    "2",
    "3",
    "4",
    "5",
    "6",
    "7",
    "8",
    "9",
    "PW",
    "AW",
    "GW",
    "SW",
    "LW",
)

GOLF_BRANDS: tuple[str, ...] = (
    "Callaway",
    "TaylorMade",
    "Titleist",
    "Ping",
    "Cobra",
    "Cleveland",
    "Mizuno",
    "Wilson",
    "Srixon",
    "Bridgestone",
    "PXG",
    "Tour Edge",
    "Honma",
    "Miura",
    "Adams",
    "Ben Hogan",
    "Acushnet",
    "MacGregor",
    "Tommy Armour",
    "Lynx",
    "Odyssey",
    "Scotty Cameron",
    "Bettinardi",
    "Yes! Golf",
    "Evnroll",
    "SeeMore",
    "L.A.B. Golf",
    "Vokey",
    "Artisan",
    "Fourteen",
)


@dataclass(frozen=True)
class LaunchData:
    """Launch monitor numbers for one club; every field is optional."""

    carry_distance: float | None = None  # yards
    total_distance: float | None = None  # yards
    ball_speed: float | None = None  # mph
    club_speed: float | None = None  # mph
    smash_factor: float | None = None
    spin_rate: float | None = None  # rpm
    launch_angle: float | None = None  # degrees
    notes: str | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in LAUNCH_DATA_FIELDS)


LAUNCH_DATA_FIELDS: tuple[str, ...] = (
    "carry_distance",
    "total_distance",
    "ball_speed",
    "club_speed",
    "smash_factor",
    "spin_rate",
    "launch_angle",
    "notes",
)


@dataclass(frozen=True)
class TradeInEstimate:
    low: float
    high: float
    checked_at: datetime


@dataclass(frozen=True)
class EquipmentRecord:
    """One piece of golf equipment or an accessory.

    ``id`` is ``None`` until the document store has assigned one. ``version``
    increases on each write and backs the optional stale-write check.
    """

    id: str | None
    category: Category
    brand: str
    model: str
    created_at: datetime
    location: Location = Location.BAG
    loft: str | None = None
    set_composition: tuple[str, ...] | None = None
    shaft_make_model: str | None = None
    shaft_stiffness: str | None = None
    photo_url: str | None = None
    receipt_url: str | None = None
    purchase_date: str | None = None
    price: float | None = None
    notes: str | None = None
    launch_data: LaunchData | None = None
    trade_in_low: float | None = None
    trade_in_high: float | None = None
    last_trade_in_checked_at: datetime | None = None
    version: int = field(default=0, compare=False)

    @property
    def is_set(self) -> bool:
        return bool(self.set_composition)

    @property
    def trade_in(self) -> TradeInEstimate | None:
        if (
            self.trade_in_low is None
            or self.trade_in_high is None
            or self.last_trade_in_checked_at is None
        ):
            return None
        return TradeInEstimate(
            low=self.trade_in_low,
            high=self.trade_in_high,
            checked_at=self.last_trade_in_checked_at,
        )
