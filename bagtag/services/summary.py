"""Read-time derived values: counts, totals and display labels."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from bagtag.domain.equipment import EquipmentRecord, Location
from bagtag.services.normalizer import sort_set_composition

PLACEHOLDER = "—"


@dataclass(frozen=True)
class DerivedTotals:
    item_count: int
    total_value: float


@dataclass(frozen=True)
class SetLabel:
    text: str
    count: int


def item_count(record: EquipmentRecord) -> int:
    # A 7-piece iron set counts as 7 clubs.
    return max(1, len(record.set_composition or ()))


def compute_derived_totals(
    records: Iterable[EquipmentRecord], location: Location | None = None
) -> DerivedTotals:
    """Sum club count and value over ``records`` at ``location`` (all when None).

    Recomputed from scratch on every call.
    """
    count = 0
    value = 0.0
    for record in records:
        if location is not None and record.location is not location:
            continue
        count += item_count(record)
        value += record.price or 0.0
    return DerivedTotals(item_count=count, total_value=round(value, 2))


def format_set_label(set_composition: Sequence[str] | None) -> SetLabel | None:
    if not set_composition:
        return None
    ordered = sort_set_composition(set_composition)
    if not ordered:
        return None
    if len(ordered) <= 2:
        text = ", ".join(ordered)
    else:
        text = f"{ordered[0]}-{ordered[-1]}"
    return SetLabel(text=text, count=len(ordered))


def _parse_date(value: str) -> date | None:
    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in ("%m/%d/%Y", "%Y/%m/%d", "%B %d, %Y", "%b %d, %Y", "%B %Y", "%b %Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def format_display_date(value: str | None) -> str:
    """Render a stored purchase date as ``"Jun 2018"``.

    Absent input gives the placeholder; text that does not parse as a date is
    returned unchanged.
    """
    if not value:
        return PLACEHOLDER
    parsed = _parse_date(value)
    if parsed is None:
        return value
    return parsed.strftime("%b %Y")


def format_price(price: float | None) -> str:
    if not price:
        return PLACEHOLDER
    return f"${price:.2f}"


def matches_search(record: EquipmentRecord, term: str | None) -> bool:
    if not term or not term.strip():
        return True
    needle = term.strip().lower()
    return (
        needle in record.brand.lower()
        or needle in record.model.lower()
        or needle in record.category.value.lower()
    )
