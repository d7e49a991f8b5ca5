"""Inventory report: table rows grouped by location, rendered as PDF."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from bagtag.domain.equipment import EquipmentRecord, Location
from bagtag.services.summary import PLACEHOLDER, format_price

REPORT_TITLE = "BagTag Inventory Report"
COLUMNS = ("Type", "Brand", "Model", "Specs", "Purchase Date", "Price")

_HEADER_GREEN = colors.Color(22 / 255, 101 / 255, 52 / 255)


@dataclass(frozen=True)
class ReportSection:
    title: str
    rows: list[tuple[str, ...]]


def format_specs(record: EquipmentRecord) -> str:
    loft = f"{record.loft}° " if record.loft else ""
    return f"{loft}{record.shaft_stiffness or ''}".strip()


def report_row(record: EquipmentRecord) -> tuple[str, ...]:
    return (
        record.category.value,
        record.brand,
        record.model,
        format_specs(record),
        record.purchase_date or PLACEHOLDER,
        format_price(record.price),
    )


def build_report_sections(records: Iterable[EquipmentRecord]) -> list[ReportSection]:
    """Group records into Bag then Locker sections, skipping empty ones.

    Records keep the order they were given in.
    """
    items = list(records)
    sections = []
    for location in (Location.BAG, Location.LOCKER):
        rows = [report_row(r) for r in items if r.location is location]
        if rows:
            sections.append(ReportSection(title=location.title, rows=rows))
    return sections


def report_filename(today: date | None = None) -> str:
    day = today or date.today()
    return f"BagTag_Inventory_{day.isoformat()}.pdf"


def render_pdf(records: Iterable[EquipmentRecord], *, today: date | None = None) -> bytes:
    day = today or date.today()
    styles = getSampleStyleSheet()
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        title=REPORT_TITLE,
    )

    story = [
        Paragraph(REPORT_TITLE, styles["Title"]),
        Paragraph(f"Generated on {day.strftime('%m/%d/%Y')}", styles["Normal"]),
        Spacer(1, 8 * mm),
    ]
    for section in build_report_sections(records):
        story.append(Paragraph(section.title, styles["Heading2"]))
        table = Table([list(COLUMNS), *[list(row) for row in section.rows]], repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), _HEADER_GREEN),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
                    ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ]
            )
        )
        story.append(table)
        story.append(Spacer(1, 6 * mm))

    doc.build(story)
    return buffer.getvalue()
