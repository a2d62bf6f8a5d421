from __future__ import annotations

import re
from collections.abc import Iterable
from io import BytesIO
from zipfile import ZIP_DEFLATED, ZipFile
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.services.beer_records import Beer, HopIngredient, MaltIngredient, YeastIngredient

_DATE_FORMAT = "%d.%m.%Y"
_DEGREES_C = " \N{DEGREE SIGN}C"
_FRAME_WIDTH = A4[0] - 30 * mm

_styles = getSampleStyleSheet()
_TITLE = ParagraphStyle("ReportTitle", parent=_styles["Title"], textColor=colors.HexColor("#1a365d"))
_SUBTITLE = ParagraphStyle(
    "ReportSubtitle",
    parent=_styles["Normal"],
    fontSize=14,
    leading=18,
    alignment=1,
    textColor=colors.HexColor("#4a5568"),
    spaceAfter=8 * mm,
)
_SECTION = ParagraphStyle("ReportSection", parent=_styles["Heading2"], textColor=colors.HexColor("#1e40af"))
_LABEL = ParagraphStyle("ReportLabel", parent=_styles["Normal"], fontSize=10, textColor=colors.HexColor("#64748b"))
_VALUE = ParagraphStyle("ReportValue", parent=_styles["Normal"], fontSize=12, textColor=colors.HexColor("#1e293b"))
_ITEM = ParagraphStyle("ReportItem", parent=_styles["Normal"], fontSize=11, leftIndent=6 * mm)
_NOTE = ParagraphStyle("ReportNote", parent=_ITEM, fontName="Helvetica-Oblique")


def report_filename(beer: Beer) -> str:
    return re.sub(r"\s+", "-", beer.name) + "-rapport.pdf"


def _text(value: object) -> str:
    return escape(str(value))


def _suffix(batch_number: str | None, supplier: str | None) -> str:
    parts = ""
    if batch_number:
        parts += f" (Batch: {batch_number})"
    if supplier:
        parts += f" - {supplier}"
    return parts


def _optional(value: object, unit: str = "") -> str:
    return "-" if value is None else f"{value}{unit}"


def _malt_line(malt: MaltIngredient) -> str:
    return f"{malt.name or 'Ukjent malt'}: {malt.amount} kg{_suffix(malt.batch_number, malt.supplier)}"


def _hop_line(hop: HopIngredient) -> str:
    timing = "dry hop" if hop.timing == 0 else _optional(hop.timing, " min")
    return (
        f"{hop.name or 'Ukjent humle'}: {hop.amount} g, {_optional(hop.alpha_acid, '%')} alfa, {timing}"
        f"{_suffix(hop.batch_number, hop.supplier)}"
    )


def _yeast_line(yeast: YeastIngredient) -> str:
    label = ", ".join(part for part in (yeast.name, yeast.type) if part) or "Ukjent gjær"
    return (
        f"{label}: {yeast.amount}, {_optional(yeast.temperature, _DEGREES_C)}"
        f"{_suffix(yeast.batch_number, yeast.supplier)}"
    )


def _summary_grid(beer: Beer) -> Table:
    cells = [
        ("Status", beer.status.value),
        ("Batch størrelse", f"{beer.batch_size} liter"),
        ("ABV", f"{beer.abv:.2f}%"),
        ("Original Gravity (OG)", beer.original_gravity),
        ("Final Gravity (FG)", beer.final_gravity),
        ("Bryggedato", beer.brew_date.strftime(_DATE_FORMAT)),
    ]
    if beer.completion_date is not None:
        cells.append(("Ferdigstillelsesdato", beer.completion_date.strftime(_DATE_FORMAT)))
    if beer.best_before_date is not None:
        cells.append(("Best før", beer.best_before_date.strftime(_DATE_FORMAT)))

    blocks = [[Paragraph(_text(label), _LABEL), Paragraph(_text(value), _VALUE)] for label, value in cells]
    rows = [blocks[index:index + 2] for index in range(0, len(blocks), 2)]
    if len(rows[-1]) == 1:
        rows[-1].append("")

    table = Table(rows, colWidths=[_FRAME_WIDTH / 2, _FRAME_WIDTH / 2])
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#f8fafc")),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    return table


def render_beer_report(beer: Beer) -> bytes:
    """Render a single-batch A4 report and return the PDF bytes."""
    buffer = BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=f"{beer.name} rapport",
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
    )

    story = [
        Paragraph(_text(beer.name), _TITLE),
        Paragraph(_text(f"{beer.style} - {beer.division.value}"), _SUBTITLE),
        Paragraph("Grunnleggende Informasjon", _SECTION),
        _summary_grid(beer),
    ]
    if beer.description:
        story += [Spacer(1, 3 * mm), Paragraph("Beskrivelse", _LABEL), Paragraph(_text(beer.description), _VALUE)]
    if beer.allergens:
        story += [Spacer(1, 3 * mm), Paragraph("Allergener", _LABEL), Paragraph(_text(beer.allergens), _VALUE)]

    story.append(Paragraph("Ingredienser", _SECTION))
    groups = (
        ("Malt", [_malt_line(malt) for malt in beer.ingredients.malts]),
        ("Humle", [_hop_line(hop) for hop in beer.ingredients.hops]),
        ("Gjær", [_yeast_line(yeast) for yeast in beer.ingredients.yeast]),
    )
    for label, lines in groups:
        story.append(Paragraph(label, _LABEL))
        story += [Paragraph(_text(f"\N{BULLET} {line}"), _ITEM) for line in lines]
        story.append(Spacer(1, 3 * mm))

    if beer.notes:
        story.append(Paragraph("Bryggnotater", _SECTION))
        for note in sorted(beer.notes, key=lambda item: item.date):
            line = f"{note.date.strftime(_DATE_FORMAT)}: {note.text}"
            story.append(Paragraph(_text(f"\N{BULLET} {line}"), _NOTE))

    document.build(story)
    return buffer.getvalue()


def render_report_archive(beers: Iterable[Beer]) -> bytes:
    """Zip archive holding one PDF report per batch, in the given order.

    Batches that share a name get a numbered file name so no entry is
    overwritten.
    """
    buffer = BytesIO()
    seen: dict[str, int] = {}
    with ZipFile(buffer, "w", compression=ZIP_DEFLATED) as archive:
        for beer in beers:
            filename = report_filename(beer)
            count = seen.get(filename, 0) + 1
            seen[filename] = count
            if count > 1:
                filename = f"{filename.removesuffix('.pdf')}-{count}.pdf"
            archive.writestr(filename, render_beer_report(beer))
    return buffer.getvalue()
