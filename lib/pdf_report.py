# =============================================================================
# lib/pdf_report.py - PDF Report Renderer
# =============================================================================
# Renders a core.models.report.Report into PDF bytes with reportlab.
# The renderer only sees plain report data; it never talks to storage.
#
# Layout:
# - portrait letter pages for narrow tables
# - landscape letter pages when any section has more than four columns
# - one titled table per section, header row in the brand colour
#
# Usage:
#   pdf_bytes = render_report_pdf(report)
# =============================================================================

from __future__ import annotations

import io
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.models.report import Report, ReportSection

BRAND = colors.HexColor("#004d40")
STRIPE = colors.HexColor("#f2f2f2")


def _styles() -> dict[str, ParagraphStyle]:
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle",
            parent=styles["Heading1"],
            textColor=BRAND,
            spaceAfter=6,
        ),
        "meta": ParagraphStyle(
            "ReportMeta",
            parent=styles["Normal"],
            textColor=colors.grey,
            fontSize=9,
            spaceAfter=12,
        ),
        "section": styles["Heading2"],
        "cell": ParagraphStyle("Cell", parent=styles["BodyText"], fontSize=9, leading=11),
        "header": ParagraphStyle(
            "HeaderCell",
            parent=styles["BodyText"],
            fontName="Helvetica-Bold",
            fontSize=9,
            leading=11,
            textColor=colors.white,
        ),
        "empty": styles["Italic"],
    }


def _section_table(section: ReportSection, width: float, styles: dict[str, ParagraphStyle]) -> Table:
    header = [Paragraph(escape(column), styles["header"]) for column in section.columns]
    body = [
        [Paragraph(escape(str(value)), styles["cell"]) for value in row]
        for row in section.rows
    ]

    col_width = width / max(len(section.columns), 1)
    table = Table([header] + body, colWidths=[col_width] * len(section.columns), repeatRows=1)

    style = [
        ("BACKGROUND", (0, 0), (-1, 0), BRAND),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#dddddd")),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
    ]
    for index in range(2, len(body) + 1, 2):
        style.append(("BACKGROUND", (0, index), (-1, index), STRIPE))
    table.setStyle(TableStyle(style))
    return table


def render_report_pdf(report: Report) -> bytes:
    """
    Render a report to PDF.

    Args:
        report: Title, generation time and tabular sections

    Returns:
        The PDF document as bytes
    """
    pagesize = landscape(letter) if report.is_wide else letter
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        title=report.title,
        leftMargin=0.6 * inch,
        rightMargin=0.6 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
    )
    styles = _styles()

    story = [
        Paragraph(escape(report.title), styles["title"]),
        Paragraph(f"Generated {escape(report.generated_at)}", styles["meta"]),
    ]

    for section in report.sections:
        story.append(Paragraph(escape(section.title), styles["section"]))
        if section.rows:
            story.append(_section_table(section, doc.width, styles))
        else:
            story.append(Paragraph("No records found.", styles["empty"]))
        story.append(Spacer(1, 0.25 * inch))

    doc.build(story)
    return buffer.getvalue()
