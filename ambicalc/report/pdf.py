"""PDF export of calculator results with ReportLab (landscape US Letter)."""
import io
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from ambicalc.models import CalculatorConfig, Results
from ambicalc.report.constants import (
    BRAND_DARK,
    BRAND_GRID,
    BRAND_LOSS,
    BRAND_MUTED,
    BRAND_PURPLE,
    BRAND_SAVINGS,
    MARGIN,
    SECTION_SPACER,
)
from ambicalc.report.templates import (
    NO_VALUE,
    assumptions_section,
    cost_comparison_rows,
    reduction_highlight,
    report_metadata,
    roi_section,
    summary_stats,
)

PAGE_SIZE = landscape(letter)


def _styles():
    """Plain dict of paragraph styles (avoids ReportLab stylesheet name clashes)."""
    return {
        "Title": ParagraphStyle(
            name="ARC_Title", fontName="Helvetica-Bold", fontSize=18, textColor=colors.HexColor(BRAND_DARK), spaceAfter=6,
        ),
        "Subtitle": ParagraphStyle(
            name="ARC_Subtitle", fontName="Helvetica", fontSize=11, textColor=colors.HexColor(BRAND_MUTED), spaceAfter=14,
        ),
        "H2": ParagraphStyle(
            name="ARC_H2", fontName="Helvetica-Bold", fontSize=12, textColor=colors.HexColor(BRAND_DARK), spaceBefore=10, spaceAfter=6,
        ),
        "Body": ParagraphStyle(
            name="ARC_Body", fontName="Helvetica", fontSize=9, textColor=colors.HexColor(BRAND_DARK), spaceAfter=3, leftIndent=8,
        ),
        "Small": ParagraphStyle(
            name="ARC_Small", fontName="Helvetica", fontSize=8, textColor=colors.HexColor(BRAND_MUTED), spaceAfter=6,
        ),
        "Highlight": ParagraphStyle(
            name="ARC_Highlight", fontName="Helvetica-Bold", fontSize=13, textColor=colors.HexColor(BRAND_SAVINGS),
            alignment=TA_CENTER, spaceBefore=6, spaceAfter=10,
        ),
    }


def _base_table_style(header_rows: int = 1) -> list:
    last_header = header_rows - 1
    return [
        ("BACKGROUND", (0, 0), (-1, last_header), colors.HexColor(BRAND_PURPLE)),
        ("TEXTCOLOR", (0, 0), (-1, last_header), colors.white),
        ("FONTNAME", (0, 0), (-1, last_header), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, last_header), 8),
        ("ALIGN", (0, 0), (-1, last_header), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TEXTCOLOR", (0, header_rows), (-1, -1), colors.HexColor(BRAND_DARK)),
        ("FONTNAME", (0, header_rows), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, header_rows), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor(BRAND_GRID)),
        ("LEFTPADDING", (0, 0), (-1, -1), 6),
        ("RIGHTPADDING", (0, 0), (-1, -1), 6),
        ("TOPPADDING", (0, 0), (-1, -1), 5),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
    ]


def _summary_table(results: Results) -> Table:
    t = Table(summary_stats(results))
    t.setStyle(TableStyle(_base_table_style() + [("ALIGN", (0, 1), (-1, -1), "CENTER")]))
    return t


def _comparison_table(results: Results) -> Table:
    """Two header rows: model | reserved (3 cols) | limit (3 cols). Savings cells in green."""
    body = cost_comparison_rows(results)
    data = [
        ["Model", "Reserved (Requests)", "", "", "Limit", "", ""],
        ["", "CPU Cores", "Annual Cost", "Savings", "CPU Cores", "Annual Cost", "Savings"],
    ] + body
    style = _base_table_style(header_rows=2) + [
        ("SPAN", (0, 0), (0, 1)),
        ("SPAN", (1, 0), (3, 0)),
        ("SPAN", (4, 0), (6, 0)),
        ("ALIGN", (1, 2), (-1, -1), "RIGHT"),
    ]
    for i, row in enumerate(body, start=2):
        for col in (3, 6):
            if row[col] != NO_VALUE:
                style.append(("TEXTCOLOR", (col, i), (col, i), colors.HexColor(BRAND_SAVINGS)))
                style.append(("FONTNAME", (col, i), (col, i), "Helvetica-Bold"))
    t = Table(data)
    t.setStyle(TableStyle(style))
    return t


def _roi_table(section: dict) -> Table:
    style = _base_table_style() + [("ALIGN", (1, 1), (-1, -1), "RIGHT")]
    for i, positive in enumerate(section["positive"], start=1):
        style.append(("TEXTCOLOR", (3, i), (3, i), colors.HexColor(BRAND_SAVINGS if positive else BRAND_LOSS)))
        style.append(("FONTNAME", (3, i), (3, i), "Helvetica-Bold"))
    t = Table(section["rows"], colWidths=[90, 150, 150, 90])
    t.setStyle(TableStyle(style))
    return t


def _make_footer(meta: dict):
    def _add_footer(canvas, doc):
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.HexColor(BRAND_MUTED))
        canvas.drawString(MARGIN, MARGIN / 2, f"{meta['title']} report v{meta['report_version']} — {meta['date']}")
        canvas.drawRightString(PAGE_SIZE[0] - MARGIN, MARGIN / 2, f"Page {doc.page}")
        canvas.restoreState()
    return _add_footer


def generate_report_pdf(config: CalculatorConfig, results: Results) -> bytes:
    """Render the cost comparison, assumptions and ROI schedule; returns PDF bytes."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=PAGE_SIZE,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
    )
    styles = _styles()
    meta = report_metadata(config)
    story = [
        Paragraph(meta["title"], styles["Title"]),
        Paragraph(escape(meta["subtitle"]), styles["Subtitle"]),
        _summary_table(results),
        Spacer(1, SECTION_SPACER),
    ]

    highlight = reduction_highlight(results)
    if highlight:
        story.append(Paragraph(highlight, styles["Highlight"]))

    story.append(_comparison_table(results))
    story.append(Spacer(1, SECTION_SPACER))

    story.append(Paragraph("Assumptions", styles["H2"]))
    for line in assumptions_section(config, results):
        story.append(Paragraph(f"•  {line}", styles["Body"]))
    story.append(Spacer(1, SECTION_SPACER))

    roi = roi_section(results)
    if roi:
        story.append(Paragraph("Return on Investment", styles["H2"]))
        story.append(Paragraph(roi["note"], styles["Small"]))
        story.append(_roi_table(roi))

    footer_cb = _make_footer(meta)
    doc.build(story, onFirstPage=footer_cb, onLaterPages=footer_cb)
    return buffer.getvalue()
