"""
timelog_services.report -- PDF staff activity report.

Responsibility:
    Renders a period's activities, totals and executive summary into the
    company's A4 "Staff Performance & Activity Report".

Architecture position:
    Services -- file output.  Pure with respect to the timesheet: takes
    activities and a summary, writes one PDF, returns where it went.

Layout:
    First page carries a dark header band with the company name and report
    title, then the reporting period, total hours and generation time, the
    summary box and the numbered activity log.  Every page carries the
    "Internal Personnel Document - Page i of n" footer.

Failure modes:
    - EmptyReportError when there are no activities.
    - OSError from the filesystem propagates.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from functools import partial
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    BaseDocTemplate,
    Frame,
    NextPageTemplate,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)

from timelog_config.schema import CompanySettings
from timelog_kernel.domain.values import NARRATIVE_FIELDS, Activity, total_hours
from timelog_kernel.exceptions import EmptyReportError
from timelog_kernel.logging_config import get_logger

logger = get_logger("services.report")

SLATE_900 = colors.HexColor("#0f172a")
SLATE_800 = colors.HexColor("#1e293b")
SLATE_700 = colors.HexColor("#334155")
SLATE_600 = colors.HexColor("#475569")
SLATE_500 = colors.HexColor("#64748b")
SLATE_400 = colors.HexColor("#94a3b8")
SLATE_200 = colors.HexColor("#e2e8f0")
SLATE_100 = colors.HexColor("#f1f5f9")
SLATE_50 = colors.HexColor("#f8fafc")
BLUE_600 = colors.HexColor("#2563eb")

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 20 * mm
HEADER_HEIGHT = 40 * mm

NO_DETAILS = "No specific details logged."


@dataclass(frozen=True)
class RenderedReport:
    path: Path
    page_count: int
    total_hours: Decimal
    activity_count: int


def report_filename(label: str, prefix: str = "WK_Report") -> str:
    """``WK_Report_First_Half_of_May.pdf`` style file name."""
    slug = re.sub(r"\s+", "_", label.strip())
    return f"{prefix}_{slug}.pdf"


def format_generated_on(moment: datetime) -> str:
    """en-US style local timestamp, e.g. ``2/3/2024, 9:05:00 AM``."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


def _humanize(field_name: str) -> str:
    return field_name.replace("_", " ").capitalize()


class _NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output so the footer can show the page total."""

    def __init__(self, *args, footer_label: str = "", **kwargs):
        super().__init__(*args, **kwargs)
        self._footer_label = footer_label
        self._saved_page_states: list[dict] = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        self.saveState()
        self.setFont("Helvetica", 8)
        self.setFillColor(SLATE_400)
        self.drawCentredString(
            PAGE_WIDTH / 2,
            12 * mm,
            f"{self._footer_label} - Page {self._pageNumber} of {total}",
        )
        self.restoreState()


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "label": ParagraphStyle(
            "label", parent=base["Normal"], fontName="Helvetica-Bold",
            fontSize=11, textColor=SLATE_700,
        ),
        "value": ParagraphStyle(
            "value", parent=base["Normal"], fontSize=11, textColor=SLATE_700,
        ),
        "summary_title": ParagraphStyle(
            "summary_title", parent=base["Normal"], fontName="Helvetica-Bold",
            fontSize=10, textColor=BLUE_600, spaceAfter=4,
        ),
        "summary": ParagraphStyle(
            "summary", parent=base["Normal"], fontName="Helvetica-Oblique",
            fontSize=10, leading=13, textColor=SLATE_600,
        ),
        "section": ParagraphStyle(
            "section", parent=base["Normal"], fontName="Helvetica-Bold",
            fontSize=12, textColor=SLATE_900, spaceBefore=10, spaceAfter=6,
        ),
        "task": ParagraphStyle(
            "task", parent=base["Normal"], fontName="Helvetica-Bold",
            fontSize=10, textColor=SLATE_800,
        ),
        "meta": ParagraphStyle(
            "meta", parent=base["Normal"], fontSize=10, textColor=SLATE_500,
            alignment=TA_RIGHT,
        ),
        "details": ParagraphStyle(
            "details", parent=base["Normal"], fontSize=9, leading=12,
            textColor=SLATE_600, leftIndent=5 * mm,
        ),
    }


def _draw_header(company: CompanySettings, pdf: canvas.Canvas, doc) -> None:
    pdf.saveState()
    pdf.setFillColor(SLATE_900)
    pdf.rect(0, PAGE_HEIGHT - HEADER_HEIGHT, PAGE_WIDTH, HEADER_HEIGHT, stroke=0, fill=1)
    pdf.setFillColor(colors.white)
    pdf.setFont("Helvetica-Bold", 24)
    pdf.drawString(MARGIN, PAGE_HEIGHT - 20 * mm, company.short_name.upper())
    pdf.setFillColor(SLATE_400)
    pdf.setFont("Helvetica", 10)
    pdf.drawString(MARGIN, PAGE_HEIGHT - 28 * mm, company.report_title)
    pdf.restoreState()


def _activity_block(index: int, activity: Activity, styles) -> list:
    meta = f"{activity.date.isoformat()} | {activity.duration_hours}h"
    heading = Table(
        [[
            Paragraph(f"{index}. {escape(activity.task.upper())}", styles["task"]),
            Paragraph(escape(meta), styles["meta"]),
        ]],
        colWidths=[120 * mm, 50 * mm],
    )
    heading.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
    ]))

    block: list = [heading, Spacer(1, 2 * mm)]
    block.append(Paragraph(escape(activity.description or NO_DETAILS), styles["details"]))
    for name in NARRATIVE_FIELDS:
        text = getattr(activity, name)
        if text:
            block.append(Paragraph(
                f"<b>{_humanize(name)}:</b> {escape(text)}", styles["details"]
            ))

    separator = Table([[""]], colWidths=[165 * mm], rowHeights=[1])
    separator.setStyle(TableStyle([
        ("LINEBELOW", (0, 0), (-1, -1), 0.5, SLATE_100),
    ]))
    block.extend([Spacer(1, 2 * mm), separator, Spacer(1, 4 * mm)])
    return block


def render_period_report(
    activities: Sequence[Activity],
    label: str,
    summary: str,
    output_dir: Path,
    generated_at: datetime,
    company: CompanySettings | None = None,
) -> RenderedReport:
    """
    Write the PDF report for ``activities`` into ``output_dir``.

    Raises:
        EmptyReportError: if ``activities`` is empty.
    """
    if not activities:
        raise EmptyReportError(label)

    company = company or CompanySettings()
    styles = _styles()
    hours = total_hours(activities)
    path = Path(output_dir) / report_filename(label, company.report_file_prefix)
    path.parent.mkdir(parents=True, exist_ok=True)

    doc = BaseDocTemplate(
        str(path),
        pagesize=A4,
        title=f"{company.short_name} - {label}",
        author=company.name,
    )
    body_width = PAGE_WIDTH - 2 * MARGIN
    first_frame = Frame(
        MARGIN, 22 * mm, body_width, PAGE_HEIGHT - HEADER_HEIGHT - 10 * mm - 22 * mm,
        id="first",
    )
    later_frame = Frame(
        MARGIN, 22 * mm, body_width, PAGE_HEIGHT - 25 * mm - 22 * mm, id="later",
    )
    doc.addPageTemplates([
        PageTemplate(id="First", frames=[first_frame], onPage=partial(_draw_header, company)),
        PageTemplate(id="Later", frames=[later_frame]),
    ])

    info = Table(
        [
            [Paragraph("REPORTING PERIOD:", styles["label"]),
             Paragraph(escape(label), styles["value"])],
            [Paragraph("TOTAL HOURS LOGGED:", styles["label"]),
             Paragraph(f"{hours:.1f} Hours", styles["value"])],
            [Paragraph("GENERATED ON:", styles["label"]),
             Paragraph(format_generated_on(generated_at), styles["value"])],
        ],
        colWidths=[50 * mm, 120 * mm],
        hAlign="LEFT",
    )
    info.setStyle(TableStyle([
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
    ]))

    summary_box = Table(
        [[Paragraph("AI EXECUTIVE SUMMARY", styles["summary_title"])],
         [Paragraph(escape(summary), styles["summary"])]],
        colWidths=[body_width],
    )
    summary_box.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), SLATE_50),
        ("BOX", (0, 0), (-1, -1), 0.75, SLATE_200),
        ("LEFTPADDING", (0, 0), (-1, -1), 5 * mm),
        ("RIGHTPADDING", (0, 0), (-1, -1), 5 * mm),
        ("TOPPADDING", (0, 0), (0, 0), 4 * mm),
        ("BOTTOMPADDING", (0, -1), (-1, -1), 4 * mm),
    ]))

    heading_rule = Table([[""]], colWidths=[body_width], rowHeights=[1])
    heading_rule.setStyle(TableStyle([("LINEBELOW", (0, 0), (-1, -1), 0.75, SLATE_900)]))

    story: list = [
        NextPageTemplate("Later"),
        info,
        Spacer(1, 6 * mm),
        summary_box,
        Spacer(1, 8 * mm),
        Paragraph("DETAILED ACTIVITY LOG", styles["section"]),
        heading_rule,
        Spacer(1, 4 * mm),
    ]
    for index, activity in enumerate(activities, start=1):
        story.extend(_activity_block(index, activity, styles))

    footer = f"{company.short_name} Internal Personnel Document"
    doc.build(story, canvasmaker=partial(_NumberedCanvas, footer_label=footer))

    rendered = RenderedReport(
        path=path,
        page_count=doc.page,
        total_hours=hours,
        activity_count=len(activities),
    )
    logger.info(
        "report_rendered",
        extra={
            "path": str(path),
            "label": label,
            "page_count": rendered.page_count,
            "activity_count": rendered.activity_count,
            "total_hours": hours,
        },
    )
    return rendered
