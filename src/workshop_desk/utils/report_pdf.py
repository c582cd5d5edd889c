"""Generate a printable daily report PDF.

One LETTER page (continued onto further pages if needed) with:
  - Title and report date
  - Summary block: total jobs, total revenue, average ticket
  - Service breakdown table (services with sales, highest revenue first)
  - Staff performance table

Usage::

    from workshop_desk.utils.report_pdf import generate_daily_report_pdf

    summary = repo.daily_summary("2026-10-17")
    pdf_path = generate_daily_report_pdf(summary)
"""

import os
import tempfile

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from workshop_desk.database.models import DailySummary
from workshop_desk.utils.formatters import format_currency, format_report_date

# ── Layout constants ─────────────────────────────────────────
PAGE_WIDTH, PAGE_HEIGHT = LETTER
LEFT_MARGIN = 0.75 * inch
TOP_MARGIN = 0.75 * inch
BOTTOM_MARGIN = 0.75 * inch
LINE_HEIGHT = 0.25 * inch
COLUMN_X = (LEFT_MARGIN, LEFT_MARGIN + 3.5 * inch, LEFT_MARGIN + 5.0 * inch)

FONT_NAME = "Helvetica"
FONT_SIZE_TITLE = 18
FONT_SIZE_HEADING = 13
FONT_SIZE_BODY = 10


class _PageWriter:
    """Tracks the vertical cursor and breaks pages when it runs out."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.y = PAGE_HEIGHT - TOP_MARGIN

    def advance(self, lines: float = 1):
        self.y -= LINE_HEIGHT * lines
        if self.y < BOTTOM_MARGIN:
            self.c.showPage()
            self.y = PAGE_HEIGHT - TOP_MARGIN

    def text(self, x: float, value: str, size: float = FONT_SIZE_BODY,
             bold: bool = False):
        self.c.setFont(FONT_NAME + ("-Bold" if bold else ""), size)
        self.c.drawString(x, self.y, value)

    def row(self, cells: list[str], bold: bool = False):
        for x, value in zip(COLUMN_X, cells):
            self.text(x, value, bold=bold)
        self.advance()

    def table(self, heading: str, header: list[str], rows: list[list[str]],
              empty_text: str):
        self.advance(0.5)
        self.text(LEFT_MARGIN, heading, FONT_SIZE_HEADING, bold=True)
        self.advance(1.5)
        self.row(header, bold=True)
        if not rows:
            self.text(LEFT_MARGIN, empty_text)
            self.advance()
        for cells in rows:
            self.row(cells)


def generate_daily_report_pdf(
    summary: DailySummary,
    output_path: str | None = None,
    shop_name: str = "",
    currency_symbol: str = "$",
) -> str:
    """Render ``summary`` as a PDF.

    Args:
        summary: The day's aggregate from ``Repository.daily_summary``.
        output_path: Optional output PDF path. If *None*, writes
            ``daily-report-<date>.pdf`` in the system temp directory.
        shop_name: Printed above the title when given.
        currency_symbol: Prefix for money columns.

    Returns:
        Path to the generated PDF file.
    """
    if not output_path:
        output_path = os.path.join(
            tempfile.gettempdir(), f"daily-report-{summary.date}.pdf"
        )
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    def money(value: float) -> str:
        return format_currency(value, currency_symbol)

    c = canvas.Canvas(output_path, pagesize=LETTER)
    c.setTitle(f"Daily Report {summary.date}")
    page = _PageWriter(c)

    if shop_name:
        page.text(LEFT_MARGIN, shop_name, FONT_SIZE_BODY)
        page.advance()
    page.text(LEFT_MARGIN, "Daily Report", FONT_SIZE_TITLE, bold=True)
    page.advance(1.2)
    page.text(LEFT_MARGIN, format_report_date(summary.date))
    page.advance(2)

    page.text(LEFT_MARGIN, "Summary", FONT_SIZE_HEADING, bold=True)
    page.advance(1.5)
    page.row(["Total Jobs", str(summary.total_jobs)])
    page.row(["Total Revenue", money(summary.total_revenue)])
    page.row(["Average Ticket", money(summary.average_ticket)])

    page.table(
        "Service Breakdown",
        ["Service", "Count", "Revenue"],
        [
            [name, str(t.count), money(t.revenue)]
            for name, t in summary.active_services.items()
        ],
        "No services recorded for this day.",
    )

    staff_rows = sorted(
        summary.staff_performance.values(),
        key=lambda t: t.revenue, reverse=True,
    )
    page.table(
        "Staff Performance",
        ["Staff", "Jobs", "Revenue"],
        [[t.name, str(t.jobs), money(t.revenue)] for t in staff_rows],
        "No jobs recorded for this day.",
    )

    c.save()
    return output_path
