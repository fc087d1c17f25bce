"""PDF renderer — paints page descriptors to an A4 document with reportlab.

Each descriptor starts a new physical page. The closing page footer
carries the "Page X of Y" label, resolved once the total page count is
known by a numbered canvas. Images must be pre-fetched (see images.py);
slots without a prepared image are simply left out.
"""

from __future__ import annotations

import io
import logging
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, StyleSheet1, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    Flowable,
    Image,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from src.config import settings
from src.document.formatters import NOT_AVAILABLE, format_currency
from src.document.images import PreparedImage
from src.schemas.pages import (
    ClosingPage,
    CostBreakdownPage,
    CoverPage,
    DayPage,
    DescriptionPage,
    Footer,
    PageDescriptor,
    SummaryPage,
)

logger = logging.getLogger(__name__)

MARGIN = 0.6 * inch
CONTENT_WIDTH = A4[0] - 2 * MARGIN
MAX_IMAGE_HEIGHT = 3.2 * inch
BRAND_COLOR = colors.HexColor("#947a57")


class RenderError(RuntimeError):
    """Raised when reportlab fails to build the document."""


class _NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output until the page count is known."""

    footer: Footer | None = None

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._page_states: list[dict] = []

    def showPage(self) -> None:  # noqa: N802 (reportlab API)
        self._page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._page_states)
        for state in self._page_states:
            self.__dict__.update(state)
            if self.footer is not None and self._pageNumber == total:
                self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        width = self._pagesize[0]
        y = 0.45 * inch
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.grey)
        self.drawString(MARGIN, y, f"Quote Reference: {self.footer.quote_reference}")
        self.drawCentredString(width / 2, y, self.footer.site_url)
        self.drawRightString(
            width - MARGIN, y, self.footer.page_label.format(page=self._pageNumber, pages=total),
        )


def _canvas_with_footer(footer: Footer | None) -> type[_NumberedCanvas]:
    return type("QuoteCanvas", (_NumberedCanvas,), {"footer": footer})


def _build_styles() -> StyleSheet1:
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle("ListItem", parent=styles["Normal"], leftIndent=12, spaceAfter=2))
    styles.add(ParagraphStyle("Cell", parent=styles["Normal"], fontSize=9, leading=11))
    styles.add(ParagraphStyle("CellBold", parent=styles["Cell"], fontName="Helvetica-Bold"))
    styles.add(ParagraphStyle(
        "CellHeader", parent=styles["Normal"], fontSize=9, leading=11,
        textColor=colors.whitesmoke, fontName="Helvetica-Bold",
    ))
    styles.add(ParagraphStyle(
        "Banner", parent=styles["Normal"], fontSize=11, leading=14,
        textColor=colors.whitesmoke, fontName="Helvetica-Bold",
    ))
    return styles


class PdfRenderer:
    """Renders a page-descriptor sequence to PDF bytes."""

    def __init__(self, currency_symbol: str | None = None) -> None:
        self._currency = currency_symbol or settings.render.currency_symbol
        self._styles = _build_styles()

    def render(
        self,
        pages: list[PageDescriptor],
        images: dict[str, PreparedImage] | None = None,
        title: str | None = None,
    ) -> bytes:
        """Build the PDF.

        Raises:
            RenderError: If reportlab fails; no partial output is returned.
        """
        images = images or {}
        story: list[Flowable] = []
        footer: Footer | None = None

        for index, page in enumerate(pages):
            if index:
                story.append(PageBreak())
            story.extend(self._page_flowables(page, images))
            if isinstance(page, ClosingPage):
                footer = page.footer

        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf,
            pagesize=A4,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=0.8 * inch,
            title=title or settings.branding.company_name,
            author=settings.branding.company_name,
        )
        try:
            doc.build(story, canvasmaker=_canvas_with_footer(footer))
        except Exception as exc:
            logger.exception("PDF build failed (%d pages)", len(pages))
            raise RenderError(f"PDF build failed: {exc}") from exc

        return buf.getvalue()

    # ── Dispatch ──────────────────────────────────────────────────────

    def _page_flowables(
        self, page: PageDescriptor, images: dict[str, PreparedImage],
    ) -> list[Flowable]:
        if isinstance(page, CoverPage):
            return self._cover(page, images)
        if isinstance(page, DescriptionPage):
            return self._description(page)
        if isinstance(page, SummaryPage):
            return self._summary(page, images)
        if isinstance(page, DayPage):
            return self._day(page, images)
        if isinstance(page, CostBreakdownPage):
            return self._cost_breakdown(page)
        if isinstance(page, ClosingPage):
            return self._closing(page, images)
        msg = f"Unsupported page descriptor: {type(page).__name__}"
        raise RenderError(msg)

    # ── Building blocks ───────────────────────────────────────────────

    def _p(self, text: str, style: str = "Normal") -> Paragraph:
        return Paragraph(escape(text), self._styles[style])

    def _bullets(self, items: list[str], empty: str = NOT_AVAILABLE) -> list[Flowable]:
        if not items:
            return [self._p(empty)]
        return [self._p(f"• {item}", "ListItem") for item in items]

    def _image(
        self, url: str | None, images: dict[str, PreparedImage], width: float = CONTENT_WIDTH,
    ) -> list[Flowable]:
        prepared = images.get(url) if url else None
        if prepared is None:
            return []
        height = width * prepared.aspect
        if height > MAX_IMAGE_HEIGHT:
            width, height = MAX_IMAGE_HEIGHT / prepared.aspect, MAX_IMAGE_HEIGHT
        return [Image(io.BytesIO(prepared.jpeg_bytes), width=width, height=height), Spacer(1, 8)]

    def _table(
        self,
        header: list[str],
        rows: list[list[str]],
        col_widths: list[float],
        bold_last: bool = False,
    ) -> Table:
        cols = len(header)
        data = [[self._p(h, "CellHeader") for h in header]]
        spans = []
        for r, row in enumerate(rows, start=1):
            if len(row) == 1 and cols > 1:
                spans.append(("SPAN", (0, r), (-1, r)))
                row = row + [""] * (cols - 1)
            style = "CellBold" if bold_last and r == len(rows) else "Cell"
            data.append([self._p(cell, style) for cell in row])
        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), BRAND_COLOR),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            *spans,
        ]))
        return table

    # ── Pages ─────────────────────────────────────────────────────────

    def _cover(self, page: CoverPage, images: dict[str, PreparedImage]) -> list[Flowable]:
        s = self._styles
        top = Table(
            [[self._p("Proposal", "Banner"), self._p(page.quote_number, "Banner"),
              self._p(page.client_name, "Banner")]],
            colWidths=[CONTENT_WIDTH * 0.25, CONTENT_WIDTH * 0.35, CONTENT_WIDTH * 0.40],
        )
        top.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, -1), BRAND_COLOR)]))

        elements: list[Flowable] = [top, Spacer(1, 10)]
        elements.extend(self._image(page.background_image, images))
        for line in (
            f"Tour Length: {page.tour_length}",
            f"Start Tour: {page.start_date}",
            f"End Tour: {page.end_date}",
            f"Travelers: {page.travelers}",
        ):
            elements.append(self._p(line))
        elements += [Spacer(1, 10), Paragraph(escape(page.tour_title), s["Title"])]

        elements.append(self._p("Itinerary Overview", "Heading3"))
        elements.extend(self._bullets(page.overview))
        elements.append(Spacer(1, 10))

        elements.extend(self._p(text) for text in page.greeting)
        elements.append(Spacer(1, 10))
        elements.extend(self._p(line, "Cell") for line in page.contact)
        return elements

    def _description(self, page: DescriptionPage) -> list[Flowable]:
        return [
            self._p(page.title, "Heading1"),
            *(self._p(par) for par in page.description.split("\n") if par.strip()),
        ]

    def _summary(self, page: SummaryPage, images: dict[str, PreparedImage]) -> list[Flowable]:
        elements: list[Flowable] = [self._p("Travel Summary", "Heading1")]
        elements.extend(self._image(page.image, images, width=CONTENT_WIDTH * 0.5))
        elements += [
            self._p(page.tour_title, "Heading3"),
            self._p(f"Starting Day: {page.start_date}"),
            self._p(f"Ending Day: {page.end_date}"),
            self._p(f"Total Days: {page.total_days}"),
            Spacer(1, 10),
            self._p("Day by Day Itinerary", "Heading2"),
            self._p(f"Starting Destination: {page.starting_from}"),
            Spacer(1, 4),
            self._table(
                page.table.header,
                page.table.rows,
                [CONTENT_WIDTH * w for w in (0.12, 0.30, 0.30, 0.28)],
            ),
            Spacer(1, 4),
            self._p(f"Ending Destination: {page.ending_from}"),
        ]
        return elements

    def _day(self, page: DayPage, images: dict[str, PreparedImage]) -> list[Flowable]:
        banner = Table(
            [[self._p(f"Day {page.day_number}", "Banner"), self._p(page.date_label, "Banner"),
              self._p(page.destination, "Banner")]],
            colWidths=[CONTENT_WIDTH * 0.15, CONTENT_WIDTH * 0.45, CONTENT_WIDTH * 0.40],
        )
        banner.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, -1), BRAND_COLOR)]))

        elements: list[Flowable] = [banner, Spacer(1, 10), self._p(page.title, "Heading2")]
        if page.description:
            elements.append(self._p(page.description))
        for label, value in (
            ("Time", page.time),
            ("Distance", page.distance),
            ("Max Altitude", page.max_altitude),
        ):
            if value:
                elements.append(self._p(f"{label}: {value}", "Cell"))

        elements.append(self._p("Activities:", "Heading3"))
        elements.extend(self._bullets(page.activities))
        elements.append(self._p("Meals:", "Heading3"))
        elements.extend(self._bullets(page.meals))
        elements.append(self._p("Accommodation:", "Heading3"))
        elements.append(self._p(page.accommodation))
        elements.append(Spacer(1, 8))

        elements.extend(self._image(page.destination_image, images, width=CONTENT_WIDTH * 0.7))
        elements.extend(self._image(page.accommodation_image, images, width=CONTENT_WIDTH * 0.7))
        return elements

    def _cost_breakdown(self, page: CostBreakdownPage) -> list[Flowable]:
        rows = [
            [
                f"{line.label} ({line.count} × {format_currency(line.unit_price, self._currency)})",
                format_currency(line.amount, self._currency),
            ]
            for line in page.lines
        ]
        rows.append(["Total", format_currency(page.total, self._currency)])
        costs = self._table(
            ["Description", "Amount"], rows, [CONTENT_WIDTH * 0.65, CONTENT_WIDTH * 0.35], bold_last=True,
        )
        costs.setStyle(TableStyle([
            ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor("#f8f8f8")),
        ]))

        half = CONTENT_WIDTH / 2
        includes = [self._p("What's Included", "Heading3"), *self._bullets(page.includes, "No inclusions listed.")]
        excludes = [self._p("What's Excluded", "Heading3"), *self._bullets(page.excludes, "No exclusions listed.")]
        lists = Table([[includes, excludes]], colWidths=[half, half])
        lists.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))

        elements: list[Flowable] = [
            self._p("Cost Breakdown", "Heading1"),
            costs,
            Spacer(1, 14),
            lists,
            Spacer(1, 14),
            self._p(page.payment_terms_title, "Heading3"),
        ]
        if page.payment_terms:
            elements.append(self._p(page.payment_terms))
        return elements

    def _closing(self, page: ClosingPage, images: dict[str, PreparedImage]) -> list[Flowable]:
        elements: list[Flowable] = [Spacer(1, 1.5 * inch)]
        elements.extend(self._image(page.background_image, images))
        elements += [
            Paragraph(escape(page.heading), self._styles["Title"]),
            self._p(page.message),
        ]
        return elements
