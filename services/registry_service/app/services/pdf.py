"""
Paginated table rendering with ReportLab.

Rows are laid out in a single streaming pass: the renderer starts a new page
whenever the next row would cross the bottom margin and repeats the column
header there. The "Page i of N" footers need the final page count, so the
canvas keeps every finished page and stamps the footers when it is saved.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from io import BytesIO
from typing import List, Optional, Sequence, Tuple

from reportlab.lib.pagesizes import landscape, letter
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..exceptions import EmptyReport
from ..utils.dates import to_display

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Column:
    key: str
    header: str
    weight: float = 1


@dataclass
class ReportTable:
    title_lines: List[str]
    columns: List[Column]
    rows: List[List[str]]


@dataclass(frozen=True)
class ReportStyle:
    pagesize: Tuple[float, float] = letter
    margin: float = 40
    font_name: str = "Helvetica"
    bold_font_name: str = "Helvetica-Bold"
    title_font_size: float = 14
    title_line_height: float = 20
    font_size: float = 10
    header_height: float = 20
    row_height: float = 16
    cell_padding: float = 3
    footer_font_size: float = 9
    # Fixed rows per page; the row height shrinks when page 1 cannot hold them
    rows_per_page: Optional[int] = None
    compress: bool = True

    @classmethod
    def for_orientation(cls, is_landscape: bool, **overrides) -> "ReportStyle":
        pagesize = landscape(letter) if is_landscape else letter
        return cls(pagesize=pagesize, **overrides)


@dataclass
class PageLayout:
    number: int
    row_count: int = 0
    has_header: bool = False
    footer: str = ""


@dataclass
class RenderedReport:
    content: bytes
    pages: List[PageLayout] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)


def footer_text(page_number: int, page_count: int) -> str:
    return f"Page {page_number} of {page_count}"


def column_widths(columns: Sequence[Column], usable_width: float) -> List[float]:
    """Split the usable width proportionally to the column weights."""
    total = sum(column.weight for column in columns)
    if total <= 0:
        raise ValueError("Column weights must add up to a positive number")
    return [column.weight / total * usable_width for column in columns]


def fit_text(text: str, width: float, font_name: str, font_size: float) -> str:
    """Truncate ``text`` with an ellipsis so it fits in ``width`` points."""
    if stringWidth(text, font_name, font_size) <= width:
        return text
    ellipsis = "..."
    while text and stringWidth(text + ellipsis, font_name, font_size) > width:
        text = text[:-1]
    return text + ellipsis if text else ""


class NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output until the total page count is known."""

    def __init__(self, *args, footer_font: Tuple[str, float] = ("Helvetica", 9), footer_y: float = 20, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []
        self.footer_font = footer_font
        self.footer_y = footer_y

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_footer(page_count)
            super().showPage()
        super().save()

    def draw_footer(self, page_count: int):
        self.setFont(*self.footer_font)
        self.drawCentredString(self._pagesize[0] / 2, self.footer_y, footer_text(self._pageNumber, page_count))


def title_block_height(style: ReportStyle, title_line_count: int) -> float:
    """Vertical space taken on page 1 by the title lines and the generation stamp."""
    return (title_line_count + 1.5) * style.title_line_height


def first_page_capacity(style: ReportStyle, title_line_count: int) -> int:
    """Number of rows that fit on page 1 below the title block and the header."""
    space = _first_page_space(style, title_line_count)
    return max(int(space // style.row_height), 0)


def _first_page_space(style: ReportStyle, title_line_count: int) -> float:
    page_height = style.pagesize[1]
    return page_height - 2 * style.margin - title_block_height(style, title_line_count) - style.header_height


def fit_rows_per_page(style: ReportStyle, title_line_count: int) -> ReportStyle:
    """
    Shrink the row height when ``rows_per_page`` rows would not fit on page 1.

    Later pages have no title block, so a row height that fits N rows on the
    first page fits at least N rows everywhere.

    Raises:
        ValueError: ``rows_per_page`` is not positive or page 1 has no room for rows.
    """
    if style.rows_per_page is None:
        return style
    if style.rows_per_page <= 0:
        raise ValueError("rows_per_page must be a positive number")
    if style.rows_per_page <= first_page_capacity(style, title_line_count):
        return style
    space = _first_page_space(style, title_line_count)
    if space <= 0:
        raise ValueError("The title block leaves no room for rows on the first page")
    row_height = space / style.rows_per_page
    return replace(style, row_height=row_height, font_size=min(style.font_size, row_height * 0.75))


class TablePdfRenderer:
    def __init__(self, style: Optional[ReportStyle] = None):
        self.style = style or ReportStyle()

    def render(self, table: ReportTable, generated_at: Optional[datetime] = None) -> RenderedReport:
        """
        Lay out ``table`` across as many pages as needed.

        Raises:
            EmptyReport: the table has no rows; nothing is drawn.
        """
        title = table.title_lines[-1] if table.title_lines else "report"
        if not table.rows:
            raise EmptyReport(title)

        style = fit_rows_per_page(self.style, len(table.title_lines))
        page_width, page_height = style.pagesize
        usable_width = page_width - 2 * style.margin
        widths = column_widths(table.columns, usable_width)
        offsets = [style.margin + sum(widths[:i]) for i in range(len(widths))]

        buffer = BytesIO()
        pdf = NumberedCanvas(
            buffer,
            pagesize=style.pagesize,
            pageCompression=1 if style.compress else 0,
            footer_font=(style.font_name, style.footer_font_size),
            footer_y=style.margin / 2,
        )
        pdf.setTitle(title)

        pages = [PageLayout(number=1)]
        y = self._draw_title_block(pdf, style, table.title_lines, generated_at or datetime.now())
        y = self._draw_header(pdf, style, table.columns, offsets, widths, y)
        pages[0].has_header = True

        for row in table.rows:
            page_full = style.rows_per_page is not None and pages[-1].row_count >= style.rows_per_page
            # Tolerance keeps a shrunk row height from losing the last row to rounding
            if page_full or y - style.row_height < style.margin - 1e-6:
                pdf.showPage()
                pages.append(PageLayout(number=len(pages) + 1))
                y = self._draw_header(pdf, style, table.columns, offsets, widths, page_height - style.margin)
                pages[-1].has_header = True
            y = self._draw_row(pdf, style, row, offsets, widths, y)
            pages[-1].row_count += 1

        pdf.showPage()
        pdf.save()

        for page in pages:
            page.footer = footer_text(page.number, len(pages))
        logger.info(f"Rendered '{title}': {len(table.rows)} rows on {len(pages)} pages")
        return RenderedReport(content=buffer.getvalue(), pages=pages)

    def _draw_title_block(self, pdf: canvas.Canvas, style: ReportStyle, title_lines: Sequence[str],
                          generated_at: datetime) -> float:
        page_width, page_height = style.pagesize
        usable_width = page_width - 2 * style.margin
        y = page_height - style.margin

        pdf.setFont(style.bold_font_name, style.title_font_size)
        for line in title_lines:
            y -= style.title_line_height
            text = fit_text(line, usable_width, style.bold_font_name, style.title_font_size)
            pdf.drawCentredString(page_width / 2, y, text)

        y -= style.title_line_height
        pdf.setFont(style.font_name, style.footer_font_size)
        stamp = f"Generated: {to_display(generated_at)} {generated_at.strftime('%H:%M')}"
        stamp = fit_text(stamp, usable_width, style.font_name, style.footer_font_size)
        pdf.drawRightString(page_width - style.margin, y, stamp)
        return y - style.title_line_height / 2

    def _draw_header(self, pdf: canvas.Canvas, style: ReportStyle, columns: Sequence[Column], offsets, widths,
                     y: float) -> float:
        y -= style.header_height
        baseline = y + (style.header_height - style.font_size) / 2
        pdf.setFont(style.bold_font_name, style.font_size)
        for column, x, width in zip(columns, offsets, widths):
            text = fit_text(column.header, width - 2 * style.cell_padding, style.bold_font_name, style.font_size)
            pdf.drawString(x + style.cell_padding, baseline, text)
        pdf.line(style.margin, y, style.pagesize[0] - style.margin, y)
        return y

    def _draw_row(self, pdf: canvas.Canvas, style: ReportStyle, row: Sequence[str], offsets, widths,
                  y: float) -> float:
        y -= style.row_height
        baseline = y + (style.row_height - style.font_size) / 2
        pdf.setFont(style.font_name, style.font_size)
        for cell, x, width in zip(row, offsets, widths):
            text = fit_text(cell or "", width - 2 * style.cell_padding, style.font_name, style.font_size)
            pdf.drawString(x + style.cell_padding, baseline, text)
        return y
