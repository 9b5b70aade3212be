"""
Drawing surfaces the report composers write to.

The composers only know the DocumentCanvas and TabularSheet capabilities;
PdfCanvas (reportlab) and WorkbookSheet (openpyxl) are the concrete
renderers used for the downloadable files.
"""
import logging
from typing import Literal, Optional, Protocol
from xml.sax.saxutils import escape

from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from pydantic import BaseModel, ConfigDict
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, Table, TableStyle

logger = logging.getLogger(__name__)

Align = Literal["left", "center", "right"]

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


# ── Table description ──────────────────────────────────────────────────────────

class ColumnSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    header: str
    width: Optional[float] = None  # mm; None shares the remaining width
    align: Align = "center"


class CellStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    font_size: float
    cell_padding: float
    min_row_height: float


class TableSpec(BaseModel):
    columns: list[ColumnSpec]
    rows: list[list[str]]
    style: CellStyle
    bold_rows: frozenset[int] = frozenset()  # indexes into rows


# ── Capabilities ───────────────────────────────────────────────────────────────

class DocumentCanvas(Protocol):
    page_width: float
    page_height: float

    def text(self, text: str, x: float, y: float, *, size: float = 9,
             bold: bool = False, align: Align = "left") -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.3) -> None: ...

    def table(self, spec: TableSpec, start_y: float) -> float:
        """Draw the table from start_y, breaking pages as needed. Returns its bottom edge."""
        ...

    def add_page(self) -> None: ...


class TabularSheet(Protocol):
    def write(self, row: int, column: int, value, *, bold: bool = False,
              size: Optional[float] = None) -> None: ...

    def merge(self, start_row: int, start_column: int, end_row: int, end_column: int) -> None: ...

    def set_column_width(self, column: int, width: float) -> None: ...


# ── reportlab ──────────────────────────────────────────────────────────────────

_ALIGNMENTS = {"left": TA_LEFT, "center": TA_CENTER, "right": TA_RIGHT}


class PdfCanvas:
    """
    DocumentCanvas over a reportlab canvas.

    Coordinates are millimetres from the top-left corner; reportlab's
    bottom-up point system is handled here.
    """

    def __init__(self, target, pagesize=landscape(A4), margin_x: float = 14,
                 margin_top: float = 15, margin_bottom: float = 15):
        self._c = canvas.Canvas(target, pagesize=pagesize)
        self.page_width = pagesize[0] / mm
        self.page_height = pagesize[1] / mm
        self.margin_x = margin_x
        self.margin_top = margin_top
        self.margin_bottom = margin_bottom
        self.page_count = 1
        self._styles: dict[tuple, ParagraphStyle] = {}

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin_x

    def _y(self, y: float) -> float:
        return (self.page_height - y) * mm

    def text(self, text, x, y, *, size=9, bold=False, align="left"):
        self._c.setFont(BOLD_FONT if bold else REGULAR_FONT, size)
        if align == "center":
            self._c.drawCentredString(x * mm, self._y(y), text)
        elif align == "right":
            self._c.drawRightString(x * mm, self._y(y), text)
        else:
            self._c.drawString(x * mm, self._y(y), text)

    def line(self, x1, y1, x2, y2, width=0.3):
        self._c.setLineWidth(width * mm)
        self._c.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def add_page(self):
        self._c.showPage()
        self.page_count += 1

    def save(self):
        self._c.save()

    # ── tables ─────────────────────────────────────────────────────────────────

    def column_widths(self, columns: list[ColumnSpec]) -> list[float]:
        fixed = sum(c.width for c in columns if c.width is not None)
        flexible = [c for c in columns if c.width is None]
        share = (self.content_width - fixed) / len(flexible) if flexible else 0
        return [c.width if c.width is not None else share for c in columns]

    def _paragraph_style(self, size: float, bold: bool, align: Align) -> ParagraphStyle:
        key = (size, bold, align)
        if key not in self._styles:
            self._styles[key] = ParagraphStyle(
                name=f"cell-{size}-{'b' if bold else 'r'}-{align}",
                fontName=BOLD_FONT if bold else REGULAR_FONT,
                fontSize=size,
                leading=size * 1.15,
                alignment=_ALIGNMENTS[align],
            )
        return self._styles[key]

    def table(self, spec, start_y):
        widths = [w * mm for w in self.column_widths(spec.columns)]
        style = spec.style
        pad = style.cell_padding * mm
        min_height = style.min_row_height * mm

        rows = [[c.header for c in spec.columns]] + spec.rows
        data = []
        for index, row in enumerate(rows):
            bold = index == 0 or (index - 1) in spec.bold_rows
            data.append([
                Paragraph(escape(value or "").replace("\n", "<br/>"),
                          self._paragraph_style(style.font_size, bold, column.align))
                for value, column in zip(row, spec.columns)
            ])

        # Rows grow to fit wrapped text but never below the planned height
        header_height = self._row_height(data[0], widths, pad, min_height)
        limit = (self.page_height - self.margin_top - self.margin_bottom - 1) * mm - header_height
        body, heights = [], [header_height]
        for cells in data[1:]:
            pieces = [cells]
            if self._row_height(cells, widths, pad, min_height) > limit:
                pieces = self._break_row(cells, widths, pad, limit - 2 * pad)
                logger.debug("Split an over-tall row into %d rows", len(pieces))
            for piece in pieces:
                body.append(piece)
                heights.append(self._row_height(piece, widths, pad, min_height))

        table = Table([data[0]] + body, colWidths=widths, rowHeights=heights, repeatRows=1)
        table.setStyle(TableStyle([
            ("GRID", (0, 0), (-1, -1), 0.1 * mm, colors.black),
            ("BACKGROUND", (0, 0), (-1, -1), colors.white),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LEFTPADDING", (0, 0), (-1, -1), pad),
            ("RIGHTPADDING", (0, 0), (-1, -1), pad),
            ("TOPPADDING", (0, 0), (-1, -1), pad),
            ("BOTTOMPADDING", (0, 0), (-1, -1), pad),
        ]))
        return self._flow(table, start_y)

    def _row_height(self, cells, widths, pad, min_height):
        height = min_height
        for cell, width in zip(cells, widths):
            if isinstance(cell, Paragraph):
                _, cell_height = cell.wrap(max(width - 2 * pad, 1), self.page_height * mm)
                height = max(height, cell_height + 2 * pad)
        return height

    def _break_row(self, cells, widths, pad, text_height):
        """
        Cut a row whose text is taller than a page into continuation rows.

        Each cell keeps as many lines as fit in text_height; the remainder
        moves to the next row and cells that already fit leave it blank.
        """
        pieces = []
        while True:
            head, rest = [], []
            for cell, width in zip(cells, widths):
                inner = max(width - 2 * pad, 1)
                if not isinstance(cell, Paragraph) or cell.wrap(inner, text_height)[1] <= text_height:
                    head.append(cell)
                    rest.append("")
                    continue
                parts = cell.split(inner, text_height)
                if len(parts) < 2:
                    raise ValueError("Table cell text cannot be split to fit on a page")
                head.append(parts[0])
                rest.append(parts[1])
            pieces.append(head)
            if not any(isinstance(cell, Paragraph) for cell in rest):
                return pieces
            cells = rest

    def _flow(self, table: Table, y: float) -> float:
        width = self.content_width * mm
        x = self.margin_x * mm
        while True:
            available = (self.page_height - self.margin_bottom - y) * mm
            _, height = table.wrap(width, available)
            if height <= available:
                table.drawOn(self._c, x, self._y(y) - height)
                return y + height / mm

            parts = table.split(width, available)
            if len(parts) < 2:
                if y <= self.margin_top:
                    # Every row fits a fresh page after _break_row
                    raise ValueError("Table row does not fit on an empty page")
                self.add_page()
                y = self.margin_top
                continue

            head, table = parts[0], parts[1]
            _, head_height = head.wrap(width, available)
            head.drawOn(self._c, x, self._y(y) - head_height)
            logger.debug("Table continues on page %d", self.page_count + 1)
            self.add_page()
            y = self.margin_top


# ── openpyxl ───────────────────────────────────────────────────────────────────

class WorkbookSheet:
    """TabularSheet over an openpyxl worksheet (1-based rows and columns)."""

    def __init__(self, worksheet):
        self._ws = worksheet

    def write(self, row, column, value, *, bold=False, size=None):
        # Blank cells stay empty rather than holding ""
        if value is None or value == "":
            return
        cell = self._ws.cell(row=row, column=column, value=value)
        if bold or size:
            cell.font = Font(bold=bold, size=size)

    def merge(self, start_row, start_column, end_row, end_column):
        self._ws.merge_cells(
            start_row=start_row, start_column=start_column,
            end_row=end_row, end_column=end_column,
        )

    def set_column_width(self, column, width):
        self._ws.column_dimensions[get_column_letter(column)].width = width
