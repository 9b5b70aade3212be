"""
Export helpers: turn a ReportSnapshot into a printable PDF or an Excel sheet.
"""

import io
import logging

import config
from layout import (
    ADDRESS_Y,
    HEADER_Y,
    INFO_BLOCK_Y,
    LINE_HEIGHT,
    SIGNATURE_OVERLAP_TOLERANCE,
    TABLE_START_Y,
    TITLE_Y,
    plan_layout,
)
from models import Branding, LineItem, ReportSnapshot
from renderers import (
    CellStyle,
    ColumnSpec,
    DocumentCanvas,
    PdfCanvas,
    TableSpec,
    TabularSheet,
    WorkbookSheet,
)
from utils import format_plain_number

logger = logging.getLogger(__name__)

SHEET_NAME = "Inventory Report"


def compose_description(item: LineItem) -> str:
    """Item description, plus a 'Color: x, H.S Code: y' line when either is set."""
    description = item.item_description or ""
    details = []
    if item.color.strip():
        details.append(f"Color: {item.color}")
    if item.hs_code.strip():
        details.append(f"H.S Code: {item.hs_code}")
    if details:
        description += "\n" + ", ".join(details)
    return description


# ── PDF ────────────────────────────────────────────────────────────────────────

DOCUMENT_COLUMNS = [
    ColumnSpec(header="Fabric Code"),
    ColumnSpec(header="Item Description", width=40, align="left"),
    ColumnSpec(header="Rcvd Date"),
    ColumnSpec(header="Challan No"),
    ColumnSpec(header="Pi Number"),
    ColumnSpec(header="Unit"),
    ColumnSpec(header="Invoice Qty"),
    ColumnSpec(header="Rcvd Qty"),
    ColumnSpec(header="Unit Price $"),
    ColumnSpec(header="Total Value"),
    ColumnSpec(header="Appstreme No.\n(Receipt no)"),
]


def document_rows(snapshot: ReportSnapshot) -> list[list[str]]:
    """Item rows in input order followed by the totals row."""
    rows = []
    for item in snapshot.items:
        rows.append([
            item.fabric_code,
            compose_description(item),
            item.rcvd_date,
            item.challan_no,
            item.pi_number,
            item.unit.value,
            format_plain_number(item.invoice_qty),
            format_plain_number(item.rcvd_qty),
            f"{item.unit_price:.2f}",
            f"{item.line_total:.2f}",
            item.appstreme_no,
        ])

    totals = snapshot.totals
    rows.append([
        "", "", "", "", "Total:", "YDS",
        f"{totals.total_invoice_qty:.2f}",
        f"{totals.total_rcvd_qty:.2f}",
        "",
        f"{totals.total_value:.2f}",
        "",
    ])
    return rows


def compose_document(canvas: DocumentCanvas, snapshot: ReportSnapshot,
                     branding: Branding | None = None) -> None:
    """Draw the whole report (header, info block, table, signatures) onto canvas."""
    branding = branding or config.DEFAULT_BRANDING
    header = snapshot.header
    page_width = canvas.page_width

    plan = plan_layout(len(snapshot.items), canvas.page_height)

    # ── Static header ──────────────────────────────────────────────────────────
    canvas.text(branding.org_name, page_width / 2, HEADER_Y, size=20, bold=True, align="center")
    canvas.text(branding.org_address, page_width / 2, ADDRESS_Y, size=9, align="center")
    canvas.text(branding.title, page_width / 2, TITLE_Y, size=14, bold=True, align="center")

    # ── Info block ─────────────────────────────────────────────────────────────
    left_x = 14
    right_x = page_width - 70

    left = [
        ("Buyer Name :", header.buyer_name),
        ("Supplier Name:", header.supplier_name),
        ("File No :", header.file_no),
        ("Invoice No :", header.invoice_no),
        ("L/C Number :", header.lc_number),
    ]
    for i, (label, value) in enumerate(left):
        y = INFO_BLOCK_Y + LINE_HEIGHT * i
        canvas.text(label, left_x, y, size=9, bold=True)
        canvas.text(value, left_x + 35, y, size=9)

    right = [
        ("Invoice Date:", header.invoice_date),
        ("Billing Date:", header.billing_date),
    ]
    for i, (label, value) in enumerate(right):
        y = INFO_BLOCK_Y + LINE_HEIGHT * i
        canvas.text(label, right_x, y, size=9, bold=True)
        canvas.text(value, right_x + 25, y, size=9)

    # ── Table ──────────────────────────────────────────────────────────────────
    rows = document_rows(snapshot)
    table_bottom = canvas.table(
        TableSpec(
            columns=DOCUMENT_COLUMNS,
            rows=rows,
            style=CellStyle(
                font_size=plan.font_size,
                cell_padding=plan.cell_padding,
                min_row_height=plan.min_row_height,
            ),
            bold_rows=frozenset({len(rows) - 1}),
        ),
        TABLE_START_Y,
    )

    # ── Signatures ─────────────────────────────────────────────────────────────
    # Always at the same offset from the bottom; a table that runs into them
    # pushes the whole block onto a fresh page.
    sig_y = plan.signature_y
    if table_bottom > sig_y - SIGNATURE_OVERLAP_TOLERANCE:
        logger.debug("Table ends at %.1f mm, moving signatures to a new page", table_bottom)
        canvas.add_page()

    canvas.line(20, sig_y, 70, sig_y, width=0.3)
    canvas.text("Prepared By", 25, sig_y + 5, size=9, bold=True)

    canvas.line(page_width - 70, sig_y, page_width - 20, sig_y, width=0.3)
    canvas.text("Store In-Charge", page_width - 65, sig_y + 5, size=9, bold=True)


def to_pdf(snapshot: ReportSnapshot, branding: Branding | None = None) -> bytes:
    """Returns a landscape A4 PDF as bytes."""
    buf = io.BytesIO()
    pdf = PdfCanvas(buf)
    compose_document(pdf, snapshot, branding)
    pdf.save()
    logger.debug("Rendered PDF with %d page(s)", pdf.page_count)
    return buf.getvalue()


# ── Excel ──────────────────────────────────────────────────────────────────────

SHEET_HEADERS = [
    "Fabric Code", "Item Description", "Color", "HS Code", "Rcvd Date", "Challan No",
    "Pi Number", "Unit", "Invoice Qty", "Rcvd Qty", "Unit Price $", "Total Value", "Appstreme No",
]
SHEET_WIDTHS = [15, 25, 10, 10, 12, 12, 12, 6, 10, 10, 10, 12, 15]

INFO_START_ROW = 5
TABLE_HEADER_ROW = 11
RIGHT_LABEL_COLUMN = 8


def compose_sheet(sheet: TabularSheet, snapshot: ReportSnapshot,
                  branding: Branding | None = None) -> int:
    """
    Write the report as a flat grid:

      rows 1-3: organisation, address, title (merged across all columns)
      rows 5-9: header label/value pairs
      row 11: column headers, then one row per item and a totals row

    Returns the totals row number.
    """
    branding = branding or config.DEFAULT_BRANDING
    header = snapshot.header
    last_column = len(SHEET_HEADERS)

    for row, (text, size) in enumerate(
        [(branding.org_name, 14), (branding.org_address, None), (branding.title, 12)], start=1
    ):
        sheet.write(row, 1, text, bold=size is not None, size=size)
        sheet.merge(row, 1, row, last_column)

    info = [
        ("Buyer Name :", header.buyer_name, "Invoice Date:", header.invoice_date),
        ("Supplier Name:", header.supplier_name, "Billing Date:", header.billing_date),
        ("File No :", header.file_no, None, None),
        ("Invoice No :", header.invoice_no, None, None),
        ("L/C Number :", header.lc_number, None, None),
    ]
    for row, (label, value, right_label, right_value) in enumerate(info, start=INFO_START_ROW):
        sheet.write(row, 1, label, bold=True)
        sheet.write(row, 2, value)
        sheet.write(row, RIGHT_LABEL_COLUMN, right_label, bold=True)
        sheet.write(row, RIGHT_LABEL_COLUMN + 1, right_value)

    for col, title in enumerate(SHEET_HEADERS, start=1):
        sheet.write(TABLE_HEADER_ROW, col, title, bold=True)

    row = TABLE_HEADER_ROW
    for item in snapshot.items:
        row += 1
        values = [
            item.fabric_code,
            item.item_description,
            item.color,
            item.hs_code,
            item.rcvd_date,
            item.challan_no,
            item.pi_number,
            item.unit.value,
            format_plain_number(item.invoice_qty),
            format_plain_number(item.rcvd_qty),
            format_plain_number(item.unit_price),
            f"{item.line_total:.2f}",
            item.appstreme_no,
        ]
        for col, value in enumerate(values, start=1):
            sheet.write(row, col, value)

    row += 1
    totals = snapshot.totals
    sheet.write(row, 1, "Total:", bold=True)
    sheet.write(row, 9, format_plain_number(totals.total_invoice_qty), bold=True)
    sheet.write(row, 10, format_plain_number(totals.total_rcvd_qty), bold=True)
    sheet.write(row, 12, f"{totals.total_value:.2f}", bold=True)

    for col, width in enumerate(SHEET_WIDTHS, start=1):
        sheet.set_column_width(col, width)

    return row


def to_excel(snapshot: ReportSnapshot, branding: Branding | None = None) -> bytes:
    """Returns an .xlsx file as bytes with a single "Inventory Report" sheet."""
    from openpyxl import Workbook

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME

    compose_sheet(WorkbookSheet(ws), snapshot, branding)

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf.read()
