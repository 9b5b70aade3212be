"""
Totals over a collection of line items.

Both exports and the live editing view call compute_totals() so the numbers
they show can never drift apart.
"""
from collections.abc import Iterable, Mapping

from models import Totals
from utils import to_number

NUMERIC_FIELDS = {
    "invoice_qty": "invoiceQty",
    "rcvd_qty": "rcvdQty",
    "unit_price": "unitPrice",
}


def _field(item, name: str) -> float:
    if isinstance(item, Mapping):
        raw = item.get(name, item.get(NUMERIC_FIELDS[name]))
    else:
        raw = getattr(item, name, None)
    return to_number(raw)


def compute_totals(items: Iterable) -> Totals:
    """Sum invoice qty, received qty and value. Never raises."""
    invoice_qty = rcvd_qty = value = 0.0
    for item in items:
        qty = _field(item, "invoice_qty")
        invoice_qty += qty
        rcvd_qty += _field(item, "rcvd_qty")
        value += qty * _field(item, "unit_price")
    return Totals(
        total_invoice_qty=invoice_qty,
        total_rcvd_qty=rcvd_qty,
        total_value=value,
    )
