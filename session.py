"""
Editing state for one report: the header, the item rows and live totals.

The session owns the mutable state. Header and rows are immutable models;
every edit swaps in a new instance, so a snapshot taken for rendering is
never affected by later edits.
"""
import logging
from collections.abc import Callable
from datetime import date

from models import (
    HeaderUpdate,
    LineItem,
    LineItemUpdate,
    ReportHeader,
    ReportRequest,
    ReportSnapshot,
    Totals,
)
from report import capture_snapshot
from totals import compute_totals
from utils import format_display_date

logger = logging.getLogger(__name__)

Listener = Callable[[Totals], None]


class ReportSession:
    def __init__(self, today: date | None = None):
        today = today or date.today()
        self._header = ReportHeader(billing_date=format_display_date(today))
        self._items: list[LineItem] = [LineItem()]
        self._listeners: list[Listener] = []

    @classmethod
    def from_request(cls, request: ReportRequest) -> "ReportSession":
        session = cls()
        session._header = request.header
        session._items = list(request.items) or [LineItem()]
        return session

    # ── Reads ──────────────────────────────────────────────────────────────────

    @property
    def header(self) -> ReportHeader:
        return self._header

    @property
    def items(self) -> tuple[LineItem, ...]:
        return tuple(self._items)

    @property
    def totals(self) -> Totals:
        return compute_totals(self._items)

    def snapshot(self) -> ReportSnapshot:
        return capture_snapshot(self._header, self._items)

    def to_request(self) -> ReportRequest:
        return ReportRequest(header=self._header, items=list(self._items))

    # ── Change notification ────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with fresh totals after every edit. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self):
        totals = self.totals
        for listener in list(self._listeners):
            listener(totals)

    # ── Edits ──────────────────────────────────────────────────────────────────

    def update_header(self, update: HeaderUpdate) -> ReportHeader:
        changes = update.model_dump(exclude_unset=True)
        self._header = ReportHeader.model_validate({**self._header.model_dump(), **changes})
        self._changed()
        return self._header

    def add_item(self) -> LineItem:
        item = LineItem()
        self._items.append(item)
        self._changed()
        return item

    def update_item(self, item_id: str, update: LineItemUpdate) -> LineItem:
        index = self._index(item_id)
        changes = update.model_dump(exclude_unset=True)
        item = LineItem.model_validate({**self._items[index].model_dump(), **changes})
        self._items[index] = item
        self._changed()
        return item

    def remove_item(self, item_id: str) -> bool:
        """Remove a row. The last remaining row is kept; returns False in that case."""
        index = self._index(item_id)
        if len(self._items) <= 1:
            logger.debug("Refusing to remove the only row %s", item_id)
            return False
        del self._items[index]
        self._changed()
        return True

    def _index(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise KeyError(f"No line item with id {item_id!r}")
