"""
Tests for the data model, helpers, totals and the layout planner.

Run locally:
    pytest tests/ -v
"""

import os
import sys
from datetime import date

import pytest

# Allow imports from parent directory
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


class TestUtils:
    def test_to_number_coerces_bad_input_to_zero(self):
        from utils import to_number
        assert to_number("12.5") == 12.5
        assert to_number(" 7 ") == 7.0
        assert to_number(3) == 3.0
        assert to_number(None) == 0.0
        assert to_number("") == 0.0
        assert to_number("abc") == 0.0
        assert to_number("nan") == 0.0
        assert to_number(float("inf")) == 0.0
        assert to_number([1, 2]) == 0.0

    def test_filename_date_from_display_format(self):
        from utils import get_filename_date
        assert get_filename_date("01-Jan-2025") == "01.01.25"
        assert get_filename_date("15-Mar-2024") == "15.03.24"

    def test_filename_date_from_iso_format(self):
        from utils import get_filename_date
        assert get_filename_date("2025-12-31") == "31.12.25"

    def test_filename_date_invalid_uses_sentinel(self):
        from utils import get_filename_date
        assert get_filename_date("") == "00.00.00"
        assert get_filename_date("not a date") == "00.00.00"
        assert get_filename_date(None) == "00.00.00"

    def test_format_display_date(self):
        from utils import format_display_date
        assert format_display_date(date(2025, 1, 1)) == "01-Jan-2025"

    def test_round_half_up(self):
        from utils import round_half_up
        assert round_half_up(1234.5) == 1235
        assert round_half_up(1234.49) == 1234
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3

    def test_format_plain_number(self):
        from utils import format_plain_number
        assert format_plain_number(100.0) == "100"
        assert format_plain_number(2.5) == "2.5"
        assert format_plain_number(0) == "0"

    def test_format_currency(self):
        from utils import format_currency
        assert format_currency(1234.5) == "$1,234.50"
        assert format_currency(0) == "$0.00"
        assert format_currency(-3) == "-$3.00"

    def test_build_report_filename(self):
        from models import ReportHeader, Totals
        from utils import build_report_filename
        header = ReportHeader(buyer_name="HNM", billing_date="01-Jan-2025")
        name = build_report_filename(header, Totals(total_value=1234.5))
        assert name == "Bill of Buyer HNM $1235 DATE-01.01.25"

    def test_build_report_filename_bad_date(self):
        from models import ReportHeader, Totals
        from utils import build_report_filename
        header = ReportHeader(buyer_name="HNM", billing_date="")
        name = build_report_filename(header, Totals(total_value=250))
        assert name == "Bill of Buyer HNM $250 DATE-00.00.00"

    def test_validate_header_requires_buyer(self):
        from models import ReportHeader
        from utils import validate_header
        validate_header(ReportHeader(buyer_name="HNM"))  # Should not raise
        with pytest.raises(ValueError, match="Buyer name is required"):
            validate_header(ReportHeader())


class TestModels:
    def test_line_item_defaults(self):
        from models import LineItem, Unit
        item = LineItem()
        assert item.unit == Unit.YDS
        assert item.invoice_qty == 0.0
        assert item.fabric_code == ""
        assert item.id
        assert LineItem().id != item.id

    def test_line_item_accepts_form_keys(self):
        from models import LineItem
        item = LineItem.model_validate({
            "fabricCode": "FC-1",
            "itemDescription": "Denim",
            "hsCode": "5209.42",
            "invoiceQty": "100",
            "rcvdQty": 90,
            "unitPrice": "2.5",
            "appstremeNo": "R-77",
            "unit": "pcs",
        })
        assert item.fabric_code == "FC-1"
        assert item.hs_code == "5209.42"
        assert item.invoice_qty == 100.0
        assert item.unit_price == 2.5
        assert item.unit.value == "PCS"
        assert item.line_total == 250.0

    def test_line_item_non_numeric_is_zero(self):
        from models import LineItem
        item = LineItem(invoice_qty="lots", rcvd_qty=None, unit_price="")
        assert (item.invoice_qty, item.rcvd_qty, item.unit_price) == (0.0, 0.0, 0.0)
        assert item.line_total == 0.0

    def test_line_item_unknown_unit_rejected(self):
        from pydantic import ValidationError
        from models import LineItem
        with pytest.raises(ValidationError):
            LineItem(unit="BOX")

    def test_header_null_fields_become_empty(self):
        from models import ReportHeader
        header = ReportHeader.model_validate({"buyerName": "HNM", "fileNo": None})
        assert header.buyer_name == "HNM"
        assert header.file_no == ""

    def test_models_are_frozen(self):
        from pydantic import ValidationError
        from models import LineItem
        item = LineItem()
        with pytest.raises(ValidationError):
            item.invoice_qty = 5

    def test_update_rejects_unknown_field(self):
        from pydantic import ValidationError
        from models import LineItemUpdate
        with pytest.raises(ValidationError):
            LineItemUpdate(quantity=5)


class TestTotals:
    def test_empty(self):
        from totals import compute_totals
        totals = compute_totals([])
        assert (totals.total_invoice_qty, totals.total_rcvd_qty, totals.total_value) == (0, 0, 0)

    def test_single_item(self):
        from models import LineItem
        from totals import compute_totals
        totals = compute_totals([LineItem(invoice_qty=100, unit_price=2.5, rcvd_qty=90)])
        assert totals.total_invoice_qty == 100
        assert totals.total_rcvd_qty == 90
        assert totals.total_value == 250.0

    def test_value_matches_sum_of_line_totals(self):
        from models import LineItem
        from totals import compute_totals
        items = [
            LineItem(invoice_qty=10, unit_price=1.25),
            LineItem(invoice_qty="abc", unit_price=99),
            LineItem(invoice_qty=3, unit_price="x"),
            LineItem(invoice_qty=7.5, unit_price=4),
        ]
        totals = compute_totals(items)
        assert totals.total_value == pytest.approx(sum(i.line_total for i in items))
        assert totals.total_value == pytest.approx(42.5)

    def test_order_independent(self):
        from models import LineItem
        from totals import compute_totals
        items = [LineItem(invoice_qty=q, unit_price=p, rcvd_qty=q) for q, p in [(1, 2), (3, 4), (5, 6)]]
        assert compute_totals(items) == compute_totals(list(reversed(items)))

    def test_plain_mappings(self):
        from totals import compute_totals
        totals = compute_totals([
            {"invoiceQty": "4", "unitPrice": "2", "rcvdQty": "bad"},
            {"invoice_qty": 1, "unit_price": 1, "rcvd_qty": 1},
        ])
        assert totals.total_invoice_qty == 5
        assert totals.total_rcvd_qty == 1
        assert totals.total_value == 9


class TestLayoutPlanner:
    PAGE_HEIGHT = 210  # landscape A4, mm

    def test_expand_mode_for_few_items(self):
        from layout import plan_layout
        plan = plan_layout(1, self.PAGE_HEIGHT)
        assert plan.mode == "expand"
        assert plan.font_size == 10
        assert plan.cell_padding == 2
        assert plan.signature_y == 170
        assert plan.max_table_height == pytest.approx(65.5)
        assert plan.min_row_height == pytest.approx(65.5 / 3)

    def test_zero_items_still_plans_two_rows(self):
        from layout import plan_layout
        plan = plan_layout(0, self.PAGE_HEIGHT)
        assert plan.mode == "expand"
        assert plan.min_row_height == pytest.approx(65.5 / 2)

    def test_shrink_mode_for_many_items(self):
        from layout import plan_layout
        plan = plan_layout(7, self.PAGE_HEIGHT)
        assert plan.mode == "shrink"
        assert plan.min_row_height == pytest.approx(65.5 / 9)
        assert plan.font_size == 10  # floor(7.28 * 1.5)
        assert plan.cell_padding == 2

    def test_font_floor(self):
        from layout import plan_layout
        plan = plan_layout(20, self.PAGE_HEIGHT)
        assert plan.font_size == 5
        assert plan.cell_padding == 1
        assert plan.min_row_height == pytest.approx(65.5 / 22)

    def test_exact_fit_uses_expand_mode(self):
        from layout import plan_layout
        # 3 rows * 8 == 80 - 26 - 30
        plan = plan_layout(
            1, page_height=100, signature_block_height=10, bottom_margin=10,
            table_start_y=26, buffer_before_signature=30,
        )
        assert plan.max_table_height == 24
        assert plan.mode == "expand"
        assert plan.font_size == 10
        assert plan.min_row_height == 8

    def test_expand_mode_formula_holds_while_rows_fit(self):
        from layout import STANDARD_ROW_HEIGHT, plan_layout
        for count in range(0, 7):
            plan = plan_layout(count, self.PAGE_HEIGHT)
            assert (count + 2) * STANDARD_ROW_HEIGHT <= plan.max_table_height
            assert plan.font_size == 10
            assert plan.min_row_height == pytest.approx(plan.max_table_height / (count + 2))

    def test_font_size_never_grows_with_more_items(self):
        from layout import plan_layout
        sizes = [plan_layout(n, self.PAGE_HEIGHT).font_size for n in range(7, 150)]
        assert all(a >= b for a, b in zip(sizes, sizes[1:]))
        assert min(sizes) == 5
