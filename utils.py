import logging
import math
from datetime import date, datetime

logger = logging.getLogger(__name__)

FILENAME_DATE_SENTINEL = "00.00.00"

# Formats the billing/invoice date fields arrive in
ACCEPTED_DATE_FORMATS = ("%d-%b-%Y", "%d-%B-%Y", "%Y-%m-%d", "%d %b %Y")


# ── Coercion ───────────────────────────────────────────────────────────────────

def to_number(value) -> float:
    """Coerce a form value to a float. Missing, blank or non-numeric input is 0."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# ── Dates ──────────────────────────────────────────────────────────────────────

def format_display_date(value: date) -> str:
    """01-Jan-2025"""
    return value.strftime("%d-%b-%Y")


def parse_report_date(text: str) -> date | None:
    text = (text or "").strip()
    for fmt in ACCEPTED_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def get_filename_date(text: str) -> str:
    """
    Convert a report date to the dd.mm.yy form used in filenames.
    Unparseable input yields 00.00.00 instead of failing.
    """
    parsed = parse_report_date(text)
    if parsed is None:
        logger.warning("Unparseable billing date %r, using %s", text, FILENAME_DATE_SENTINEL)
        return FILENAME_DATE_SENTINEL
    return parsed.strftime("%d.%m.%y")


# ── Numbers ────────────────────────────────────────────────────────────────────

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_plain_number(value: float) -> str:
    """Shortest plain rendering: 100.0 -> '100', 2.5 -> '2.5'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_currency(amount: float) -> str:
    """USD with thousands separators, e.g. $1,234.50"""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


# ── Report naming / preconditions ──────────────────────────────────────────────

def build_report_filename(header, totals) -> str:
    """Base filename (no extension) shared by both artifacts."""
    rounded = round_half_up(totals.total_value)
    return (
        f"Bill of Buyer {header.buyer_name} ${rounded} "
        f"DATE-{get_filename_date(header.billing_date)}"
    )


def safe_filename(name: str) -> str:
    return name.replace("/", "-").replace("\\", "-")


def validate_header(header) -> None:
    """Raise ValueError if the header cannot be reported on."""
    if not header.buyer_name:
        raise ValueError("Buyer name is required to generate reports.")
