import uuid
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from utils import to_number, to_text


# Accept the camelCase keys of the editing form as well as snake_case
FORM_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


class Unit(str, Enum):
    YDS = "YDS"
    PCS = "PCS"
    KGS = "KGS"
    MTR = "MTR"


class ReportHeader(BaseModel):
    model_config = FORM_CONFIG

    buyer_name: str = ""
    supplier_name: str = ""
    file_no: str = ""
    invoice_no: str = ""
    lc_number: str = ""
    invoice_date: str = ""
    billing_date: str = ""  # 01-Jan-2025

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return to_text(value)


class LineItem(BaseModel):
    model_config = FORM_CONFIG

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    fabric_code: str = ""
    item_description: str = ""
    color: str = ""
    hs_code: str = ""
    rcvd_date: str = ""
    challan_no: str = ""
    pi_number: str = ""
    unit: Unit = Unit.YDS
    invoice_qty: float = 0.0
    rcvd_qty: float = 0.0
    unit_price: float = 0.0
    appstreme_no: str = ""

    @field_validator(
        "id", "fabric_code", "item_description", "color", "hs_code", "rcvd_date",
        "challan_no", "pi_number", "appstreme_no",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value):
        return to_text(value)

    @field_validator("invoice_qty", "rcvd_qty", "unit_price", mode="before")
    @classmethod
    def _coerce_number(cls, value):
        return to_number(value)

    @field_validator("unit", mode="before")
    @classmethod
    def _normalize_unit(cls, value):
        if value is None or value == "":
            return Unit.YDS
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def line_total(self) -> float:
        return self.invoice_qty * self.unit_price


class Totals(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_invoice_qty: float = 0.0
    total_rcvd_qty: float = 0.0
    total_value: float = 0.0


class ReportSnapshot(BaseModel):
    """Immutable view of one editing session, read by both composers."""

    model_config = ConfigDict(frozen=True)

    header: ReportHeader
    items: Tuple[LineItem, ...] = ()
    totals: Totals = Totals()


# ── Partial updates ────────────────────────────────────────────────────────────

UPDATE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
)


class HeaderUpdate(BaseModel):
    model_config = UPDATE_CONFIG

    buyer_name: Optional[str] = None
    supplier_name: Optional[str] = None
    file_no: Optional[str] = None
    invoice_no: Optional[str] = None
    lc_number: Optional[str] = None
    invoice_date: Optional[str] = None
    billing_date: Optional[str] = None


class LineItemUpdate(BaseModel):
    model_config = UPDATE_CONFIG

    fabric_code: Optional[str] = None
    item_description: Optional[str] = None
    color: Optional[str] = None
    hs_code: Optional[str] = None
    rcvd_date: Optional[str] = None
    challan_no: Optional[str] = None
    pi_number: Optional[str] = None
    unit: Optional[Unit] = None
    # Raw form input; coerced to a number when applied
    invoice_qty: Optional[float | str] = None
    rcvd_qty: Optional[float | str] = None
    unit_price: Optional[float | str] = None
    appstreme_no: Optional[str] = None


# ── Input / output documents ───────────────────────────────────────────────────

class ReportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    header: ReportHeader = ReportHeader()
    items: list[LineItem] = []


class Branding(BaseModel):
    model_config = ConfigDict(frozen=True)

    org_name: str
    org_address: str
    title: str


class GeneratedReport(BaseModel):
    base_filename: str
    totals: Totals
    item_count: int
    pdf: Optional[bytes] = None
    excel: Optional[bytes] = None

    @property
    def pdf_filename(self) -> str:
        return f"{self.base_filename}.pdf"

    @property
    def excel_filename(self) -> str:
        return f"{self.base_filename}.xlsx"
