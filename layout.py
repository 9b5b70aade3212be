"""
Page geometry and table sizing for the printed report.

All lengths are millimetres measured from the top edge of a landscape A4
page; font sizes are points.
"""
import logging
import math
from typing import Literal

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# ── Fixed page geometry ────────────────────────────────────────────────────────

HEADER_Y = 15
ADDRESS_Y = 21
TITLE_Y = 32

INFO_BLOCK_Y = 42
LINE_HEIGHT = 5.5
INFO_BLOCK_HEIGHT = LINE_HEIGHT * 5

TABLE_START_Y = INFO_BLOCK_Y + INFO_BLOCK_HEIGHT + 5

SIGNATURE_HEIGHT = 25
BOTTOM_MARGIN = 15
# Gap kept between the table and the signature lines
SIGNATURE_BUFFER = 30
# How far the table may intrude before the signatures move to a new page
SIGNATURE_OVERLAP_TOLERANCE = 10

# ── Table styling ──────────────────────────────────────────────────────────────

STANDARD_ROW_HEIGHT = 8
STANDARD_FONT_SIZE = 10
STANDARD_CELL_PADDING = 2
MIN_FONT_SIZE = 5
MIN_CELL_PADDING = 0.5


class LayoutPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["shrink", "expand"]
    font_size: float
    cell_padding: float
    min_row_height: float
    signature_y: float
    max_table_height: float


def plan_layout(
    item_count: int,
    page_height: float,
    signature_block_height: float = SIGNATURE_HEIGHT,
    bottom_margin: float = BOTTOM_MARGIN,
    table_start_y: float = TABLE_START_Y,
    buffer_before_signature: float = SIGNATURE_BUFFER,
) -> LayoutPlan:
    """
    Size the item table so it fits between table_start_y and the signature block.

    Rows that would not fit at the standard height are squeezed (smaller
    font and padding); rows that leave spare room are stretched to fill it.
    The header and totals rows always count, so an empty report plans two rows.
    """
    row_count = item_count + 2
    signature_y = page_height - signature_block_height - bottom_margin
    max_table_height = signature_y - table_start_y - buffer_before_signature

    if row_count * STANDARD_ROW_HEIGHT > max_table_height:
        available_per_row = max_table_height / row_count
        font_size = max(MIN_FONT_SIZE, math.floor(available_per_row * 1.5))
        plan = LayoutPlan(
            mode="shrink",
            font_size=font_size,
            cell_padding=max(MIN_CELL_PADDING, font_size / 5),
            min_row_height=available_per_row,
            signature_y=signature_y,
            max_table_height=max_table_height,
        )
    else:
        plan = LayoutPlan(
            mode="expand",
            font_size=STANDARD_FONT_SIZE,
            cell_padding=STANDARD_CELL_PADDING,
            min_row_height=max_table_height / row_count,
            signature_y=signature_y,
            max_table_height=max_table_height,
        )

    logger.debug(
        "Layout for %d rows: %s mode, font %s, padding %s, row height %.2f",
        row_count, plan.mode, plan.font_size, plan.cell_padding, plan.min_row_height,
    )
    return plan
