"""
Module: pagination.budget

Purpose:
    Compute the usable vertical space per page from the fixed page size,
    the outer margins and the renderer's measured inner padding.

Key Functions:
    - calculate_budget(): Available height and accumulator start offset

Dependencies:
    - pagination.config: LayoutConfig
    - pagination.models: InnerPadding

Used By:
    - pagination.orchestrator: Once per pass (padding is re-measured)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import LayoutConfig
from .models import InnerPadding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageBudget:
    """
    Vertical space for one page.

    Attributes:
        available_height: Height the accumulator may reach (fit test bound)
        start_offset: Initial accumulator value for every page
    """

    available_height: float
    start_offset: float

    @property
    def is_usable(self) -> bool:
        return self.available_height > self.start_offset


def calculate_budget(config: LayoutConfig, padding: InnerPadding) -> PageBudget:
    """
    Calculate the page budget.

    available = page height - top/bottom margin - inner top/bottom padding
    - safety margin. The accumulator starts at top margin + inner top
    padding, so both are charged against ``available`` a second time.

    Args:
        config: Layout configuration (page size, safety margin)
        padding: Inner padding measured on the renderer's content box

    Returns:
        PageBudget

    Example:
        >>> budget = calculate_budget(LayoutConfig(), InnerPadding(top=24, bottom=24))
        >>> budget.available_height, budget.start_offset
        (1025.0, 44.0)
    """
    size = config.page_size
    available = (
        size.height
        - size.margin_top
        - size.margin_bottom
        - padding.top
        - padding.bottom
        - config.safety_margin
    )
    start = size.margin_top + padding.top
    budget = PageBudget(available_height=float(available), start_offset=float(start))

    if not budget.is_usable:
        logger.warning(
            f"Page budget unusable: available {available}px <= start offset {start}px "
            f"({size.name}, padding {padding.top}/{padding.bottom})"
        )
    return budget
