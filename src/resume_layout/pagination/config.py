"""
Module: pagination.config

Purpose:
    Configuration for the pagination engine.
    Defines page size standards, margins and the assignment policies.

Key Classes:
    - PageSize: Fixed page dimensions and outer margins
    - ListPlacement: How list sections are placed
    - ColumnLayout: Single flow or sidebar/main columns
    - LayoutConfig: Immutable engine configuration

Key Functions:
    - get_page_size(): Look up a page size preset by name

Dependencies:
    - dataclasses (std)

Used By:
    - pagination.budget: Available height
    - pagination.assigner: Placement policies
    - pagination.orchestrator: Iteration ceiling, settle/retry timing
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class PageSize:
    """
    Page dimensions and outer margins in CSS pixels (96 DPI).

    Attributes:
        name: Standard name ("A4", "Letter", ...)
        width: Page width in pixels
        height: Page height in pixels
        margin_top: Fixed top margin in pixels
        margin_bottom: Fixed bottom margin in pixels

    Example:
        >>> A4.height - A4.margin_top - A4.margin_bottom
        1073
    """

    name: str
    width: int
    height: int
    margin_top: int = 20
    margin_bottom: int = 30

    def __post_init__(self) -> None:
        """Validate page size on construction."""
        if self.width <= 0:
            raise ValueError(f"width must be positive: {self.width}")
        if self.height <= 0:
            raise ValueError(f"height must be positive: {self.height}")
        if self.margin_top < 0 or self.margin_bottom < 0:
            raise ValueError("Margins must be non-negative")
        if self.margin_top + self.margin_bottom >= self.height:
            raise ValueError("Margins exceed page height")


# 210mm x 297mm and 8.5in x 11in at 96 DPI
A4 = PageSize(name="A4", width=794, height=1123)
LETTER = PageSize(name="Letter", width=816, height=1056)

PAGE_SIZES: dict[str, PageSize] = {
    "a4": A4,
    "letter": LETTER,
}


def get_page_size(name: str) -> PageSize:
    """
    Get a page size preset by name (case-insensitive).

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return PAGE_SIZES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown page size {name!r}. Supported: {sorted(PAGE_SIZES)}"
        ) from None


class ListPlacement(str, Enum):
    """
    Placement policy for list sections (skills, languages, ...).

    BATCH:
        All candidates of a section on a page are estimated as one block
        (container height / item count x candidates) and placed or
        deferred together.
    PER_ITEM:
        Each entry is placed individually using its own measured height,
        like experience/projects/education entries.
    """

    BATCH = "batch"
    PER_ITEM = "per_item"


class ColumnLayout(str, Enum):
    """
    How page height is shared between template columns.

    AUTO:
        Two-column when the template paints any section in a sidebar,
        single column otherwise.
    SINGLE:
        One vertical flow; column tags on the surface are ignored.
    TWO_COLUMN:
        Sidebar and main column fill independently on every page.
        Full-width blocks on page 1 are charged to both columns.
    """

    AUTO = "auto"
    SINGLE = "single"
    TWO_COLUMN = "two_column"


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for pagination (immutable).

    Attributes:
        page_size: Page dimensions and outer margins
        max_iterations: Measure/assign passes allowed before giving up
        safety_margin: Extra pixels held back from every page budget
        list_placement: Placement policy for list sections
        columns: How sidebar and main column share a page
        keep_heading_with_first_item: Charge a section heading to the first
            entry placed on each page so a heading is never orphaned
        allow_overflow: Place a fragment taller than the whole budget on an
            empty page instead of deferring it forever
        settle_timeout_s: Max wait for the renderer to finish painting
        settle_poll_interval_s: Sleep between readiness checks
        measure_retries: Extra measurement attempts while no surface exists

    Example:
        >>> config = LayoutConfig(page_size=LETTER, list_placement=ListPlacement.BATCH)
        >>> config.max_iterations
        10
    """

    page_size: PageSize = field(default=A4)
    max_iterations: int = 10
    safety_margin: int = 0
    list_placement: ListPlacement = ListPlacement.PER_ITEM
    columns: ColumnLayout = ColumnLayout.AUTO
    keep_heading_with_first_item: bool = True
    allow_overflow: bool = False
    settle_timeout_s: float = 2.0
    settle_poll_interval_s: float = 0.05
    measure_retries: int = 3

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1: {self.max_iterations}")
        if self.safety_margin < 0:
            raise ValueError(f"safety_margin must be non-negative: {self.safety_margin}")
        if self.settle_timeout_s < 0:
            raise ValueError(f"settle_timeout_s must be non-negative: {self.settle_timeout_s}")
        if self.settle_poll_interval_s <= 0:
            raise ValueError(
                f"settle_poll_interval_s must be positive: {self.settle_poll_interval_s}"
            )
        if self.measure_retries < 0:
            raise ValueError(f"measure_retries must be non-negative: {self.measure_retries}")

    @property
    def cache_key(self) -> str:
        """Fingerprint of every setting that changes the resulting layout."""
        size = self.page_size
        return (
            f"{size.name}:{size.width}x{size.height}:{size.margin_top}/{size.margin_bottom}"
            f":safety={self.safety_margin}:lists={self.list_placement.value}"
            f":heading={int(self.keep_heading_with_first_item)}"
            f":overflow={int(self.allow_overflow)}"
            f":columns={self.columns.value}"
        )
