"""
Module: pagination.assigner

Purpose:
    First-fit page assignment for one target page. Walks the sections in
    fixed visitation order, decides which fragments fit on page p and
    which spill to p+1, and writes page numbers onto the content units.

Key Functions:
    - assign_page(): Fill one page
    - fits_on_page(): Fit test
    - estimate_batch_height(): Proportional list-section estimate
    - would_be_orphaned(): Heading-without-first-entry check
    - uses_two_columns(): Column mode for one pass

Rules:
    - Units on a page before p are frozen and never revisited
    - Header and profile are page-1-only and indivisible
    - Entries are indivisible; a section never places an entry after one
      that spilled
    - Content order inside a section is always preserved
    - Two-column templates fill sidebar and main column independently;
      full-width blocks on page 1 are charged to both

Dependencies:
    - pagination.config: LayoutConfig, ListPlacement, ColumnLayout
    - pagination.budget: PageBudget
    - pagination.models: Column, Measurements, PageAssignment, UnitKey

Used By:
    - pagination.orchestrator: One call per pass
"""

from __future__ import annotations

import logging
from typing import Dict, List

from resume_layout.core.models import ContentUnit, ResumeContent, SectionKind, VISIT_ORDER

from .budget import PageBudget
from .config import ColumnLayout, LayoutConfig, ListPlacement
from .models import Column, Measurements, PageAssignment, UnitKey

logger = logging.getLogger(__name__)


def fits_on_page(current_height: float, item_height: float, available_height: float) -> bool:
    """Strict first-fit test: ``current + item <= available``."""
    return current_height + item_height <= available_height


def estimate_batch_height(container_height: float, total_items: int, candidate_count: int) -> float:
    """
    Approximate the height of ``candidate_count`` list entries.

    Uses the container height divided evenly over its items, so per-item
    differences (long skill names wrapping, ...) are averaged out.

    Example:
        >>> estimate_batch_height(500, 10, 4)
        200.0
    """
    if total_items <= 0:
        return 0.0
    return container_height / total_items * candidate_count


def would_be_orphaned(
    heading_height: float,
    first_item_height: float,
    current_height: float,
    available_height: float,
) -> bool:
    """True if a section heading fits on the page but its first entry does not."""
    if not fits_on_page(current_height, heading_height, available_height):
        return False
    return not fits_on_page(current_height + heading_height, first_item_height, available_height)


def uses_two_columns(measurements: Measurements, config: LayoutConfig) -> bool:
    """Whether sidebar and main column are filled independently."""
    if config.columns is ColumnLayout.AUTO:
        return measurements.has_sidebar
    return config.columns is ColumnLayout.TWO_COLUMN


class _PagePass:
    """Mutable state of a single assign_page() call."""

    def __init__(
        self,
        content: ResumeContent,
        measurements: Measurements,
        page_number: int,
        budget: PageBudget,
        config: LayoutConfig,
    ):
        self.content = content
        self.measurements = measurements
        self.page = page_number
        self.budget = budget
        self.config = config
        self.two_column = uses_two_columns(measurements, config)
        self.heights: Dict[Column, float] = {
            Column.MAIN: budget.start_offset,
            Column.SIDEBAR: budget.start_offset,
        }
        self.placed_in: Dict[Column, int] = {Column.MAIN: 0, Column.SIDEBAR: 0}
        self.column = Column.MAIN
        self.placed: List[UnitKey] = []
        self.deferred: List[UnitKey] = []
        self.warnings: List[str] = []

    @property
    def available(self) -> float:
        return self.budget.available_height

    @property
    def height(self) -> float:
        """Accumulator of the column currently being filled."""
        return self.heights[self.column]

    @height.setter
    def height(self, value: float) -> None:
        self.heights[self.column] = value

    @property
    def page_is_empty(self) -> bool:
        return not self.placed_in[self.column]

    def column_for(self, kind: SectionKind) -> Column:
        if not self.two_column:
            return Column.MAIN
        column = self.measurements.column(kind)
        if column is Column.FULL_WIDTH and not kind.is_page_one_only:
            return Column.MAIN
        return column

    def place(self, key: UnitKey, unit: ContentUnit) -> None:
        unit.assign(self.page)
        self.placed.append(key)
        self.placed_in[self.column] += 1

    def defer(self, key: UnitKey, unit: ContentUnit) -> None:
        unit.assign(self.page + 1)
        self.deferred.append(key)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def candidates(self, kind: SectionKind) -> List[tuple[int, ContentUnit]]:
        """Units not frozen on an earlier page."""
        return [
            (index, unit)
            for index, unit in enumerate(self.content.section(kind))
            if unit.page_number is None or unit.page_number >= self.page
        ]

    def rendered_count(self, kind: SectionKind, candidate_count: int) -> int:
        """Item count the section container was measured with."""
        return len(self.measurements.entry_heights(kind)) or candidate_count

    def item_height(self, kind: SectionKind, index: int, candidate_count: int) -> float:
        entries = self.measurements.entry_heights(kind)
        if entries:
            return entries.get(index, 0.0)
        return estimate_batch_height(
            self.measurements.section_height(kind), self.rendered_count(kind, candidate_count), 1
        )

    # ─────────────────────────────────────────────────────────────────────
    # Section strategies
    # ─────────────────────────────────────────────────────────────────────

    def place_page_one_block(self, kind: SectionKind) -> None:
        units = self.content.section(kind)
        if not units:
            return
        unit = units[0]
        height = self.measurements.section_height(kind)

        if self.column is Column.FULL_WIDTH:
            # Spans both columns: charged from the lower one, on both
            start = max(self.heights.values())
            if not fits_on_page(start, height, self.available):
                self.warn(
                    f"{kind.value} ({height:.0f}px) overflows page 1 "
                    f"(at {start:.0f}px of {self.available:.0f}px)"
                )
            unit.assign(self.page)
            self.placed.append(UnitKey(kind))
            for column in self.heights:
                self.heights[column] = start + height
                self.placed_in[column] += 1
            return

        if not fits_on_page(self.height, height, self.available):
            self.warn(
                f"{kind.value} ({height:.0f}px) overflows page 1 "
                f"(at {self.height:.0f}px of {self.available:.0f}px)"
            )
        self.place(UnitKey(kind), unit)
        self.height += height

    def place_batch(self, kind: SectionKind) -> None:
        candidates = self.candidates(kind)
        if not candidates:
            return
        container = self.measurements.section_height(kind)
        estimate = estimate_batch_height(
            container, self.rendered_count(kind, len(candidates)), len(candidates)
        )
        keys = [(UnitKey(kind, index), unit) for index, unit in candidates]

        if fits_on_page(self.height, estimate, self.available):
            for key, unit in keys:
                self.place(key, unit)
            self.height += estimate
            logger.debug(f"Page {self.page}: {kind.value} batch of {len(keys)} placed ({estimate:.0f}px)")
            return

        if self.config.allow_overflow and self.page_is_empty:
            self.warn(
                f"{kind.value} batch ({estimate:.0f}px) overflows empty page {self.page}"
            )
            for key, unit in keys:
                self.place(key, unit)
            self.height += estimate
            return

        for key, unit in keys:
            self.defer(key, unit)
        logger.debug(
            f"Page {self.page}: {kind.value} batch of {len(keys)} ({estimate:.0f}px) "
            f"deferred to page {self.page + 1}"
        )

    def place_items(self, kind: SectionKind) -> None:
        candidates = self.candidates(kind)
        if not candidates:
            return
        heading = 0.0
        if self.config.keep_heading_with_first_item:
            heading = self.measurements.heading_height(kind)

        closed = False
        first_on_page = True
        for index, unit in candidates:
            key = UnitKey(kind, index)
            if closed:
                self.defer(key, unit)
                continue

            height = self.item_height(kind, index, len(candidates))
            charge = height
            if first_on_page and heading:
                if would_be_orphaned(heading, height, self.height, self.available):
                    logger.debug(f"Page {self.page}: {key} moved with its heading to avoid an orphan")
                charge += heading

            if fits_on_page(self.height, charge, self.available):
                self.place(key, unit)
                self.height += charge
                first_on_page = False
                continue

            # Spilling would meet the same heading on the next empty page
            heading_only_overflow = charge > height and fits_on_page(
                self.height, height, self.available
            )
            if self.page_is_empty and heading_only_overflow:
                self.warn(
                    f"{key} with its {kind.value} heading ({charge:.0f}px) "
                    f"overflows empty page {self.page}"
                )
                self.place(key, unit)
                self.height += charge
                first_on_page = False
                continue

            if self.config.allow_overflow and self.page_is_empty:
                self.warn(f"{key} ({charge:.0f}px) overflows empty page {self.page}")
                self.place(key, unit)
                self.height += charge
                first_on_page = False
                continue

            logger.debug(
                f"Page {self.page}: {key} ({charge:.0f}px) spills at "
                f"{self.height:.0f}/{self.available:.0f}px"
            )
            self.defer(key, unit)
            closed = True

    def run(self) -> PageAssignment:
        start = self.budget.start_offset
        batch_lists = self.config.list_placement is ListPlacement.BATCH

        for kind in VISIT_ORDER:
            self.column = self.column_for(kind)
            if kind.is_page_one_only:
                if self.page == 1:
                    self.place_page_one_block(kind)
            elif kind.is_list and batch_lists:
                self.place_batch(kind)
            else:
                self.place_items(kind)

        column_heights: Dict[Column, float] = {}
        if self.two_column:
            column_heights = dict(self.heights)
            logger.debug(
                f"Page {self.page}: main {self.heights[Column.MAIN]:.0f}px, "
                f"sidebar {self.heights[Column.SIDEBAR]:.0f}px"
            )

        return PageAssignment(
            page_number=self.page,
            start_height=start,
            end_height=max(self.heights.values()),
            placed=tuple(self.placed),
            deferred=tuple(self.deferred),
            warnings=tuple(self.warnings),
            column_heights=column_heights,
        )


def _release_provisional(content: ResumeContent, page_number: int) -> None:
    """Clear assignments beyond the target page so they are decided afresh."""
    for kind, _, unit in content.units():
        if kind.is_page_one_only:
            continue
        if unit.page_number is not None and unit.page_number > page_number:
            unit.clear()


def assign_page(
    content: ResumeContent,
    measurements: Measurements,
    page_number: int,
    budget: PageBudget,
    config: LayoutConfig,
) -> PageAssignment:
    """
    Fill page ``page_number`` first-fit and annotate the content in place.

    Every unit not frozen on an earlier page ends up on ``page_number``
    (placed) or ``page_number + 1`` (deferred). Header and profile are
    only handled on page 1.

    Args:
        content: Content to annotate (mutated)
        measurements: Fragment heights from the current render
        page_number: Target page (1-based)
        budget: Available height and accumulator start
        config: Placement policies

    Returns:
        PageAssignment summarising the pass

    Raises:
        ValueError: If page_number < 1
    """
    if page_number < 1:
        raise ValueError(f"page_number must be >= 1: {page_number}")

    _release_provisional(content, page_number)
    result = _PagePass(content, measurements, page_number, budget, config).run()

    logger.info(
        f"Page {page_number}: placed {len(result.placed)}, deferred {len(result.deferred)}, "
        f"height {result.end_height:.0f}/{budget.available_height:.0f}px"
    )
    return result
