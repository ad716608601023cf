"""
Module: pagination.models

Purpose:
    Data models for pagination.
    Immutable dataclasses for measurements, per-pass assignments, page
    views and the final result.

Key Classes:
    - UnitKey: Address of one content unit (section, index)
    - Column: Horizontal placement of a fragment
    - MeasuredBlock: One measured fragment height
    - Measurements: All fragment heights from one probe pass
    - InnerPadding: Renderer content-box padding
    - PageAssignment: Outcome of assigning one page
    - PageView: Content subset for one page
    - PaginationResult: Final output of the orchestrator

Dependencies:
    - dataclasses (std)
    - core.models: ResumeContent, SectionKind

Used By:
    - pagination.probe: Creates Measurements
    - pagination.assigner: Creates PageAssignment
    - pagination.page_filter: Creates PageView
    - pagination.orchestrator: Creates PaginationResult
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from resume_layout.core.models import ResumeContent, SectionKind


@dataclass(frozen=True)
class UnitKey:
    """Address of a content unit within a ResumeContent."""

    kind: SectionKind
    index: int = 0

    def __str__(self) -> str:
        return f"{self.kind.value}[{self.index}]"


class Column(str, Enum):
    """Where a template places a fragment horizontally."""

    FULL_WIDTH = "full-width"
    MAIN = "main"
    SIDEBAR = "sidebar"


@dataclass(frozen=True)
class MeasuredBlock:
    """
    Height of one rendered fragment.

    Attributes:
        kind: Section the fragment belongs to
        index: Source index of the entry, or None for a whole section
        height: Outer height in pixels
        column: Template column the fragment was painted in
    """

    kind: SectionKind
    index: Optional[int]
    height: float
    column: Column = Column.FULL_WIDTH


@dataclass(frozen=True)
class Measurements:
    """
    Fragment heights read from one render surface.

    Missing fragments read as height 0.

    Example:
        >>> m = Measurements(blocks=(MeasuredBlock(SectionKind.SKILLS, None, 500.0),))
        >>> m.section_height(SectionKind.SKILLS)
        500.0
        >>> m.section_height(SectionKind.EDUCATION)
        0.0
    """

    blocks: tuple[MeasuredBlock, ...] = ()

    def section_height(self, kind: SectionKind) -> float:
        """Height of the whole section (heading included)."""
        return next(
            (b.height for b in self.blocks if b.kind is kind and b.index is None),
            0.0,
        )

    def entry_heights(self, kind: SectionKind) -> Dict[int, float]:
        """Per-entry heights keyed by source index."""
        return {b.index: b.height for b in self.blocks if b.kind is kind and b.index is not None}

    def entry_height(self, kind: SectionKind, index: int) -> float:
        return self.entry_heights(kind).get(index, 0.0)

    def has_entries(self, kind: SectionKind) -> bool:
        return any(b.kind is kind and b.index is not None for b in self.blocks)

    def heading_height(self, kind: SectionKind) -> float:
        """Section height not accounted for by its entries (title, gaps)."""
        entries = self.entry_heights(kind)
        if not entries:
            return 0.0
        return max(0.0, self.section_height(kind) - sum(entries.values()))

    def column(self, kind: SectionKind) -> Column:
        """Column the section was painted in (full width when unknown)."""
        return next(
            (b.column for b in self.blocks if b.kind is kind and b.index is None),
            Column.FULL_WIDTH,
        )

    @property
    def has_sidebar(self) -> bool:
        return any(b.column is Column.SIDEBAR for b in self.blocks)


@dataclass(frozen=True)
class InnerPadding:
    """Top/bottom padding a renderer reserves inside its content box."""

    top: float = 0.0
    bottom: float = 0.0


@dataclass(frozen=True)
class PageAssignment:
    """
    Result of one PageAssigner pass.

    Attributes:
        page_number: Page that was filled
        start_height: Accumulator before the first placement
        end_height: Accumulator after the last placement
        placed: Units given this page
        deferred: Units pushed to the next page
        warnings: Overflow messages
        column_heights: Final accumulator per column (two-column pages only)
    """

    page_number: int
    start_height: float
    end_height: float
    placed: tuple[UnitKey, ...] = ()
    deferred: tuple[UnitKey, ...] = ()
    warnings: tuple[str, ...] = ()
    column_heights: Dict[Column, float] = field(default_factory=dict)

    @property
    def height_used(self) -> float:
        return self.end_height - self.start_height

    @property
    def is_complete(self) -> bool:
        """True when nothing was deferred to the next page."""
        return not self.deferred


@dataclass(frozen=True)
class PageView:
    """
    Content for one page.

    The view's units are the same objects as in the source content.

    Attributes:
        page_number: 1-based page
        content: ResumeContent holding only this page's units
        source_indices: Source index of each unit per section, in order
        continued_sections: Sections that started on an earlier page
    """

    page_number: int
    content: ResumeContent
    source_indices: Dict[SectionKind, tuple[int, ...]] = field(default_factory=dict)
    continued_sections: tuple[SectionKind, ...] = ()

    def source_index(self, kind: SectionKind, position: int) -> Optional[int]:
        """Map a position inside the view back to the source index."""
        indices = self.source_indices.get(kind, ())
        if 0 <= position < len(indices):
            return indices[position]
        return None

    @property
    def is_empty(self) -> bool:
        return self.content.is_empty


@dataclass(frozen=True)
class PaginationResult:
    """
    Final pagination output.

    Attributes:
        content: The annotated content (same object that was paginated)
        pages: One view per page, in order
        outputs: Renderer output per page, in order
        iterations: Measure/assign passes performed (0 on a cache hit)
        warnings: Overflow messages from all passes
        from_cache: Whether page numbers came from the cache
        elapsed_s: Wall-clock duration
    """

    content: ResumeContent
    pages: tuple[PageView, ...]
    outputs: tuple[Any, ...] = ()
    iterations: int = 0
    warnings: tuple[str, ...] = ()
    from_cache: bool = False
    elapsed_s: float = 0.0

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def annotations(self) -> dict[str, Any]:
        """Page numbers in the caller's persisted shape."""
        return self.content.annotations()
