"""
Module: pagination

Purpose:
    Measured pagination of resume content. Renders the content, reads
    real fragment heights, assigns units to pages first-fit and repeats
    page by page until everything is placed.

Key Functions:
    - paginate_resume(): One-shot entry point
    - assign_page(): First-fit assignment for one page
    - calculate_budget(): Usable page height
    - filter_for_page(), split_pages(): Per-page views

Key Classes:
    - PaginationOrchestrator: Bounded measure/assign loop
    - GeometryProbe: Surface measurement
    - LayoutConfig, PageSize, ListPlacement, ColumnLayout: Configuration
    - PaginationCache: Result cache
"""

from .assigner import assign_page, estimate_batch_height, fits_on_page, would_be_orphaned
from .budget import PageBudget, calculate_budget
from .cache import CacheKey, PaginationCache
from .config import A4, LETTER, ColumnLayout, LayoutConfig, ListPlacement, PageSize, get_page_size
from .models import (
    Column,
    InnerPadding,
    MeasuredBlock,
    Measurements,
    PageAssignment,
    PageView,
    PaginationResult,
    UnitKey,
)
from .orchestrator import (
    PaginationError,
    PaginationOrchestrator,
    RendererNotReadyError,
    paginate_resume,
)
from .page_filter import (
    filter_for_page,
    has_pending_content,
    remaining_view,
    split_pages,
    total_pages,
)
from .probe import GeometryProbe

__all__ = [
    # Config
    "A4",
    "LETTER",
    "ColumnLayout",
    "LayoutConfig",
    "ListPlacement",
    "PageSize",
    "get_page_size",
    # Models
    "Column",
    "InnerPadding",
    "MeasuredBlock",
    "Measurements",
    "PageAssignment",
    "PageView",
    "PaginationResult",
    "UnitKey",
    # Stages
    "GeometryProbe",
    "PageBudget",
    "calculate_budget",
    "assign_page",
    "estimate_batch_height",
    "fits_on_page",
    "would_be_orphaned",
    "filter_for_page",
    "has_pending_content",
    "remaining_view",
    "split_pages",
    "total_pages",
    # Orchestration
    "CacheKey",
    "PaginationCache",
    "PaginationError",
    "PaginationOrchestrator",
    "RendererNotReadyError",
    "paginate_resume",
]
