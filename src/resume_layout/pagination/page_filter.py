"""
Module: pagination.page_filter

Purpose:
    Project annotated content onto single pages. A page view holds the
    units whose page number equals the page, in original order, together
    with the source index of each unit so measurements and rendered
    output can be traced back to the full document.

Key Functions:
    - filter_for_page(): Units on exactly one page
    - remaining_view(): Units not frozen before a page (measurement render)
    - total_pages(): Highest assigned page
    - has_pending_content(): Whether anything still lands on a page
    - split_pages(): Views for pages 1..N

Dependencies:
    - core.models: ResumeContent, SectionKind
    - pagination.models: PageView

Used By:
    - pagination.orchestrator: Measurement views and final page views
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from resume_layout.core.models import ContentUnit, ResumeContent, SectionKind, VISIT_ORDER

from .models import PageView


def _project(
    content: ResumeContent,
    page_number: int,
    keep: Callable[[SectionKind, ContentUnit], bool],
) -> PageView:
    """Build a view from the units accepted by ``keep``."""
    sections: Dict[SectionKind, List[ContentUnit]] = {}
    source_indices: Dict[SectionKind, tuple[int, ...]] = {}
    continued: List[SectionKind] = []

    for kind in VISIT_ORDER:
        units = content.section(kind)
        selected = [(i, u) for i, u in enumerate(units) if keep(kind, u)]
        sections[kind] = [u for _, u in selected]
        source_indices[kind] = tuple(i for i, _ in selected)

        if selected and not kind.is_page_one_only:
            first_index = selected[0][0]
            if any(
                u.page_number is not None and u.page_number < page_number
                for u in units[:first_index]
            ):
                continued.append(kind)

    header = sections[SectionKind.HEADER]
    profile = sections[SectionKind.PROFILE]
    view_content = ResumeContent(
        header=header[0] if header else None,
        profile=profile[0] if profile else None,
        skills=sections[SectionKind.SKILLS],
        experience=sections[SectionKind.EXPERIENCE],
        projects=sections[SectionKind.PROJECTS],
        education=sections[SectionKind.EDUCATION],
        languages=sections[SectionKind.LANGUAGES],
        achievements=sections[SectionKind.ACHIEVEMENTS],
        certifications=sections[SectionKind.CERTIFICATIONS],
        language=content.language,
    )
    return PageView(
        page_number=page_number,
        content=view_content,
        source_indices=source_indices,
        continued_sections=tuple(continued),
    )


def filter_for_page(content: ResumeContent, page_number: int) -> PageView:
    """
    Return the units assigned to exactly ``page_number``.

    Header and profile appear only in the view of the page they are
    assigned to (page 1). Unassigned units appear in no view.

    Example:
        >>> view = filter_for_page(content, 2)
        >>> [unit.page_number for unit in view.content.experience]
        [2, 2]
    """
    return _project(content, page_number, lambda _, unit: unit.page_number == page_number)


def remaining_view(content: ResumeContent, page_number: int) -> PageView:
    """
    Return the units still competing for ``page_number``.

    These are units that are unassigned or provisionally on
    ``page_number`` or later. Header and profile belong only to the
    page 1 view.
    """
    def keep(kind: SectionKind, unit: ContentUnit) -> bool:
        if kind.is_page_one_only:
            return page_number == 1
        return unit.page_number is None or unit.page_number >= page_number

    return _project(content, page_number, keep)


def total_pages(content: ResumeContent) -> int:
    """Highest assigned page number (0 for unannotated or empty content)."""
    return content.max_page_number()


def has_pending_content(content: ResumeContent, page_number: int) -> bool:
    """True if any unit is assigned to ``page_number`` or still unassigned."""
    return any(
        unit.page_number is None or unit.page_number == page_number
        for _, _, unit in content.units()
    )


def split_pages(content: ResumeContent, page_count: Optional[int] = None) -> List[PageView]:
    """
    Views for every page 1..N.

    Args:
        content: Annotated content
        page_count: Number of pages (defaults to total_pages(content))
    """
    count = total_pages(content) if page_count is None else page_count
    return [filter_for_page(content, page) for page in range(1, count + 1)]
