"""
Module: pagination.probe

Purpose:
    Read real pixel heights of rendered fragments from a renderer's
    surface. Sections are located by their heading text, falling back to
    class-name conventions; entries by their data-entry-index attribute,
    falling back to entry class names in paint order.

Key Classes:
    - GeometryProbe: Surface measurement

Policies:
    - Renderer without a surface -> None ("not ready yet, retry")
    - Fragment not found -> height 0 (it always fits)
    - Fragment inside .sidebar or .main -> tagged with that column,
      anything else is full width

Dependencies:
    - rendering.surface: RenderSurface, SurfaceElement
    - pagination.models: Measurements, MeasuredBlock, InnerPadding, PageView

Used By:
    - pagination.orchestrator: One probe per pass
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from resume_layout.core.models import SectionKind, VISIT_ORDER
from resume_layout.rendering.renderer import Renderer
from resume_layout.rendering.surface import RenderSurface, SurfaceElement

from .models import Column, InnerPadding, MeasuredBlock, Measurements, PageView

logger = logging.getLogger(__name__)

ENTRY_INDEX_ATTR = "data-entry-index"

# Container classes of a two-column template
COLUMN_CLASSES: Dict[Column, str] = {
    Column.SIDEBAR: "sidebar",
    Column.MAIN: "main",
}

# Heading text fragments identifying each section (matched case-insensitively)
SECTION_HEADINGS: Dict[SectionKind, Tuple[str, ...]] = {
    SectionKind.PROFILE: ("PROFILE", "SUMMARY"),
    SectionKind.SKILLS: ("SKILLS",),
    SectionKind.EXPERIENCE: ("EXPERIENCE",),
    SectionKind.PROJECTS: ("PROJECTS",),
    SectionKind.EDUCATION: ("EDUCATION",),
    SectionKind.LANGUAGES: ("LANGUAGES",),
    SectionKind.ACHIEVEMENTS: ("ACHIEVEMENTS",),
    SectionKind.CERTIFICATIONS: ("CERTIFICATIONS",),
}

# Class-name fragments tried when no heading matches, in priority order
CLASS_FALLBACKS: Dict[SectionKind, Tuple[str, ...]] = {
    SectionKind.PROFILE: ("profile", "summary"),
    SectionKind.SKILLS: ("skills-container", "skills-grid", "skills-list", "skills"),
    SectionKind.EXPERIENCE: ("experience-section", "experience-list"),
    SectionKind.PROJECTS: ("projects-section", "projects-list"),
    SectionKind.EDUCATION: ("education-section", "education-list"),
    SectionKind.LANGUAGES: ("languages-list", "languages"),
    SectionKind.ACHIEVEMENTS: ("achievements-list", "achievements"),
    SectionKind.CERTIFICATIONS: ("certifications-list", "certifications"),
}

# Class-name fragment of a single entry, used when entries carry no index attribute
ENTRY_CLASS_HINTS: Dict[SectionKind, str] = {
    SectionKind.SKILLS: "skill-item",
    SectionKind.EXPERIENCE: "experience-item",
    SectionKind.PROJECTS: "project-item",
    SectionKind.EDUCATION: "education-item",
    SectionKind.LANGUAGES: "language-item",
    SectionKind.ACHIEVEMENTS: "achievement-item",
    SectionKind.CERTIFICATIONS: "certification-item",
}


class GeometryProbe:
    """
    Measures fragment heights on a mounted renderer.

    Stateless; one instance can be shared across passes.

    Example:
        >>> probe = GeometryProbe()
        >>> measurements = probe.measure(renderer, view)
        >>> if measurements is None:
        ...     pass  # not painted yet, retry later
    """

    def __init__(
        self,
        headings: Optional[Dict[SectionKind, Tuple[str, ...]]] = None,
        class_fallbacks: Optional[Dict[SectionKind, Tuple[str, ...]]] = None,
    ):
        self.headings = headings or SECTION_HEADINGS
        self.class_fallbacks = class_fallbacks or CLASS_FALLBACKS

    def measure(self, renderer: Renderer, view: Optional[PageView] = None) -> Optional[Measurements]:
        """
        Measure every known fragment of the renderer's current surface.

        Args:
            renderer: Mounted renderer
            view: View that was mounted; maps entry positions back to
                source indices (positions are used as-is when omitted)

        Returns:
            Measurements, or None if the renderer has no surface yet
        """
        surface = renderer.surface
        if surface is None:
            logger.debug(f"No surface attached to renderer {renderer.version}")
            return None
        return self.measure_surface(surface, view)

    def measure_surface(self, surface: RenderSurface, view: Optional[PageView] = None) -> Measurements:
        """Measure fragments on an already obtained surface."""
        blocks: List[MeasuredBlock] = []
        columns = self._find_columns(surface)

        header = self._find_header(surface)
        if header is not None:
            blocks.append(
                MeasuredBlock(SectionKind.HEADER, None, header.height, _column_of(header, columns))
            )
        else:
            logger.debug("Header not found, treating as 0px")

        for kind in VISIT_ORDER[1:]:
            section = self._find_section(surface, kind)
            entries: List[Tuple[int, SurfaceElement]] = []
            if kind is not SectionKind.PROFILE:
                entries = self._find_entries(surface, section, kind)

            column = Column.FULL_WIDTH
            if section is not None:
                section_height = section.height
                column = _column_of(section, columns)
            else:
                section_height = sum(el.height for _, el in entries)
                if entries:
                    column = _column_of(entries[0][1], columns)
                else:
                    logger.debug(f"Section {kind.value} not found, treating as 0px")
            blocks.append(MeasuredBlock(kind, None, section_height, column))

            for position, el in entries:
                index = view.source_index(kind, position) if view is not None else position
                if index is None:
                    logger.debug(f"{kind.value} entry at position {position} has no source item")
                    continue
                blocks.append(MeasuredBlock(kind, index, el.height, column))

        return Measurements(blocks=tuple(blocks))

    def measure_inner_padding(self, renderer: Renderer) -> InnerPadding:
        """
        Read top/bottom padding of the renderer's ``.resume`` content box.

        Returns:
            InnerPadding; (0, 0) when the surface or box is unavailable
        """
        surface = renderer.surface
        if surface is None:
            logger.debug("No surface attached, using default padding")
            return InnerPadding()
        box = surface.content_box
        if not box.has_class("resume"):
            logger.debug(".resume element not found, using default padding")
            return InnerPadding()
        return InnerPadding(top=box.padding_top, bottom=box.padding_bottom)

    # ─────────────────────────────────────────────────────────────────────
    # Lookup helpers
    # ─────────────────────────────────────────────────────────────────────

    def _find_header(self, surface: RenderSurface) -> Optional[SurfaceElement]:
        for criteria in ({"tag": "header"}, {"cls": "header"}, {"cls_contains": "header"}):
            found = surface.query_all(**criteria)
            if found:
                return found[0]
        return None

    def _find_section(self, surface: RenderSurface, kind: SectionKind) -> Optional[SurfaceElement]:
        labels = self.headings.get(kind, ())
        for section in surface.root.find_all(lambda el: el.has_class("section") or el.tag == "section"):
            title = section.find(lambda el: el.has_class("section-title"))
            if title is None:
                continue
            text = title.text_content.upper()
            if any(label.upper() in text for label in labels):
                return section

        for fragment in self.class_fallbacks.get(kind, ()):
            found = surface.query_all(cls_contains=fragment)
            if found:
                logger.debug(f"Section {kind.value} located by class fallback '{fragment}'")
                return found[0]
        return None

    def _find_columns(self, surface: RenderSurface) -> Dict[Column, SurfaceElement]:
        """First ``.sidebar`` and ``.main`` containers, when the template has them."""
        columns: Dict[Column, SurfaceElement] = {}
        for column in (Column.SIDEBAR, Column.MAIN):
            found = surface.query_all(cls=COLUMN_CLASSES[column])
            if found:
                columns[column] = found[0]
        return columns

    def _find_entries(
        self,
        surface: RenderSurface,
        section: Optional[SurfaceElement],
        kind: SectionKind,
    ) -> List[Tuple[int, SurfaceElement]]:
        """Return (position, element) pairs for the section's entries."""
        scope = section if section is not None else None

        if scope is not None:
            indexed = surface.query_all(attr=ENTRY_INDEX_ATTR, within=scope)
            if indexed:
                try:
                    return [(int(el.attrs[ENTRY_INDEX_ATTR]), el) for el in indexed]
                except ValueError:
                    logger.debug(
                        f"{kind.value} entries carry a non-numeric {ENTRY_INDEX_ATTR}, "
                        f"falling back to class names"
                    )

        hint = ENTRY_CLASS_HINTS.get(kind)
        if hint is None:
            return []
        by_class = surface.query_all(cls_contains=hint, within=scope)
        return list(enumerate(by_class))


def _column_of(el: SurfaceElement, columns: Dict[Column, SurfaceElement]) -> Column:
    for column, container in columns.items():
        if any(node is el for node in container.iter()):
            return column
    return Column.FULL_WIDTH
