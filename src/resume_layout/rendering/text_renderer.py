"""
Module: rendering.text_renderer

Purpose:
    Concrete renderer that lays resume content out as word-wrapped text
    using Pillow font metrics. Heights on the exposed surface are real
    measurements of the wrapped text, and render_page() paints a page
    image with the same geometry.

Key Classes:
    - TemplateStyle: Page size, fonts, paddings, gaps, columns and section labels
    - PillowResumeRenderer: Renderer implementation

Dependencies:
    - PIL: Font metrics and page images
    - rendering.surface: Surface tree
    - core.models: Content units

Used By:
    - pagination.orchestrator (as the default measurable renderer)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from PIL import Image, ImageDraw, ImageFont

from resume_layout.core.models import (
    ContentUnit,
    EducationItem,
    ExperienceItem,
    ListEntry,
    ProjectItem,
    ResumeContent,
    SectionKind,
    VISIT_ORDER,
)

from .renderer import RenderError, Renderer
from .surface import RenderSurface, SurfaceElement

if TYPE_CHECKING:
    from resume_layout.pagination.config import PageSize

logger = logging.getLogger(__name__)

DEFAULT_SECTION_LABELS: Dict[SectionKind, str] = {
    SectionKind.PROFILE: "PROFILE",
    SectionKind.SKILLS: "SKILLS",
    SectionKind.EXPERIENCE: "WORK EXPERIENCE",
    SectionKind.PROJECTS: "PROJECTS",
    SectionKind.EDUCATION: "EDUCATION",
    SectionKind.LANGUAGES: "LANGUAGES",
    SectionKind.ACHIEVEMENTS: "ACHIEVEMENTS",
    SectionKind.CERTIFICATIONS: "CERTIFICATIONS",
}

ENTRY_CLASSES: Dict[SectionKind, str] = {
    SectionKind.SKILLS: "skill-item",
    SectionKind.EXPERIENCE: "experience-item",
    SectionKind.PROJECTS: "project-item",
    SectionKind.EDUCATION: "education-item",
    SectionKind.LANGUAGES: "language-item",
    SectionKind.ACHIEVEMENTS: "achievement-item",
    SectionKind.CERTIFICATIONS: "certification-item",
}

BULLET = "• "
INDENT_ATTR = "data-indent"
OFFSET_ATTR = "data-offset-x"
ROW_CLASS = "columns"


@dataclass(frozen=True)
class TemplateStyle:
    """
    Visual template parameters (immutable).

    Attributes:
        name: Template name (part of the renderer version)
        version: Template revision (part of the renderer version)
        page_width: Page width in pixels
        page_height: Page height in pixels
        margin_top: Where the content box starts on a page image
        padding_top: Inner top padding of the .resume box
        padding_bottom: Inner bottom padding of the .resume box
        padding_x: Horizontal inner padding of the .resume box
        name_font_size, title_font_size, heading_font_size, body_font_size: Font sizes (px)
        line_spacing: Line height as a multiple of font size
        section_gap: Space below each section
        heading_gap: Space below each section heading
        entry_gap: Space below each entry
        bullet_indent: Indent of description bullets
        sidebar_sections: Sections painted in a left sidebar (two-column
            template when non-empty)
        sidebar_width: Sidebar width in pixels
        column_gap: Space between sidebar and main column
        labels: Section heading text per section
    """

    name: str = "classic"
    version: str = "1"
    page_width: int = 794
    page_height: int = 1123
    margin_top: int = 20
    padding_top: int = 24
    padding_bottom: int = 24
    padding_x: int = 40
    name_font_size: int = 28
    title_font_size: int = 16
    heading_font_size: int = 15
    body_font_size: int = 12
    line_spacing: float = 1.35
    section_gap: int = 12
    heading_gap: int = 6
    entry_gap: int = 6
    bullet_indent: int = 14
    sidebar_sections: tuple[SectionKind, ...] = ()
    sidebar_width: int = 220
    column_gap: int = 24
    labels: Dict[SectionKind, str] = field(default_factory=lambda: dict(DEFAULT_SECTION_LABELS))

    def __post_init__(self) -> None:
        """Validate style on construction."""
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValueError(f"Page dimensions must be positive: {self.page_width}x{self.page_height}")
        if self.content_width <= 0:
            raise ValueError("Horizontal padding exceeds page width")
        if self.line_spacing < 1.0:
            raise ValueError(f"line_spacing must be >= 1.0: {self.line_spacing}")
        for size in (self.name_font_size, self.title_font_size, self.heading_font_size, self.body_font_size):
            if size <= 0:
                raise ValueError(f"Font sizes must be positive: {size}")
        if SectionKind.HEADER in self.sidebar_sections:
            raise ValueError("The header spans the full width and cannot sit in the sidebar")
        if self.is_two_column and (self.sidebar_width <= 0 or self.main_width <= 0):
            raise ValueError(
                f"Sidebar width {self.sidebar_width}px does not fit a "
                f"{self.content_width}px content box"
            )

    @classmethod
    def for_page(cls, page_size: PageSize, **overrides) -> TemplateStyle:
        """
        Style painting pages of ``page_size``.

        Example:
            >>> TemplateStyle.for_page(LETTER).page_height
            1056
        """
        overrides.setdefault("page_width", page_size.width)
        overrides.setdefault("page_height", page_size.height)
        overrides.setdefault("margin_top", page_size.margin_top)
        return cls(**overrides)

    @property
    def content_width(self) -> int:
        """Width available for text inside the .resume box."""
        return self.page_width - 2 * self.padding_x

    @property
    def is_two_column(self) -> bool:
        return bool(self.sidebar_sections)

    @property
    def main_width(self) -> int:
        """Width of the main column (the whole content box in one column)."""
        if not self.is_two_column:
            return self.content_width
        return self.content_width - self.sidebar_width - self.column_gap

    def width_for(self, kind: SectionKind) -> int:
        if kind in self.sidebar_sections:
            return self.sidebar_width
        return self.main_width

    def line_height(self, font_size: int) -> int:
        return math.ceil(font_size * self.line_spacing)


class PillowResumeRenderer(Renderer):
    """
    Word-wrapping resume renderer backed by Pillow.

    mount() paints synchronously, so the renderer is settled as soon as
    mount() returns.

    Example:
        >>> renderer = PillowResumeRenderer()
        >>> renderer.mount(content)
        >>> renderer.surface.content_box.padding_top
        24
    """

    def __init__(self, style: Optional[TemplateStyle] = None):
        self.style = style or TemplateStyle()
        self._fonts: Dict[int, ImageFont.ImageFont] = {}
        self._surface: Optional[RenderSurface] = None

    # ─────────────────────────────────────────────────────────────────────
    # Renderer contract
    # ─────────────────────────────────────────────────────────────────────

    @property
    def version(self) -> str:
        return f"pillow-{self.style.name}@{self.style.version}"

    @property
    def surface(self) -> Optional[RenderSurface]:
        return self._surface

    @property
    def page_dimensions(self) -> tuple[float, float]:
        return (self.style.page_width, self.style.page_height)

    def mount(self, content: ResumeContent) -> None:
        self._surface = None
        self._surface = self.build_surface(content)
        logger.debug(
            f"Mounted {content.unit_count} units, "
            f"content height {self._surface.content_box.height:.0f}px"
        )

    def render_page(self, content: ResumeContent, page_number: int) -> Image.Image:
        """
        Paint one page view to an image.

        Args:
            content: Page view (already filtered to this page)
            page_number: 1-based page number (for logging)

        Returns:
            RGB image of page_width x page_height
        """
        surface = self.build_surface(content)
        page = Image.new("RGB", (self.style.page_width, self.style.page_height), color="white")
        draw = ImageDraw.Draw(page)
        self._paint(draw, surface.root, self.style.padding_x, self.style.margin_top)

        used = self.style.margin_top + surface.content_box.height
        if used > self.style.page_height:
            logger.warning(
                f"Page {page_number} content overflows the page: "
                f"{used:.0f}px > {self.style.page_height}px"
            )
        return page

    # ─────────────────────────────────────────────────────────────────────
    # Surface construction
    # ─────────────────────────────────────────────────────────────────────

    def build_surface(self, content: ResumeContent) -> RenderSurface:
        """
        Lay out ``content`` and return its measurable surface.

        Two-column styles paint the header across the full width, then a
        ``.columns`` row holding a ``.sidebar`` and a ``.main`` column.

        Raises:
            RenderError: If fonts cannot be loaded or text cannot be measured
        """
        try:
            box = SurfaceElement(
                "div",
                classes=("resume",),
                padding_top=self.style.padding_top,
                padding_bottom=self.style.padding_bottom,
            )
            if content.header is not None:
                box.children.append(self._header_element(content))

            sections = []
            for kind in VISIT_ORDER[1:]:
                units = content.section(kind)
                if units:
                    sections.append((kind, self._section_element(kind, units)))
            if self.style.is_two_column:
                box.children.append(self._columns_element(sections))
            else:
                box.children.extend(section for _, section in sections)
        except (OSError, ValueError) as e:
            raise RenderError(f"Cannot lay out content with template {self.version}: {e}") from e

        _stack(box, self.style)
        root = SurfaceElement("resume-template", children=[box], height=box.height)
        return RenderSurface(root=root)

    def _columns_element(self, sections: List[tuple[SectionKind, SurfaceElement]]) -> SurfaceElement:
        sidebar = SurfaceElement(
            "aside",
            classes=("sidebar",),
            children=[el for kind, el in sections if kind in self.style.sidebar_sections],
        )
        main = SurfaceElement(
            "div",
            classes=("main",),
            attrs={OFFSET_ATTR: str(self.style.sidebar_width + self.style.column_gap)},
            children=[el for kind, el in sections if kind not in self.style.sidebar_sections],
        )
        return SurfaceElement("div", classes=(ROW_CLASS,), children=[sidebar, main])

    def _header_element(self, content: ResumeContent) -> SurfaceElement:
        header = content.header
        children = []
        if header.name:
            children.append(self._text("h1", ("name",), header.name, self.style.name_font_size))
        if header.title:
            children.append(self._text("div", ("title",), header.title, self.style.title_font_size))
        contact = " | ".join(v for v in header.contact.values() if v)
        if contact:
            children.append(self._text("div", ("contact",), contact, self.style.body_font_size))
        return SurfaceElement(
            "header",
            classes=("header",),
            padding_bottom=self.style.section_gap,
            children=children,
        )

    def _section_element(self, kind: SectionKind, units: List[ContentUnit]) -> SurfaceElement:
        width = self.style.width_for(kind)
        label = self.style.labels.get(kind, kind.value.upper())
        title = self._text(
            "h2",
            ("section-title",),
            label,
            self.style.heading_font_size,
            padding_bottom=self.style.heading_gap,
            width=width,
        )
        section = SurfaceElement(
            "section",
            classes=("section", f"{kind.value}-section"),
            attrs={"data-section": kind.value},
            padding_bottom=self.style.section_gap,
            children=[title],
        )

        if kind is SectionKind.PROFILE:
            section.children.append(
                self._text("p", ("profile-text",), units[0].text, self.style.body_font_size, width=width)
            )
            return section

        entries = [self._entry_element(kind, i, unit, width) for i, unit in enumerate(units)]
        if kind.is_list:
            section.children.append(
                SurfaceElement("div", classes=(f"{kind.value}-list",), children=entries)
            )
        else:
            section.children.extend(entries)
        return section

    def _entry_element(
        self, kind: SectionKind, position: int, unit: ContentUnit, width: int
    ) -> SurfaceElement:
        body = self.style.body_font_size
        entry = SurfaceElement(
            "div",
            classes=("entry", ENTRY_CLASSES[kind]),
            attrs={"data-entry-index": str(position)},
            padding_bottom=self.style.entry_gap,
        )

        if isinstance(unit, ListEntry):
            entry.lines = tuple(self.wrap(BULLET + unit.text, body, width))
            entry.font_size = body
        elif isinstance(unit, ExperienceItem):
            heading = " | ".join(p for p in (unit.position, unit.company) if p)
            entry.children.append(self._text("h3", ("entry-title",), heading, body + 1, width=width))
            dates = _date_range(unit.start_date, unit.end_date)
            if dates:
                entry.children.append(self._text("div", ("entry-dates",), dates, body - 1, width=width))
            for bullet in unit.description:
                entry.children.append(self._bullet(bullet, width))
        elif isinstance(unit, ProjectItem):
            entry.children.append(self._text("h3", ("entry-title",), unit.name, body + 1, width=width))
            if unit.description:
                entry.children.append(self._text("p", ("entry-text",), unit.description, body, width=width))
        elif isinstance(unit, EducationItem):
            heading = " | ".join(p for p in (unit.degree, unit.institution) if p)
            entry.children.append(self._text("h3", ("entry-title",), heading, body + 1, width=width))
            dates = _date_range(unit.start_date, unit.end_date)
            if dates:
                entry.children.append(self._text("div", ("entry-dates",), dates, body - 1, width=width))
        else:
            raise RenderError(f"Unsupported unit for {kind.value}: {type(unit).__name__}")
        return entry

    def _text(
        self,
        tag: str,
        classes: tuple[str, ...],
        text: str,
        font_size: int,
        *,
        padding_bottom: float = 0,
        width: Optional[int] = None,
    ) -> SurfaceElement:
        lines = self.wrap(text, font_size, width or self.style.content_width)
        return SurfaceElement(
            tag,
            classes=classes,
            lines=tuple(lines),
            font_size=font_size,
            padding_bottom=padding_bottom,
        )

    def _bullet(self, text: str, width: int) -> SurfaceElement:
        indent = self.style.bullet_indent
        el = self._text(
            "li",
            ("bullet",),
            BULLET + text,
            self.style.body_font_size,
            width=width - indent,
        )
        el.attrs[INDENT_ATTR] = str(indent)
        return el

    # ─────────────────────────────────────────────────────────────────────
    # Text metrics
    # ─────────────────────────────────────────────────────────────────────

    def font(self, size: int) -> ImageFont.ImageFont:
        if size not in self._fonts:
            self._fonts[size] = _load_font(size)
        return self._fonts[size]

    def wrap(self, text: str, font_size: int, width: int) -> List[str]:
        """
        Greedy word wrap using real glyph advances.

        A single word wider than ``width`` gets a line of its own.
        Empty text yields no lines.
        """
        font = self.font(font_size)
        lines: List[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}" if current else word
            if not current or font.getlength(candidate) <= width:
                current = candidate
            else:
                lines.append(current)
                current = word
        if current:
            lines.append(current)
        return lines

    def _paint(self, draw: ImageDraw.ImageDraw, el: SurfaceElement, x: float, y: float) -> None:
        cursor = y + el.padding_top
        if el.lines:
            font = self.font(el.font_size)
            indent = float(el.attrs.get(INDENT_ATTR, 0))
            for line in el.lines:
                draw.text((x + indent, cursor), line, fill="black", font=font)
                cursor += self.style.line_height(el.font_size)
        row = el.has_class(ROW_CLASS)
        for child in el.children:
            self._paint(draw, child, x + float(child.attrs.get(OFFSET_ATTR, 0)), cursor)
            if not row:
                cursor += child.height


def _stack(el: SurfaceElement, style: TemplateStyle) -> float:
    """Compute outer heights bottom-up (block layout, no margins collapse)."""
    own = len(el.lines) * style.line_height(el.font_size) if el.lines else 0
    heights = [_stack(child, style) for child in el.children]
    # Columns of a row sit side by side
    children = max(heights, default=0) if el.has_class(ROW_CLASS) else sum(heights)
    el.height = el.padding_top + own + children + el.padding_bottom
    return el.height


def _date_range(start: str, end: str) -> str:
    if start and end:
        return f"{start} - {end}"
    return start or end


def _load_font(size: int) -> ImageFont.ImageFont:
    """
    Load a regular text font.

    Falls back to Pillow's bundled default font if no TrueType font is
    installed.

    Args:
        size: Font size in pixels

    Returns:
        Font object
    """
    font_options = [
        "DejaVuSans.ttf",
        "arial.ttf",
        "Arial.ttf",
        "LiberationSans-Regular.ttf",
    ]

    for font_name in font_options:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.debug(f"Could not load TrueType font at {size}px, using default")
    return ImageFont.load_default(size=size)
