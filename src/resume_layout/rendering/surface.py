"""
Module: rendering.surface

Purpose:
    The measurable sub-tree a renderer exposes after painting. Elements
    carry only what the pagination engine is allowed to look at: tag,
    classes, attributes, text, height and vertical padding.

Key Classes:
    - SurfaceElement: One node of the painted tree
    - RenderSurface: Root wrapper with the content-box lookup

Dependencies:
    - dataclasses (std)

Used By:
    - rendering.text_renderer: Builds surfaces
    - pagination.probe: Queries surfaces for heights
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional


@dataclass
class SurfaceElement:
    """
    A painted element.

    ``height`` is the full outer height of the element in pixels,
    including its own padding and all of its children.

    Attributes:
        tag: Element tag ("section", "header", "div", ...)
        classes: CSS-like class names
        attrs: Data attributes such as "data-entry-index"
        lines: Text lines painted by this element itself
        font_size: Font size used for ``lines`` (renderer-specific)
        height: Outer height in pixels
        padding_top: Inner top padding in pixels
        padding_bottom: Inner bottom padding in pixels
        children: Child elements in paint order

    Example:
        >>> title = SurfaceElement("h2", classes=("section-title",), lines=("SKILLS",), height=24)
        >>> title.text_content
        'SKILLS'
    """

    tag: str
    classes: tuple[str, ...] = ()
    attrs: dict[str, str] = field(default_factory=dict)
    lines: tuple[str, ...] = ()
    font_size: int = 0
    height: float = 0.0
    padding_top: float = 0.0
    padding_bottom: float = 0.0
    children: List[SurfaceElement] = field(default_factory=list)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def class_contains(self, fragment: str) -> bool:
        """True if any class name contains ``fragment`` (CSS [class*=x])."""
        return any(fragment in cls for cls in self.classes)

    @property
    def text_content(self) -> str:
        """Own lines followed by all descendant text, space separated."""
        parts = [" ".join(self.lines)] if self.lines else []
        parts.extend(child.text_content for child in self.children)
        return " ".join(p for p in parts if p)

    def iter(self) -> Iterator[SurfaceElement]:
        """Pre-order traversal including self."""
        yield self
        for child in self.children:
            yield from child.iter()

    def descendants(self) -> Iterator[SurfaceElement]:
        """Pre-order traversal excluding self."""
        for child in self.children:
            yield from child.iter()

    def find_all(self, predicate: Callable[[SurfaceElement], bool]) -> List[SurfaceElement]:
        return [el for el in self.descendants() if predicate(el)]

    def find(self, predicate: Callable[[SurfaceElement], bool]) -> Optional[SurfaceElement]:
        return next((el for el in self.descendants() if predicate(el)), None)


@dataclass
class RenderSurface:
    """
    Isolated painted tree for one content view.

    Attributes:
        root: Top-level element (the renderer's host element)
    """

    root: SurfaceElement

    @property
    def content_box(self) -> SurfaceElement:
        """Outermost ``.resume`` element, or the root if there is none."""
        if self.root.has_class("resume"):
            return self.root
        return self.root.find(lambda el: el.has_class("resume")) or self.root

    def query_all(
        self,
        *,
        tag: Optional[str] = None,
        cls: Optional[str] = None,
        cls_contains: Optional[str] = None,
        attr: Optional[str] = None,
        within: Optional[SurfaceElement] = None,
    ) -> List[SurfaceElement]:
        """
        Find elements matching every given criterion, in paint order.

        Args:
            tag: Exact tag name
            cls: Exact class name
            cls_contains: Substring of any class name
            attr: Attribute that must be present
            within: Search below this element instead of the root
        """
        def matches(el: SurfaceElement) -> bool:
            if tag is not None and el.tag != tag:
                return False
            if cls is not None and not el.has_class(cls):
                return False
            if cls_contains is not None and not el.class_contains(cls_contains):
                return False
            if attr is not None and attr not in el.attrs:
                return False
            return True

        scope = within if within is not None else self.root
        return scope.find_all(matches)
