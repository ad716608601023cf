"""
Module: rendering

Purpose:
    Renderer contract and measurable render surfaces. The pagination
    engine only ever reads heights and padding from a surface; painting
    and line-wrapping belong to the renderer.

Key Classes:
    - Renderer: Abstract renderer contract
    - RenderSurface, SurfaceElement: Measurable painted tree
    - PillowResumeRenderer, TemplateStyle: Concrete text renderer

Key Functions:
    - wait_until_settled(): Readiness polling with a deadline

Dependencies:
    - PIL: Text metrics and page images

Used By:
    - resume_layout.pagination
"""

from .renderer import Renderer, RenderError, wait_until_settled
from .surface import RenderSurface, SurfaceElement
from .text_renderer import PillowResumeRenderer, TemplateStyle

__all__ = [
    "Renderer",
    "RenderError",
    "wait_until_settled",
    "RenderSurface",
    "SurfaceElement",
    "PillowResumeRenderer",
    "TemplateStyle",
]
