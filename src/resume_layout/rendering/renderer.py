"""
Module: rendering.renderer

Purpose:
    Contract between the pagination engine and a visual template. The
    engine treats a renderer as opaque: it mounts a content view, waits
    until the paint is observably complete, reads heights from the exposed
    surface and finally asks for one output per page.

Key Classes:
    - Renderer: Abstract renderer
    - RenderError: Raised by renderers that cannot paint content

Key Functions:
    - wait_until_settled(): Poll a renderer's readiness flag with a deadline

Dependencies:
    - abc (std)
    - tenacity: Readiness polling

Used By:
    - rendering.text_renderer: Concrete Pillow renderer
    - pagination.orchestrator: Drives mount/measure cycles
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from tenacity import RetryError, Retrying, retry_if_result, stop_after_delay, wait_fixed

if TYPE_CHECKING:
    from resume_layout.core.models import ResumeContent
    from .surface import RenderSurface

logger = logging.getLogger(__name__)


class RenderError(Exception):
    """Renderer failed to paint the given content."""
    pass


class Renderer(ABC):
    """
    Abstract measurable renderer.

    One instance represents one mount. Pagination runs against the same
    instance must be serialized by the caller.
    """

    @property
    @abstractmethod
    def version(self) -> str:
        """Identity of the template and its version, used as a cache key part."""

    @property
    @abstractmethod
    def surface(self) -> Optional[RenderSurface]:
        """Painted tree, or None while nothing is attached."""

    @abstractmethod
    def mount(self, content: ResumeContent) -> None:
        """
        Paint ``content``, replacing whatever was painted before.

        Raises:
            RenderError: If the content cannot be painted
        """

    @abstractmethod
    def render_page(self, content: ResumeContent, page_number: int) -> Any:
        """Produce the final output for one page view."""

    def is_settled(self) -> bool:
        """True once the last mount has finished painting."""
        return self.surface is not None

    @property
    def page_dimensions(self) -> Optional[tuple[float, float]]:
        """(width, height) of the pages this renderer paints, if fixed."""
        return None


def wait_until_settled(
    renderer: Renderer,
    *,
    timeout_s: float,
    poll_interval_s: float,
) -> bool:
    """
    Block until the renderer reports its last paint complete.

    Args:
        renderer: Renderer that was just mounted
        timeout_s: Maximum time to wait
        poll_interval_s: Sleep between readiness checks

    Returns:
        True if the renderer settled before the deadline
    """
    polling = Retrying(
        retry=retry_if_result(lambda settled: not settled),
        stop=stop_after_delay(timeout_s),
        wait=wait_fixed(poll_interval_s),
    )
    try:
        return polling(renderer.is_settled)
    except RetryError:
        logger.debug(f"Renderer {renderer.version} did not settle within {timeout_s:.2f}s")
        return False
