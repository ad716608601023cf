"""
Module: pagination.orchestrator

Purpose:
    Drive the measure/assign loop until every content unit has a page.
    Init → Measure&Assign(p=1) → Iterate(p=2, 3, ...) → Finalize

Key Functions:
    - paginate_resume(): Convenience entry point

Key Classes:
    - PaginationOrchestrator: Bounded pagination loop over one renderer
    - PaginationError: Non-convergence (fatal to the request)
    - RendererNotReadyError: Measurement never became available

Concurrency:
    One run at a time per orchestrator; a re-entrant paginate() call
    raises RuntimeError. Callers sharing a renderer between orchestrators
    must serialize runs themselves.

Dependencies:
    - rendering.renderer: Renderer, wait_until_settled
    - tenacity: Measurement retry with exponential backoff
    - pagination.probe, budget, assigner, page_filter, cache

Used By:
    - Callers holding a mounted renderer and a ResumeContent
"""

from __future__ import annotations

import logging
import time
from typing import Any, List, Optional

from tenacity import (
    RetryError,
    Retrying,
    before_sleep_log,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from resume_layout.core.models import ResumeContent
from resume_layout.rendering.renderer import Renderer, wait_until_settled

from .assigner import assign_page
from .budget import calculate_budget
from .cache import PaginationCache
from .config import LayoutConfig
from .models import Measurements, PageView, PaginationResult
from .page_filter import has_pending_content, remaining_view, split_pages, total_pages
from .probe import GeometryProbe

logger = logging.getLogger(__name__)


class PaginationError(Exception):
    """
    Pagination could not complete.

    Attributes:
        content: The content as annotated when the run stopped
        iterations: Passes performed before giving up
    """

    def __init__(self, message: str, content: Optional[ResumeContent] = None, iterations: int = 0):
        super().__init__(message)
        self.content = content
        self.iterations = iterations


class RendererNotReadyError(PaginationError):
    """The renderer never exposed a measurable surface."""
    pass


class PaginationOrchestrator:
    """
    Paginate resume content against a measurable renderer.

    Attributes:
        renderer: Renderer the content is mounted on
        config: Layout configuration
        cache: Optional cache of previous results
        probe: Geometry probe used for measurement

    Example:
        >>> orchestrator = PaginationOrchestrator(PillowResumeRenderer())
        >>> result = orchestrator.paginate(content)
        >>> print(f"{result.total_pages} pages after {result.iterations} passes")
    """

    def __init__(
        self,
        renderer: Renderer,
        config: Optional[LayoutConfig] = None,
        cache: Optional[PaginationCache] = None,
        probe: Optional[GeometryProbe] = None,
    ):
        self.renderer = renderer
        self.config = config or LayoutConfig()
        self.cache = cache
        self.probe = probe or GeometryProbe()
        self._running = False

    def paginate(self, content: ResumeContent) -> PaginationResult:
        """
        Assign every unit of ``content`` to a page and render each page.

        The content is annotated in place and returned in the result.

        Args:
            content: Content to paginate (mutated)

        Returns:
            PaginationResult with page views and renderer outputs

        Raises:
            PaginationError: If the iteration ceiling is reached
            RendererNotReadyError: If measurement never becomes available
            RuntimeError: If called while a run is already in progress
            Exception: Renderer failures propagate unchanged
        """
        if self._running:
            raise RuntimeError("Pagination already in progress on this orchestrator")

        self._running = True
        try:
            return self._run(content)
        finally:
            self._running = False

    # ─────────────────────────────────────────────────────────────────────
    # Pipeline
    # ─────────────────────────────────────────────────────────────────────

    def _run(self, content: ResumeContent) -> PaginationResult:
        start_time = time.perf_counter()
        key = None

        if self.cache is not None:
            key = self.cache.key(content, self.renderer.version, self.config)
            cached = self.cache.get(key)
            if cached is not None:
                content.apply_annotations(cached)
                logger.info(f"Reusing cached pagination ({total_pages(content)} pages)")
                pages, outputs = self._finalize(content)
                return PaginationResult(
                    content=content,
                    pages=pages,
                    outputs=outputs,
                    iterations=0,
                    from_cache=True,
                    elapsed_s=time.perf_counter() - start_time,
                )

        logger.info(f"Paginating {content.unit_count} units on {self.config.page_size.name}")

        # Init: clean slate, full unfiltered mount
        content.clear_page_numbers()
        self._mount(content)

        warnings: List[str] = []
        mismatch = self._page_size_mismatch()
        if mismatch is not None:
            logger.warning(mismatch)
            warnings.append(mismatch)

        iterations = 0
        page = 1
        while True:
            if iterations >= self.config.max_iterations:
                raise PaginationError(
                    f"Pagination did not converge within {self.config.max_iterations} passes "
                    f"(content still pending at page {page})",
                    content=content,
                    iterations=iterations,
                )
            iterations += 1

            view = remaining_view(content, page)
            if page > 1:
                self._mount(view.content)

            measurements = self._measure(view, content, iterations)
            padding = self.probe.measure_inner_padding(self.renderer)
            budget = calculate_budget(self.config, padding)
            assignment = assign_page(content, measurements, page, budget, self.config)
            warnings.extend(assignment.warnings)

            if not has_pending_content(content, page + 1):
                break
            page += 1

        pages, outputs = self._finalize(content)

        if self.cache is not None and key is not None:
            self.cache.put(key, content.annotations())

        elapsed = time.perf_counter() - start_time
        logger.info(f"Paginated onto {len(pages)} pages in {iterations} passes ({elapsed:.3f}s)")

        return PaginationResult(
            content=content,
            pages=pages,
            outputs=outputs,
            iterations=iterations,
            warnings=tuple(warnings),
            elapsed_s=elapsed,
        )

    def _mount(self, content: ResumeContent) -> None:
        self.renderer.mount(content)
        settled = wait_until_settled(
            self.renderer,
            timeout_s=self.config.settle_timeout_s,
            poll_interval_s=self.config.settle_poll_interval_s,
        )
        if not settled:
            logger.warning(
                f"Renderer {self.renderer.version} not settled after "
                f"{self.config.settle_timeout_s:.2f}s, measuring anyway"
            )

    def _page_size_mismatch(self) -> Optional[str]:
        """Describe a renderer painting pages of a different size than the budget assumes."""
        dimensions = self.renderer.page_dimensions
        if dimensions is None:
            return None
        page = self.config.page_size
        width, height = dimensions
        if (width, height) == (page.width, page.height):
            return None
        return (
            f"Renderer {self.renderer.version} paints {width:.0f}x{height:.0f}px pages "
            f"but {page.name} is {page.width:.0f}x{page.height:.0f}px"
        )

    def _measure(self, view: PageView, content: ResumeContent, iterations: int) -> Measurements:
        """Measure the mounted view, backing off while no surface is available."""
        attempts = self.config.measure_retries + 1
        retrying = Retrying(
            retry=retry_if_result(lambda measured: measured is None),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=self.config.settle_poll_interval_s),
            before_sleep=before_sleep_log(logger, logging.DEBUG),
        )
        try:
            return retrying(self.probe.measure, self.renderer, view)
        except RetryError:
            raise RendererNotReadyError(
                f"Renderer {self.renderer.version} exposed no surface after {attempts} attempts",
                content=content,
                iterations=iterations,
            ) from None

    def _finalize(self, content: ResumeContent) -> tuple[tuple[PageView, ...], tuple[Any, ...]]:
        # Empty content still yields one (blank) page
        page_count = max(1, total_pages(content))
        pages = tuple(split_pages(content, page_count))
        outputs = tuple(self.renderer.render_page(view.content, view.page_number) for view in pages)
        return pages, outputs


def paginate_resume(
    content: ResumeContent,
    renderer: Renderer,
    config: Optional[LayoutConfig] = None,
    *,
    cache: Optional[PaginationCache] = None,
    fallback_to_single_page: bool = False,
) -> PaginationResult:
    """
    Paginate content with a one-off orchestrator.

    Args:
        content: Content to paginate (mutated)
        renderer: Measurable renderer
        config: Layout configuration (defaults to LayoutConfig())
        cache: Optional result cache
        fallback_to_single_page: On non-convergence, put everything on
            page 1 and render it unpaginated instead of raising

    Returns:
        PaginationResult

    Raises:
        PaginationError: On non-convergence unless fallback is enabled
    """
    orchestrator = PaginationOrchestrator(renderer, config, cache=cache)
    try:
        return orchestrator.paginate(content)
    except RendererNotReadyError:
        raise
    except PaginationError as e:
        if not fallback_to_single_page:
            raise
        failure = e
        logger.warning(f"{e}; rendering as a single unpaginated page")

    content.clear_page_numbers()
    for _, _, unit in content.units():
        unit.assign(1)
    pages = tuple(split_pages(content, 1))
    outputs = tuple(renderer.render_page(view.content, view.page_number) for view in pages)
    return PaginationResult(
        content=content,
        pages=pages,
        outputs=outputs,
        iterations=failure.iterations,
        warnings=(str(failure),),
    )
