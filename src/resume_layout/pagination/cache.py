"""
Module: pagination.cache

Purpose:
    Caching of computed page assignments. Skips measurement entirely when
    the same content is paginated again by the same renderer version with
    the same layout configuration.

Key Classes:
    - CacheKey: (content hash, renderer version, config fingerprint)
    - PaginationCache: LRU cache of page annotations

Dependencies:
    - core.models: ResumeContent (content hashing)

Used By:
    - pagination.orchestrator: Lookup before, store after each run
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from resume_layout.core.models import ResumeContent

from .config import LayoutConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheKey:
    """Identity of one pagination run."""

    content_hash: str
    renderer_version: str
    config_key: str

    def __str__(self) -> str:
        return f"{self.content_hash[:12]}@{self.renderer_version}"


class PaginationCache:
    """
    LRU cache for page annotations.

    Stored values are the ``ResumeContent.annotations()`` dict, copied in
    and out so callers cannot mutate cached entries.

    Attributes:
        max_entries: Maximum number of cached runs

    Example:
        >>> cache = PaginationCache(max_entries=32)
        >>> key = cache.key(content, renderer.version, config)
        >>> cache.put(key, content.annotations())
        >>> cache.get(key) == content.annotations()
        True
    """

    def __init__(self, max_entries: int = 64):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1: {max_entries}")
        self._cache: Dict[CacheKey, Dict[str, Any]] = {}
        self._max_entries = max_entries
        self._access_order: list = []  # For LRU eviction

    @staticmethod
    def key(content: ResumeContent, renderer_version: str, config: LayoutConfig) -> CacheKey:
        return CacheKey(
            content_hash=content.content_hash(),
            renderer_version=renderer_version,
            config_key=config.cache_key,
        )

    def get(self, key: CacheKey) -> Optional[Dict[str, Any]]:
        """Return cached annotations, or None on a miss."""
        if key not in self._cache:
            logger.debug(f"Cache MISS: {key}")
            return None

        # Move to end (most recently used)
        self._access_order.remove(key)
        self._access_order.append(key)
        logger.debug(f"Cache HIT: {key}")
        return copy.deepcopy(self._cache[key])

    def put(self, key: CacheKey, annotations: Dict[str, Any]) -> None:
        if key in self._cache:
            self._access_order.remove(key)
        elif len(self._cache) >= self._max_entries:
            oldest = self._access_order.pop(0)
            del self._cache[oldest]
            logger.debug(f"Cache EVICT: {oldest}")

        self._cache[key] = copy.deepcopy(annotations)
        self._access_order.append(key)

    def invalidate(
        self,
        *,
        content_hash: Optional[str] = None,
        renderer_version: Optional[str] = None,
    ) -> int:
        """
        Drop entries matching a content hash and/or renderer version.

        With no arguments nothing is dropped; use clear() for that.

        Returns:
            Number of entries removed
        """
        if content_hash is None and renderer_version is None:
            return 0

        doomed = [
            key for key in self._cache
            if (content_hash is None or key.content_hash == content_hash)
            and (renderer_version is None or key.renderer_version == renderer_version)
        ]
        for key in doomed:
            del self._cache[key]
            self._access_order.remove(key)

        if doomed:
            logger.info(f"Invalidated {len(doomed)} cached pagination(s)")
        return len(doomed)

    def clear(self) -> None:
        self._cache.clear()
        self._access_order.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache
