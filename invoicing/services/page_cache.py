"""
Rendered-page cache for the dashboard listing views.

Entries are keyed by (path, variant) so one path can hold several rendered
variants (search query, page number). Form actions drop a whole path with
`revalidate_path` after they change the underlying rows.
"""
from __future__ import annotations

from threading import Lock
from typing import Any, Callable, Dict, Tuple
import logging

logger = logging.getLogger(__name__)


class PageCache:
    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._entries: Dict[Tuple[str, str], Any] = {}
        # bumped by revalidate_path (per path) and clear (all paths); a render
        # that straddles a bump is returned but not stored
        self._generations: Dict[str, int] = {}
        self._epoch = 0
        self._lock = Lock()
        self.hits = 0
        self.misses = 0
        self.revalidations = 0

    def get_or_render(self, path: str, variant: str, render: Callable[[], Any]) -> Any:
        key = (path, variant)
        with self._lock:
            if self.enabled and key in self._entries:
                self.hits += 1
                return self._entries[key]
            generation = (self._epoch, self._generations.get(path, 0))
        value = render()
        with self._lock:
            self.misses += 1
            if self.enabled and (self._epoch, self._generations.get(path, 0)) == generation:
                self._entries[key] = value
        return value

    def revalidate_path(self, path: str) -> int:
        """Drop every cached variant of `path`; returns how many were dropped."""
        with self._lock:
            stale = [k for k in self._entries if k[0] == path]
            for k in stale:
                del self._entries[k]
            self._generations[path] = self._generations.get(path, 0) + 1
            self.revalidations += 1
        logger.debug("revalidated %s (%d entries)", path, len(stale))
        return len(stale)

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._epoch += 1

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "enabled": self.enabled,
                "entries": len(self._entries),
                "hits": self.hits,
                "misses": self.misses,
                "revalidations": self.revalidations,
            }


page_cache = PageCache()


def revalidate_path(path: str) -> int:
    return page_cache.revalidate_path(path)
