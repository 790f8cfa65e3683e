"""
In-memory content cache with passive time-based expiry.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

from shared.config import get_config
from shared.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


@dataclass(frozen=True)
class CacheEntry:
    """Cached page content and the clock reading it was stored at."""

    content: Any
    stored_at: float


class ContentCache:
    """Page content keyed by page name and language.

    Entries older than ``max_age`` seconds are treated as missing on read.
    Nothing is evicted: an expired entry stays until the next ``put`` for
    the same key overwrites it.
    """

    def __init__(
        self,
        max_age: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.max_age = get_config().cache_max_age_seconds if max_age is None else max_age
        self.clock = clock
        self.metrics = metrics
        self.logger = get_logger("wurd.cache")
        self._entries: Dict[str, CacheEntry] = {}

    def _make_key(self, page: str, language: Optional[str]) -> str:
        """Generate cache key."""
        return json.dumps([page, language], ensure_ascii=False)

    def put(self, page: str, language: Optional[str], content: Any) -> None:
        """Store content for a page, replacing any previous entry."""
        self._entries[self._make_key(page, language)] = CacheEntry(content=content, stored_at=self.clock())

    def get(self, page: str, language: Optional[str], default: Any = None) -> Optional[Any]:
        """Return fresh content for a page, or ``default`` on a miss or expired entry.

        Pages whose content is ``None`` are cached too; pass a sentinel
        ``default`` to tell them apart from a miss.
        """
        entry = self._entries.get(self._make_key(page, language))
        if entry is None:
            self._record_lookup("miss")
            return default

        age = self.clock() - entry.stored_at
        if age > self.max_age:
            self.logger.debug("Cached content expired", page=page, language=language, age_seconds=round(age, 3))
            self._record_lookup("expired")
            return default

        self._record_lookup("hit")
        return entry.content

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _record_lookup(self, result: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("wurd_cache_lookups_total", result=result)


# Shared by every client that does not bring its own cache.
default_cache = ContentCache()
