"""
In-memory caching for performance endpoints.

Cache Configuration:
- 5-minute TTL by default (CACHE_TTL_SECONDS) so repeated dashboard loads do not
  hammer the CRM
- Keys are plain strings built by the helpers below; each key names exactly one
  cached unit (snapshot, single month, ranking, profile)
- Uses monotonic() for TTL comparison (immune to system clock changes)
- Expired entries are dropped when read; sweep() and the max_entries cap keep a
  long-running process from accumulating dead entries

One ExpiringCache instance lives for the whole process (`performance_cache`).
It is resized at start-up by configure_cache() and never torn down.
"""

import logging
import threading
from collections import OrderedDict
from time import monotonic
from typing import Any, Callable, Optional

from app.core.config import CACHE_MAX_ENTRIES

logger = logging.getLogger(__name__)


class _Miss:
    """Returned by ExpiringCache.get when there is no live entry."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISS"


MISS = _Miss()


# ==============================================================================
# CACHE KEYS
# ==============================================================================
def snapshot_key(user_id: str) -> str:
    return f"performance_{user_id}"


def monthly_key(user_id: str, year: int, month: int) -> str:
    return f"performance_month_{user_id}_{year}_{month}"


def ranking_key(user_id: str) -> str:
    return f"ranking_{user_id}"


def profile_key(user_id: str) -> str:
    return f"profile_{user_id}"


# ==============================================================================
# EXPIRING CACHE
# ==============================================================================
class ExpiringCache:
    """
    String-keyed store where every value carries an absolute expiry.

    Structure: { key: (expires_at_monotonic, value) }, kept in insertion order so
    the capacity cap can evict the oldest write first.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = monotonic,
    ):
        self._entries: "OrderedDict[str, tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()
        self._clock = clock
        self.max_entries = max_entries

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store value under key until now + ttl_seconds, replacing any entry."""
        expires_at = self._clock() + ttl_seconds
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (expires_at, value)
            self._evict_overflow()

    def get(self, key: str) -> Any:
        """
        Return the live value for key, or MISS.

        An expired entry is removed on the way out.
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug("cache miss %s", key)
                return MISS
            expires_at, value = entry
            if now >= expires_at:
                del self._entries[key]
                logger.debug("cache expired %s", key)
                return MISS
        logger.debug("cache hit %s", key)
        return value

    def contains(self, key: str) -> bool:
        return self.get(key) is not MISS

    __contains__ = contains

    def sweep(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("cache sweep removed %d entries", len(expired))
        return len(expired)

    def resize(self, max_entries: Optional[int]) -> None:
        with self._lock:
            self.max_entries = max_entries
            self._evict_overflow()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict_overflow(self) -> None:
        # caller holds the lock
        if not self.max_entries:
            return
        while len(self._entries) > self.max_entries:
            key, _ = self._entries.popitem(last=False)
            logger.debug("cache evicted %s", key)


performance_cache = ExpiringCache(max_entries=CACHE_MAX_ENTRIES)


def configure_cache(max_entries: Optional[int] = CACHE_MAX_ENTRIES) -> ExpiringCache:
    """Apply start-up settings to the process-wide cache and return it."""
    performance_cache.resize(max_entries)
    return performance_cache


def get_performance_cache() -> ExpiringCache:
    return performance_cache
