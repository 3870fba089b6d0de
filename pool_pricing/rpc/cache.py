"""
pool_pricing/rpc/cache.py

TtlCache - in-memory TTL cache owned by the caller.

Each client receives its own instance (or one injected by the caller);
there is no process-wide cache. Instances are not shared across threads.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    stored_at: float   # clock() when stored
    expires_at: float  # clock() after which the entry is stale


class TtlCache:
    """Key/value store whose entries expire `ttl` seconds after being set."""

    def __init__(
        self,
        default_ttl: float = 30.0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize TtlCache.

        Args:
            default_ttl: Default TTL for cache entries (seconds)
            clock: Time source, seconds as float
        """
        if default_ttl < 0:
            raise ValueError("default_ttl must be non-negative")
        self._default_ttl = default_ttl
        self._clock = clock
        self._cache: Dict[str, CacheEntry] = {}

        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def get(self, key: str) -> Optional[Any]:
        """Value for `key`; None when absent or expired (expired entries are dropped)."""
        entry = self._cache.get(key)
        if entry is None:
            self._misses += 1
            return None

        if self._clock() >= entry.expires_at:
            del self._cache[key]
            self._evictions += 1
            self._misses += 1
            return None

        self._hits += 1
        return entry.value

    def age(self, key: str) -> Optional[float]:
        """Seconds since `key` was stored, or None if absent."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        return self._clock() - entry.stored_at

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        lifetime = self._default_ttl if ttl is None else ttl
        now = self._clock()
        self._cache[key] = CacheEntry(
            value=value,
            stored_at=now,
            expires_at=now + lifetime,
        )

    def get_or_set(
        self,
        key: str,
        factory: Callable[[], Any],
        ttl: Optional[float] = None,
    ) -> Any:
        """
        Return the cached value, or compute, store and return it.

        A factory result of None is returned but not cached.
        """
        value = self.get(key)
        if value is not None:
            return value
        value = factory()
        if value is not None:
            self.set(key, value, ttl)
        return value

    def delete(self, key: str) -> bool:
        return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        self._cache.clear()

    def cleanup_expired(self) -> int:
        """Drop every expired entry; returns how many were dropped."""
        now = self._clock()
        to_remove = [key for key, entry in self._cache.items() if now >= entry.expires_at]
        for key in to_remove:
            del self._cache[key]

        self._evictions += len(to_remove)
        if to_remove:
            logger.debug(f"[cache] Evicted {len(to_remove)} expired entries")
        return len(to_remove)

    def get_metrics(self) -> Dict[str, Any]:
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "size": len(self._cache),
            "hit_rate": self._hits / total if total > 0 else 0.0,
        }

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._cache)
