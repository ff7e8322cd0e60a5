"""Get-or-compute cache backends for PromptCache.

The resolution engine imposes no locking of its own. MemoryCacheBackend
computes at most once per key at a time within one process;
RedisCacheBackend shares values across processes but concurrent misses
on the same key may each compute.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)

Compute = Callable[[], dict[str, Any]]


@runtime_checkable
class CacheBackend(Protocol):
    """A get-or-compute key/value cache."""

    def get(self, key: str, compute: Compute, ttl: int) -> dict[str, Any]:
        """Return the cached value for key, computing and storing it on a miss."""
        ...

    def delete(self, key: str) -> bool:
        ...


LOCK_STRIPES = 64


class MemoryCacheBackend:
    """In-process TTL cache with per-key single-flight computation.

    Keys share a fixed pool of locks picked by hash, so two keys may
    occasionally wait on each other but the pool never grows. A TTL of
    0 or less expires the value immediately: it is computed and
    returned but not stored.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}
        self._locks = tuple(threading.Lock() for _ in range(LOCK_STRIPES))

    def _lock_for(self, key: str) -> threading.Lock:
        return self._locks[hash(key) % LOCK_STRIPES]

    def _lookup(self, key: str) -> dict[str, Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    def get(self, key: str, compute: Compute, ttl: int) -> dict[str, Any]:
        value = self._lookup(key)
        if value is not None:
            return value

        with self._lock_for(key):
            # Another thread may have filled the entry while we waited
            value = self._lookup(key)
            if value is not None:
                return value

            logger.debug("cache_miss", key=key, ttl=ttl)
            value = compute()
            if ttl > 0:
                self._entries[key] = (self._clock() + ttl, value)
            return value

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()


class RedisCacheBackend:
    """Redis-backed cache storing prompt data as JSON strings.

    As with MemoryCacheBackend, a TTL of 0 or less stores nothing.

    Args:
        client: A ``redis.Redis`` client (decode_responses may be on or off).
        prefix: Prepended to every key, for sharing a database.
    """

    def __init__(self, client: Any, prefix: str = "") -> None:
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "") -> RedisCacheBackend:
        import redis

        return cls(redis.Redis.from_url(url), prefix=prefix)

    def get(self, key: str, compute: Compute, ttl: int) -> dict[str, Any]:
        full_key = self.prefix + key
        raw = self.client.get(full_key)
        if raw is not None:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            return json.loads(raw)

        logger.debug("cache_miss", key=full_key, ttl=ttl)
        value = compute()
        # A non-positive TTL expires immediately; Redis rejects EX 0
        if ttl > 0:
            self.client.set(full_key, json.dumps(value, ensure_ascii=False), ex=ttl)
        return value

    def delete(self, key: str) -> bool:
        return bool(self.client.delete(self.prefix + key))
