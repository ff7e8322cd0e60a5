"""PromptCache: the resolution engine's view of the cache backend."""

from __future__ import annotations

from typing import Any

import structlog

from promptline.cache.backends import CacheBackend, Compute
from promptline.naming import PromptIdentifier

logger = structlog.get_logger(__name__)

CACHE_KEY_PREFIX = "promptline_prompt_"


class PromptCache:
    """Caches raw prompt data with a fixed TTL.

    The backend is optional: without one, get() simply runs the compute
    callback. Backend failures are logged and degrade to computing the
    value directly; failures raised by the compute callback itself
    propagate unchanged.
    """

    def __init__(
        self,
        backend: CacheBackend | None = None,
        ttl: int = 3600,
        identifier: PromptIdentifier | None = None,
    ) -> None:
        self.backend = backend
        self.ttl = ttl
        self.identifier = identifier or PromptIdentifier()

    def is_available(self) -> bool:
        return self.backend is not None

    def build_key(self, name: str, version: int | None = None, label: str | None = None) -> str:
        return CACHE_KEY_PREFIX + self.identifier.build(name, version, label)

    def get(self, key: str, compute: Compute) -> dict[str, Any]:
        """Return the cached value for key, computing it on a miss."""
        if self.backend is None:
            logger.debug("cache_unavailable", key=key)
            return compute()

        compute_errors: list[Exception] = []
        computed: list[dict[str, Any]] = []

        def guarded_compute() -> dict[str, Any]:
            try:
                value = compute()
            except Exception as exc:
                compute_errors.append(exc)
                raise
            computed.append(value)
            return value

        try:
            return self.backend.get(key, guarded_compute, self.ttl)
        except Exception as exc:
            if compute_errors:
                raise compute_errors[0] from None
            logger.warning("cache_get_failed", key=key, error=str(exc))
            # The backend failed after computing; never fetch twice per miss
            if computed:
                return computed[0]
            return compute()

    def set(self, key: str, data: dict[str, Any], ttl: int | None = None) -> bool:
        """Store data under key, replacing any cached value."""
        if self.backend is None:
            logger.debug("cache_unavailable", key=key)
            return False

        effective_ttl = ttl if ttl is not None else self.ttl
        try:
            self.backend.delete(key)
            stored = self.backend.get(key, lambda: data, effective_ttl)
        except Exception as exc:
            logger.warning("cache_set_failed", key=key, error=str(exc))
            return False

        logger.debug("cache_set", key=key, ttl=effective_ttl)
        return stored == data

    def delete(self, key: str) -> bool:
        if self.backend is None:
            logger.debug("cache_unavailable", key=key)
            return False

        try:
            return self.backend.delete(key)
        except Exception as exc:
            logger.warning("cache_delete_failed", key=key, error=str(exc))
            return False
