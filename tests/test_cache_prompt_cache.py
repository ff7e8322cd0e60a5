"""Tests for PromptCache - optional backend and failure degradation."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from promptline.cache.backends import MemoryCacheBackend
from promptline.cache.prompt_cache import CACHE_KEY_PREFIX, PromptCache


class BrokenBackend:
    """Cache backend that is down."""

    def get(self, key, compute, ttl):
        raise ConnectionError("cache unreachable")

    def delete(self, key):
        raise ConnectionError("cache unreachable")


class FailingStoreBackend:
    """Cache backend that computes on a miss, then fails to store."""

    def get(self, key, compute, ttl):
        compute()
        raise ConnectionError("SET failed")

    def delete(self, key):
        return False


class TestPromptCache:
    """Tests for cache key building and get-or-compute."""

    def test_build_key(self):
        """Keys are the prefix plus the prompt identifier."""
        cache = PromptCache()
        assert cache.build_key("greeting", 2) == f"{CACHE_KEY_PREFIX}greeting_v2"

    def test_no_backend_is_unavailable(self):
        """Without a backend the cache reports unavailable."""
        assert PromptCache().is_available() is False
        assert PromptCache(MemoryCacheBackend()).is_available() is True

    def test_no_backend_always_computes(self):
        """Without a backend get just runs compute."""
        cache = PromptCache()
        calls = []
        cache.get("k", lambda: calls.append(1) or {"v": 1})
        cache.get("k", lambda: calls.append(1) or {"v": 1})
        assert len(calls) == 2

    def test_backend_caches_value(self):
        """A second get is served from the backend."""
        cache = PromptCache(MemoryCacheBackend(), ttl=60)
        assert cache.get("k", lambda: {"v": 1}) == {"v": 1}
        assert cache.get("k", lambda: {"v": 2}) == {"v": 1}

    def test_backend_failure_degrades_to_compute(self):
        """A broken backend is logged and bypassed."""
        cache = PromptCache(BrokenBackend())
        with capture_logs() as logs:
            assert cache.get("k", lambda: {"v": 1}) == {"v": 1}
        assert logs[0]["event"] == "cache_get_failed"
        assert logs[0]["log_level"] == "warning"

    def test_store_failure_after_compute_fetches_once(self):
        """A backend failing after computing reuses the computed value."""
        cache = PromptCache(FailingStoreBackend())
        calls = []

        def fetch():
            calls.append(1)
            return {"v": len(calls)}

        with capture_logs() as logs:
            assert cache.get("k", fetch) == {"v": 1}
        assert len(calls) == 1
        assert logs[0]["event"] == "cache_get_failed"

    def test_compute_failure_propagates_once(self):
        """A failing compute is raised, not retried."""
        cache = PromptCache(MemoryCacheBackend())
        calls = []

        def compute():
            calls.append(1)
            raise ValueError("remote down")

        with pytest.raises(ValueError, match="remote down"):
            cache.get("k", compute)
        assert len(calls) == 1

    def test_set_replaces_value(self):
        """set overwrites the cached value."""
        cache = PromptCache(MemoryCacheBackend())
        cache.get("k", lambda: {"v": 1})
        assert cache.set("k", {"v": 2}) is True
        assert cache.get("k", lambda: {"v": 3}) == {"v": 2}

    def test_set_and_delete_without_backend(self):
        """set and delete return False without a backend."""
        cache = PromptCache()
        assert cache.set("k", {}) is False
        assert cache.delete("k") is False

    def test_set_and_delete_failures_return_false(self):
        """Backend failures in set and delete are logged, not raised."""
        cache = PromptCache(BrokenBackend())
        with capture_logs() as logs:
            assert cache.set("k", {}) is False
            assert cache.delete("k") is False
        assert [log["event"] for log in logs] == ["cache_set_failed", "cache_delete_failed"]
