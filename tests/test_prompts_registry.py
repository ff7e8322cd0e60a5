"""Tests for PromptRegistry - cache, remote and fallback resolution."""

from __future__ import annotations

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from promptline.cache.backends import MemoryCacheBackend
from promptline.cache.prompt_cache import PromptCache
from promptline.errors import InvalidPromptError, PromptNotFoundError, RemoteError
from promptline.prompts.registry import PromptRegistry
from promptline.storage.path_store import PathPromptStorage
from promptline.storage.registry import PromptStorageRegistry
from promptline.storage.safe import SafePromptStorage

PING = {"prompt": [{"role": "user", "content": "hi"}]}


class StubPromptClient:
    """Records fetches and returns canned data or raises."""

    def __init__(self, data=None, error: Exception | None = None) -> None:
        self.data = data if data is not None else PING
        self.error = error
        self.calls: list[tuple] = []

    def get_prompt(self, name, version=None, label=None):
        self.calls.append((name, version, label))
        if self.error is not None:
            raise self.error
        return self.data


def _storage(tmp_path: Path) -> PromptStorageRegistry:
    path = str(tmp_path / "prompts")
    return PromptStorageRegistry([SafePromptStorage(PathPromptStorage(path))], path)


def _no_storage() -> PromptStorageRegistry:
    return PromptStorageRegistry([], None)


class TestGetRaw:
    """Tests for raw resolution."""

    def test_ping_scenario(self, tmp_path: Path) -> None:
        """Uncached fetch is persisted and then visible through has()."""
        storage = _storage(tmp_path)
        registry = PromptRegistry(StubPromptClient(), PromptCache(), storage)

        result = registry.get_raw("ping", use_cache=False)

        assert result == PING
        assert storage.load("ping") == result
        assert registry.has("ping") is True

    def test_cache_hit_skips_remote(self, tmp_path: Path) -> None:
        """A cached prompt is served without a remote fetch."""
        client = StubPromptClient()
        cache = PromptCache(MemoryCacheBackend())
        cache.set(cache.build_key("ping"), {"prompt": [{"role": "user", "content": "cached"}]})
        registry = PromptRegistry(client, cache, _storage(tmp_path))

        assert registry.get_raw("ping")["prompt"][0]["content"] == "cached"
        assert client.calls == []

    def test_cache_miss_fetches_once_and_persists(self, tmp_path: Path) -> None:
        """A miss fetches once, stores to fallback, and fills the cache."""
        client = StubPromptClient()
        storage = _storage(tmp_path)
        registry = PromptRegistry(client, PromptCache(MemoryCacheBackend()), storage)

        registry.get_raw("ping", version=2)
        registry.get_raw("ping", version=2)

        assert client.calls == [("ping", 2, None)]
        assert storage.load("ping", 2) == PING

    def test_use_cache_false_bypasses_cache(self, tmp_path: Path) -> None:
        """use_cache=False always fetches."""
        client = StubPromptClient()
        registry = PromptRegistry(client, PromptCache(MemoryCacheBackend()), _storage(tmp_path))
        registry.get_raw("ping", use_cache=False)
        registry.get_raw("ping", use_cache=False)
        assert len(client.calls) == 2

    def test_remote_failure_served_from_fallback(self, tmp_path: Path) -> None:
        """A stored copy is returned when the API fails."""
        storage = _storage(tmp_path)
        storage.save("ping", PING)
        client = StubPromptClient(error=RemoteError("HTTP request failed: refused"))
        registry = PromptRegistry(client, PromptCache(), storage)

        with capture_logs() as logs:
            assert registry.get_raw("ping") == PING

        events = [(log["event"], log["log_level"]) for log in logs]
        assert ("prompt_fetch_failed", "warning") in events
        assert ("prompt_served_from_fallback", "info") in events

    def test_remote_failure_empty_storage_raises(self, tmp_path: Path) -> None:
        """Without a stored copy the remote error propagates."""
        client = StubPromptClient(error=PromptNotFoundError("ping"))
        registry = PromptRegistry(client, PromptCache(), _storage(tmp_path))

        with pytest.raises(PromptNotFoundError, match='Prompt "ping" not found in Langfuse'):
            registry.get_raw("ping")

    def test_remote_failure_no_storage_raises(self):
        """Without fallback storage the remote error propagates."""
        client = StubPromptClient(error=RemoteError("Request failed: HTTP 500", 500))
        registry = PromptRegistry(client, PromptCache(), _no_storage())

        with pytest.raises(RemoteError, match="HTTP 500"):
            registry.get_raw("ping")

    def test_remote_failure_not_cached(self, tmp_path: Path) -> None:
        """A failed resolution leaves no cache entry behind."""
        client = StubPromptClient(error=RemoteError("down"))
        registry = PromptRegistry(client, PromptCache(MemoryCacheBackend()), _no_storage())

        with pytest.raises(RemoteError):
            registry.get_raw("ping")
        client.error = None
        assert registry.get_raw("ping") == PING
        assert len(client.calls) == 2

    def test_storage_save_failure_does_not_fail_read(self, tmp_path: Path) -> None:
        """Persisting to fallback is best-effort."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        path = str(blocker / "prompts")
        storage = PromptStorageRegistry([SafePromptStorage(PathPromptStorage(path))], path)
        registry = PromptRegistry(StubPromptClient(), PromptCache(), storage)

        assert registry.get_raw("ping") == PING


class TestGet:
    """Tests for deserialized resolution."""

    def test_get_returns_conversation(self):
        registry = PromptRegistry(StubPromptClient(), PromptCache(), _no_storage())
        assert registry.get("ping").user_message.content == "hi"

    def test_invalid_prompt_wrapped_with_name(self):
        """Deserialization failures name the prompt."""
        client = StubPromptClient(data={"prompt": []})
        registry = PromptRegistry(client, PromptCache(), _no_storage())

        with pytest.raises(InvalidPromptError) as exc_info:
            registry.get("broken")
        assert exc_info.value.prompt_name == "broken"
        assert str(exc_info.value).startswith('Failed to deserialize prompt "broken": ')

    def test_get_compiled_substitutes_parameters(self):
        client = StubPromptClient(
            data={
                "prompt": [
                    {"role": "system", "content": "Answer in {{language}}."},
                    {"role": "user", "content": "Translate {{word}}"},
                ]
            }
        )
        registry = PromptRegistry(client, PromptCache(), _no_storage())
        conversation = registry.get_compiled("translate", {"language": "French", "word": "cat"})

        assert conversation.system_message.content == "Answer in French."
        assert conversation.user_message.content == "Translate cat"


class TestHas:
    """Tests for storage-only existence checks."""

    def test_has_never_fetches(self, tmp_path: Path) -> None:
        """has consults storage only."""
        client = StubPromptClient()
        registry = PromptRegistry(client, PromptCache(MemoryCacheBackend()), _storage(tmp_path))
        assert registry.has("ping") is False
        assert client.calls == []

    def test_has_without_storage(self):
        assert PromptRegistry(StubPromptClient(), PromptCache(), _no_storage()).has("ping") is False
