"""Tests for SafePromptStorage - failure absorption around backends."""

from __future__ import annotations

from typing import Any

from structlog.testing import capture_logs

from promptline.errors import StorageError
from promptline.storage.base import PromptStorage
from promptline.storage.safe import SafePromptStorage


class ExplodingStorage(PromptStorage):
    """Backend whose every operation raises."""

    def load(self, name, version=None, label=None):
        raise StorageError("disk on fire")

    def save(self, name, prompt_data, version=None, label=None):
        raise OSError("read-only filesystem")

    def exists(self, name, version=None, label=None):
        raise StorageError("disk on fire")

    def delete(self, name, version=None, label=None):
        raise PermissionError("denied")

    def list(self):
        raise StorageError("disk on fire")

    def is_available(self):
        raise StorageError("Storage directory is not writable: /readonly")

    def supports(self, config: Any) -> bool:
        return config == "exploding"


class TestSafePromptStorage:
    """Tests that backend failures become warnings plus miss values."""

    def test_load_failure_returns_none(self):
        """A failing load returns None and logs a warning with context."""
        storage = SafePromptStorage(ExplodingStorage())
        with capture_logs() as logs:
            assert storage.load("greeting", 2, "prod") is None
        assert logs == [
            {
                "event": "prompt_storage_load_failed",
                "log_level": "warning",
                "storage": "ExplodingStorage",
                "error": "disk on fire",
                "name": "greeting",
                "version": 2,
                "label": "prod",
            }
        ]

    def test_save_failure_returns_false(self):
        """A failing save returns False."""
        with capture_logs() as logs:
            assert SafePromptStorage(ExplodingStorage()).save("greeting", {}) is False
        assert logs[0]["event"] == "prompt_storage_save_failed"

    def test_exists_failure_returns_false(self):
        """A failing exists check returns False."""
        assert SafePromptStorage(ExplodingStorage()).exists("greeting") is False

    def test_delete_failure_returns_false(self):
        """A failing delete returns False."""
        with capture_logs() as logs:
            assert SafePromptStorage(ExplodingStorage()).delete("greeting") is False
        assert logs[0]["event"] == "prompt_storage_delete_failed"

    def test_list_failure_returns_empty(self):
        """A failing list returns []."""
        assert SafePromptStorage(ExplodingStorage()).list() == []

    def test_availability_failure_returns_false(self):
        """A backend that cannot initialise reports unavailable."""
        with capture_logs() as logs:
            assert SafePromptStorage(ExplodingStorage()).is_available() is False
        assert logs[0]["event"] == "prompt_storage_availability_failed"

    def test_supports_passes_through(self):
        """supports is delegated unchanged."""
        storage = SafePromptStorage(ExplodingStorage())
        assert storage.supports("exploding") is True
        assert storage.supports("other") is False

    def test_describe_names_inner_backend(self):
        """describe reports the wrapped backend."""
        assert SafePromptStorage(ExplodingStorage()).describe() == "ExplodingStorage"
