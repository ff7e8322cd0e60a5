"""Failure-absorbing decorator for PromptStorage backends."""

from __future__ import annotations

from typing import Any

import structlog

from promptline.storage.base import PromptStorage

logger = structlog.get_logger(__name__)


class SafePromptStorage(PromptStorage):
    """Wraps a backend so that no storage failure reaches the caller.

    Any exception raised by the wrapped backend is logged as a warning
    and replaced by the operation's miss value: None for load, False
    for save/exists/delete/is_available, [] for list.
    """

    def __init__(self, inner: PromptStorage) -> None:
        self.inner = inner

    def describe(self) -> str:
        return self.inner.describe()

    def _warn(self, event: str, exc: Exception, **context: Any) -> None:
        logger.warning(event, storage=self.inner.describe(), error=str(exc), **context)

    def load(
        self, name: str, version: int | None = None, label: str | None = None
    ) -> dict[str, Any] | None:
        try:
            return self.inner.load(name, version, label)
        except Exception as exc:
            self._warn("prompt_storage_load_failed", exc, name=name, version=version, label=label)
            return None

    def save(
        self,
        name: str,
        prompt_data: dict[str, Any],
        version: int | None = None,
        label: str | None = None,
    ) -> bool:
        try:
            return self.inner.save(name, prompt_data, version, label)
        except Exception as exc:
            self._warn("prompt_storage_save_failed", exc, name=name, version=version, label=label)
            return False

    def exists(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        try:
            return self.inner.exists(name, version, label)
        except Exception as exc:
            self._warn("prompt_storage_exists_failed", exc, name=name, version=version, label=label)
            return False

    def delete(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        try:
            return self.inner.delete(name, version, label)
        except Exception as exc:
            self._warn("prompt_storage_delete_failed", exc, name=name, version=version, label=label)
            return False

    def list(self) -> list[str]:
        try:
            return self.inner.list()
        except Exception as exc:
            self._warn("prompt_storage_list_failed", exc)
            return []

    def is_available(self) -> bool:
        try:
            return self.inner.is_available()
        except Exception as exc:
            self._warn("prompt_storage_availability_failed", exc)
            return False

    def supports(self, config: Any) -> bool:
        return self.inner.supports(config)
