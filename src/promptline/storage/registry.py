"""Storage strategy selection.

PromptStorageRegistry holds an ordered list of backends and one active
config value bound at construction (None, a directory path, or an
fsspec filesystem). Every operation is delegated to the first backend
whose supports() accepts that config.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from promptline.storage.base import PromptStorage


class PromptStorageRegistry(PromptStorage):
    """Strategy context that picks the storage backend for the active config.

    With no active config, or no backend accepting it, every operation
    returns its miss value (None, False, []) without touching a backend.
    Storage being unavailable is an expected state, not an error.
    """

    def __init__(self, storages: Sequence[PromptStorage], config: Any = None) -> None:
        self.storages = list(storages)
        self.config = config

    def load(
        self, name: str, version: int | None = None, label: str | None = None
    ) -> dict[str, Any] | None:
        storage = self._active_storage()
        if storage is None:
            return None
        return storage.load(name, version, label)

    def save(
        self,
        name: str,
        prompt_data: dict[str, Any],
        version: int | None = None,
        label: str | None = None,
    ) -> bool:
        storage = self._active_storage()
        if storage is None:
            return False
        return storage.save(name, prompt_data, version, label)

    def exists(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        storage = self._active_storage()
        if storage is None:
            return False
        return storage.exists(name, version, label)

    def delete(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        storage = self._active_storage()
        if storage is None:
            return False
        return storage.delete(name, version, label)

    def list(self) -> list[str]:
        storage = self._active_storage()
        if storage is None:
            return []
        return storage.list()

    def is_available(self) -> bool:
        storage = self._active_storage()
        if storage is None:
            return False
        return storage.is_available()

    def supports(self, config: Any) -> bool:
        return self._find_storage_for(config) is not None

    def describe(self) -> str:
        storage = self._active_storage()
        return storage.describe() if storage is not None else "none"

    def _active_storage(self) -> PromptStorage | None:
        return self._find_storage_for(self.config)

    def _find_storage_for(self, config: Any) -> PromptStorage | None:
        if config is None:
            return None

        for storage in self.storages:
            if storage.supports(config):
                return storage

        return None
