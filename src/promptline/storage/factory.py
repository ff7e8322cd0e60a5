"""Builds the PromptStorageRegistry from fallback configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fsspec import AbstractFileSystem

from promptline.storage.fs_store import FilesystemPromptStorage
from promptline.storage.path_store import PathPromptStorage
from promptline.storage.registry import PromptStorageRegistry
from promptline.storage.safe import SafePromptStorage

if TYPE_CHECKING:
    from promptline.models.config import FallbackConfig


class StorageFactory:
    """Create a storage registry for the configured fallback storage.

    An injected filesystem takes priority over a configured path. Each
    backend is wrapped in SafePromptStorage.

    Args:
        filesystem: fsspec filesystem resolved from ``fallback.storage.service``.
        filesystem_root: Directory on that filesystem holding the prompts.
    """

    def __init__(
        self, filesystem: AbstractFileSystem | None = None, filesystem_root: str = ""
    ) -> None:
        self.filesystem = filesystem
        self.filesystem_root = filesystem_root

    def create(self, fallback_config: FallbackConfig | None) -> PromptStorageRegistry:
        storages: list[SafePromptStorage] = []
        config: Any = None

        if fallback_config is None or not fallback_config.enabled:
            return PromptStorageRegistry(storages, config)

        if self.filesystem is not None:
            storages.append(
                SafePromptStorage(FilesystemPromptStorage(self.filesystem, self.filesystem_root))
            )
            config = self.filesystem
        elif fallback_config.storage.path:
            path = fallback_config.storage.path
            storages.append(SafePromptStorage(PathPromptStorage(path)))
            config = path

        return PromptStorageRegistry(storages, config)
