"""Prompt storage on any fsspec filesystem (local, memory, S3, GCS, ...)."""

from __future__ import annotations

from typing import Any

from fsspec import AbstractFileSystem

from promptline.naming import PromptIdentifier
from promptline.storage.base import (
    PROMPT_FILE_EXTENSION,
    PromptStorage,
    decode_prompt,
    encode_prompt,
)


class FilesystemPromptStorage(PromptStorage):
    """Persist prompts as JSON files through an injected fsspec filesystem.

    Args:
        fs: The filesystem to delegate to.
        root: Directory (or bucket prefix) on that filesystem.
    """

    def __init__(
        self,
        fs: AbstractFileSystem,
        root: str = "",
        identifier: PromptIdentifier | None = None,
    ) -> None:
        self.fs = fs
        self.root = root.rstrip("/")
        self.identifier = identifier or PromptIdentifier()

    def describe(self) -> str:
        protocol = self.fs.protocol
        if isinstance(protocol, (tuple, list)):
            protocol = protocol[0]
        return f"{type(self).__name__}[{protocol}]"

    def _file_path(self, name: str, version: int | None, label: str | None) -> str:
        filename = self.identifier.build(name, version, label) + PROMPT_FILE_EXTENSION
        return f"{self.root}/{filename}" if self.root else filename

    def load(
        self, name: str, version: int | None = None, label: str | None = None
    ) -> dict[str, Any] | None:
        file_path = self._file_path(name, version, label)
        if not self.fs.exists(file_path):
            return None
        content = self.fs.cat_file(file_path).decode("utf-8")
        return decode_prompt(content, storage=self.describe())

    def save(
        self,
        name: str,
        prompt_data: dict[str, Any],
        version: int | None = None,
        label: str | None = None,
    ) -> bool:
        if self.root:
            self.fs.makedirs(self.root, exist_ok=True)
        file_path = self._file_path(name, version, label)
        self.fs.pipe_file(file_path, encode_prompt(prompt_data).encode("utf-8"))
        return True

    def exists(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        return self.fs.exists(self._file_path(name, version, label))

    def delete(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        file_path = self._file_path(name, version, label)
        if not self.fs.exists(file_path):
            return False
        self.fs.rm_file(file_path)
        return True

    def list(self) -> list[str]:
        listing_root = self.root or "/"
        if not self.fs.exists(listing_root):
            return []

        identifiers = []
        for entry in self.fs.ls(listing_root, detail=True):
            entry_name = entry["name"].rsplit("/", 1)[-1]
            if entry.get("type") == "file" and entry_name.endswith(PROMPT_FILE_EXTENSION):
                identifiers.append(entry_name.removesuffix(PROMPT_FILE_EXTENSION))
        return sorted(identifiers)

    def is_available(self) -> bool:
        return True

    def supports(self, config: Any) -> bool:
        return isinstance(config, AbstractFileSystem)
