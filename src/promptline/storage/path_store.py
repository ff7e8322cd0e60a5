"""Directory-backed prompt storage.

Stores one JSON document per prompt identifier:

    {storage_path}/
        {identifier}.json

Writes are atomic (write to .tmp, then rename) to prevent partial files.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from promptline.errors import StorageError
from promptline.naming import PromptIdentifier
from promptline.storage.base import (
    PROMPT_FILE_EXTENSION,
    PromptStorage,
    decode_prompt,
    encode_prompt,
)


class PathPromptStorage(PromptStorage):
    """Persist prompts as JSON files in a local directory."""

    def __init__(
        self, storage_path: str | os.PathLike[str], identifier: PromptIdentifier | None = None
    ) -> None:
        self.storage_path = Path(storage_path)
        self.identifier = identifier or PromptIdentifier()

    def _file_path(self, name: str, version: int | None, label: str | None) -> Path:
        filename = self.identifier.build(name, version, label) + PROMPT_FILE_EXTENSION
        return self.storage_path / filename

    def ensure_dir(self) -> None:
        """Create the storage directory if needed and check it is writable.

        Raises:
            StorageError: If the directory cannot be created or written to.
        """
        try:
            self.storage_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Cannot create storage directory: {self.storage_path}"
            ) from exc

        if not os.access(self.storage_path, os.W_OK):
            raise StorageError(f"Storage directory is not writable: {self.storage_path}")

    def load(
        self, name: str, version: int | None = None, label: str | None = None
    ) -> dict[str, Any] | None:
        prompt_file = self._file_path(name, version, label)
        if not prompt_file.exists():
            return None
        content = prompt_file.read_text(encoding="utf-8")
        return decode_prompt(content, storage=self.describe())

    def save(
        self,
        name: str,
        prompt_data: dict[str, Any],
        version: int | None = None,
        label: str | None = None,
    ) -> bool:
        self.ensure_dir()

        prompt_file = self._file_path(name, version, label)
        content = encode_prompt(prompt_data)

        # Atomic write
        tmp_file = prompt_file.with_name(prompt_file.name + ".tmp")
        tmp_file.write_text(content, encoding="utf-8")
        tmp_file.replace(prompt_file)
        return True

    def exists(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        return self._file_path(name, version, label).exists()

    def delete(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        prompt_file = self._file_path(name, version, label)
        if not prompt_file.exists():
            return False
        prompt_file.unlink()
        return True

    def list(self) -> list[str]:
        if not self.storage_path.is_dir():
            return []
        return sorted(
            f.name.removesuffix(PROMPT_FILE_EXTENSION)
            for f in self.storage_path.glob(f"*{PROMPT_FILE_EXTENSION}")
            if f.is_file()
        )

    def is_available(self) -> bool:
        self.ensure_dir()
        return self.storage_path.is_dir()

    def supports(self, config: Any) -> bool:
        return isinstance(config, (str, os.PathLike))
