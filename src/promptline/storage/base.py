"""PromptStorage interface and shared JSON encoding helpers.

Backends implement the raw operations and are free to raise on I/O
failure; SafePromptStorage (storage/safe.py) turns those failures into
warnings plus an empty result.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

PROMPT_FILE_EXTENSION = ".json"


def encode_prompt(data: dict[str, Any]) -> str:
    """Encode prompt data as pretty-printed JSON, keeping non-ASCII text as-is."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def decode_prompt(content: str, storage: str = "unknown") -> dict[str, Any] | None:
    """Decode stored prompt JSON.

    Returns None (and logs a warning) for invalid JSON or for JSON
    whose top level is not an object.
    """
    try:
        data = json.loads(content)
    except ValueError as exc:
        logger.warning(
            "prompt_decode_failed",
            storage=storage,
            content_length=len(content),
            error=str(exc),
        )
        return None

    if not isinstance(data, dict):
        logger.warning(
            "prompt_decode_failed",
            storage=storage,
            content_length=len(content),
            error=f"expected a JSON object, got {type(data).__name__}",
        )
        return None

    return data


class PromptStorage(ABC):
    """Durable prompt storage keyed by (name, version, label)."""

    @abstractmethod
    def load(
        self, name: str, version: int | None = None, label: str | None = None
    ) -> dict[str, Any] | None:
        """Return the stored prompt data, or None if absent."""
        ...

    @abstractmethod
    def save(
        self,
        name: str,
        prompt_data: dict[str, Any],
        version: int | None = None,
        label: str | None = None,
    ) -> bool:
        """Persist prompt data, replacing any previous copy."""
        ...

    @abstractmethod
    def exists(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        ...

    @abstractmethod
    def delete(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        """Delete a stored prompt. Returns False if it was not stored."""
        ...

    @abstractmethod
    def list(self) -> list[str]:
        """Return the identifiers of all stored prompts."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    def supports(self, config: Any) -> bool:
        """Return True if this backend handles the given storage config value."""
        ...

    def describe(self) -> str:
        """Name used in log entries. Defaults to the class name."""
        return type(self).__name__
