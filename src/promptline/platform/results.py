"""Result dataclasses returned by AI platform operations.

These are plain dataclasses (not Pydantic) to avoid overhead in the
hot path of platform calls. The trace pipeline dispatches on the
concrete result class when serializing output.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Usage:
    """Token usage counts from a single platform call."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ToolCall:
    """A tool call requested by the model."""

    name: str
    arguments: dict[str, Any]
    id: str | None = None


@dataclass
class Result:
    """Base class for platform results.

    ``metadata`` carries provider details such as the model that
    actually served the request.
    """

    content: Any
    usage: Usage | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class TextResult(Result):
    content: str = ""


@dataclass
class ToolCallResult(Result):
    content: list[ToolCall] = field(default_factory=list)


@dataclass
class ObjectResult(Result):
    content: dict[str, Any] = field(default_factory=dict)


@dataclass
class BinaryResult(Result):
    """Binary output such as synthesized audio."""

    content: bytes = b""
    mime_type: str = "application/octet-stream"


@dataclass
class StreamResult(Result):
    """Streamed binary output; content is consumed by the caller."""

    content: Iterator[bytes] = field(default_factory=lambda: iter(()))
    mime_type: str = "application/octet-stream"
