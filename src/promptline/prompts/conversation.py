"""Conversation and PromptMessage: the deserialized form of a prompt.

Plain frozen dataclasses; a resolved prompt is never mutated, only
replaced (with_parameters returns a new Conversation).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

MESSAGE_ROLES = ("system", "user", "assistant")

# {{ name }} placeholders, as written in Langfuse prompt templates
_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_.-]*)\s*\}\}")


def substitute(template: str, parameters: Mapping[str, Any]) -> str:
    """Replace ``{{name}}`` placeholders in a single pass.

    Placeholders without a matching parameter are left untouched, and
    substituted values are not scanned again.
    """

    def replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in parameters:
            return match.group(0)
        return str(parameters[key])

    return _PLACEHOLDER.sub(replace, template)


@dataclass(frozen=True)
class PromptMessage:
    """A single role-tagged message of a prompt."""

    role: str
    content: str

    def with_parameters(self, parameters: Mapping[str, Any]) -> PromptMessage:
        return PromptMessage(role=self.role, content=substitute(self.content, parameters))

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class Conversation:
    """An ordered sequence of prompt messages with at least one user message."""

    messages: tuple[PromptMessage, ...]

    def __post_init__(self) -> None:
        if not self.messages:
            raise ValueError("A conversation needs at least one message")
        for message in self.messages:
            if message.role not in MESSAGE_ROLES:
                raise ValueError(
                    f"Unsupported message role '{message.role}'. "
                    f"Expected one of: {', '.join(MESSAGE_ROLES)}"
                )
        if self.user_message is None:
            raise ValueError("A conversation needs a user message")

    @classmethod
    def from_messages(cls, messages: list[Any]) -> Conversation:
        """Build a Conversation from ``[{"role": ..., "content": ...}, ...]``."""
        parsed: list[PromptMessage] = []
        for index, raw in enumerate(messages):
            if not isinstance(raw, Mapping):
                raise ValueError(f"Message {index} is not an object")
            role = raw.get("role")
            content = raw.get("content")
            if not isinstance(role, str) or not isinstance(content, str):
                raise ValueError(f"Message {index} needs string 'role' and 'content' fields")
            parsed.append(PromptMessage(role=role, content=content))
        return cls(messages=tuple(parsed))

    def _first(self, role: str) -> PromptMessage | None:
        for message in self.messages:
            if message.role == role:
                return message
        return None

    @property
    def system_message(self) -> PromptMessage | None:
        return self._first("system")

    @property
    def user_message(self) -> PromptMessage | None:
        return self._first("user")

    @property
    def assistant_message(self) -> PromptMessage | None:
        return self._first("assistant")

    def with_parameters(self, parameters: Mapping[str, Any]) -> Conversation:
        """Return a copy with parameters substituted into every message."""
        return Conversation(
            messages=tuple(message.with_parameters(parameters) for message in self.messages)
        )

    def to_dict(self) -> dict[str, Any]:
        return {"messages": [message.to_dict() for message in self.messages]}
