"""Trace record models.

Pydantic models (not dataclasses) because trace records cross the
async message boundary and are serialized to JSON there. Records are
frozen: the manager builds one per traced call and hands it to exactly
one flusher.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from promptline.platform.results import Usage


class UsageRecord(BaseModel):
    """Token usage attached to a generation."""

    model_config = {"frozen": True}

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)

    @classmethod
    def from_usage(cls, usage: Usage) -> UsageRecord:
        return cls(
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
        )

    def to_details(self) -> dict[str, int]:
        """Usage details with zero-valued fields left out."""
        details = {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }
        return {key: value for key, value in details.items() if value > 0}

    def is_empty(self) -> bool:
        return not self.to_details()


class TraceRecord(BaseModel):
    """Everything recorded about one traced operation."""

    model_config = {"frozen": True}

    name: str
    tags: list[str] = Field(default_factory=list)
    environment: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    input: dict[str, Any]
    duration: float
    status: Literal["success", "error"]
    output: dict[str, Any] | None = None
    usage: UsageRecord | None = None
    error: str | None = None

    @property
    def model(self) -> str | None:
        """The model recorded in metadata, if it is a string."""
        model = self.metadata.get("model")
        return model if isinstance(model, str) else None

    def with_tag(self, tag: str) -> TraceRecord:
        """Return a copy with tag appended (tags stay unique, order kept)."""
        if tag in self.tags:
            return self
        return self.model_copy(update={"tags": [*self.tags, tag]})

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready mapping without the absent optional fields.

        An all-zero usage counts as absent.
        """
        payload = self.model_dump(mode="json", exclude_none=True)
        if self.usage is not None and self.usage.is_empty():
            payload.pop("usage", None)
        return payload
