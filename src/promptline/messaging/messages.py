"""Messages exchanged over the async trace delivery boundary."""

from __future__ import annotations

from dataclasses import dataclass

from promptline.tracing.models import TraceRecord


@dataclass(frozen=True)
class FlushTraceMessage:
    """A finished trace record awaiting background delivery."""

    record: TraceRecord

    def to_json(self) -> str:
        """Serialize for transports that carry text payloads."""
        return self.record.model_dump_json()

    @classmethod
    def from_json(cls, payload: str | bytes) -> FlushTraceMessage:
        return cls(record=TraceRecord.model_validate_json(payload))
