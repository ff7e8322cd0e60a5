"""Trace-focused wrapper around the ingestion client.

Tracing must stay transparent to the application: every method here
logs failures and returns a neutral value instead of raising.
"""

from __future__ import annotations

import time
from typing import Any

import structlog

from promptline.client.ingestion import IngestionClient, TraceHandle

logger = structlog.get_logger(__name__)


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


class TraceClient:
    """Creates traces and flushes them, never raising."""

    def __init__(self, ingestion: IngestionClient) -> None:
        self.ingestion = ingestion

    def trace(self, data: dict[str, Any]) -> TraceHandle | None:
        """Create a trace from a trace payload mapping.

        Returns None if the trace could not be created.
        """
        name = _str_or_none(data.get("name")) or "unnamed_trace"
        metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else None
        tags = data.get("tags") if isinstance(data.get("tags"), list) else []

        try:
            handle = self.ingestion.trace(
                name=name,
                metadata=metadata,
                tags=tags,
                input=data.get("input"),
                output=data.get("output"),
                environment=_str_or_none(data.get("environment")),
                user_id=_str_or_none(data.get("userId")),
                session_id=_str_or_none(data.get("sessionId")),
                version=_str_or_none(data.get("version")),
                release=_str_or_none(data.get("release")),
            )
        except Exception as exc:
            logger.warning("trace_create_failed", name=name, error=str(exc))
            return None

        logger.debug("trace_created", name=name, tags=tags)
        return handle

    def flush(self) -> bool:
        """Flush pending events. Returns False if delivery failed."""
        try:
            self.ingestion.flush()
        except Exception as exc:
            logger.warning("trace_flush_failed", error=str(exc))
            return False

        logger.debug("traces_flushed")
        return True

    def test_connection(self) -> bool:
        """Send a throwaway trace and report whether Langfuse accepted it."""
        try:
            handle = self.ingestion.trace(
                name="connection_test",
                metadata={"test": True, "timestamp": int(time.time())},
            )
            handle.end(status="success")
            self.ingestion.flush()
        except Exception as exc:
            logger.error("connection_test_failed", error=str(exc))
            return False

        logger.info("connection_test_succeeded")
        return True
