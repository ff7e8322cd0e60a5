"""Trace flush strategies.

SyncTraceFlusher delivers to Langfuse on the calling thread.
AsyncTraceFlusher tags the record and dispatches it to a message bus;
the consumer side (messaging.FlushTraceHandler) later runs the sync
flusher. Neither strategy ever raises: sending a trace is not critical
to the application.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import structlog

from promptline.client.trace_client import TraceClient
from promptline.tracing.models import TraceRecord

if TYPE_CHECKING:
    from promptline.messaging.bus import MessageBus

logger = structlog.get_logger(__name__)

ASYNC_TAG = "async"


class TraceFlusher(ABC):
    """Delivers a finished TraceRecord."""

    @abstractmethod
    def flush(self, record: TraceRecord) -> None:
        ...


class SyncTraceFlusher(TraceFlusher):
    """Sends the trace, and a generation for model calls, immediately."""

    def __init__(self, trace_client: TraceClient) -> None:
        self.trace_client = trace_client

    def flush(self, record: TraceRecord) -> None:
        try:
            self._deliver(record)
        except Exception as exc:
            logger.error("trace_flush_failed", trace_name=record.name, error=str(exc))

    def _deliver(self, record: TraceRecord) -> None:
        trace = self.trace_client.trace(
            {
                "name": record.name,
                "tags": list(record.tags),
                "environment": record.environment,
                "metadata": record.metadata,
                "input": record.input,
            }
        )
        if trace is None:
            logger.warning("trace_create_failed", trace_name=record.name)
            return

        model = record.model
        usage_details: dict[str, int] = {}

        # Model calls get a generation that carries output and usage
        if model is not None:
            temperature = record.metadata.get("temperature")
            generation = trace.generation(
                name=record.name,
                model=model,
                model_parameters={"temperature": temperature} if temperature is not None else None,
                metadata=record.metadata,
                input=record.input,
            )

            if record.usage is not None:
                usage_details = record.usage.to_details()
                if usage_details:
                    generation.with_usage(usage_details)

            generation_end: dict[str, Any] = {}
            if record.output is not None:
                generation_end["output"] = record.output
            if record.error is not None:
                generation_end["error"] = record.error
                generation_end["level"] = "ERROR"

            generation.end(**generation_end)
            logger.debug("generation_ended", model=model, usage=usage_details or None)

        trace_end: dict[str, Any] = {"status": record.status}
        if record.output is not None and model is None:
            trace_end["output"] = record.output
        if record.error is not None:
            trace_end["error"] = record.error
            trace_end["level"] = "ERROR"

        trace.end(**trace_end)

        delivered = self.trace_client.flush()

        logger.debug(
            "trace_flushed_sync",
            trace_name=record.name,
            status=record.status,
            delivered=delivered,
            has_generation=model is not None,
            has_usage=bool(usage_details),
        )


class AsyncTraceFlusher(TraceFlusher):
    """Hands the record to a message bus for background delivery."""

    def __init__(self, message_bus: MessageBus) -> None:
        self.message_bus = message_bus

    def flush(self, record: TraceRecord) -> None:
        from promptline.messaging.messages import FlushTraceMessage

        try:
            self.message_bus.dispatch(FlushTraceMessage(record.with_tag(ASYNC_TAG)))
        except Exception as exc:
            logger.error("trace_dispatch_failed", trace_name=record.name, error=str(exc))
            return

        logger.debug("trace_dispatched", trace_name=record.name)
