"""Consumer side of async trace delivery."""

from __future__ import annotations

import structlog

from promptline.messaging.messages import FlushTraceMessage
from promptline.tracing.flushers import SyncTraceFlusher

logger = structlog.get_logger(__name__)


class FlushTraceHandler:
    """Delivers dispatched trace records with the synchronous flusher.

    Unexpected failures are logged and re-raised so that a transport
    with redelivery can retry the message.
    """

    def __init__(self, sync_flusher: SyncTraceFlusher) -> None:
        self.sync_flusher = sync_flusher

    def __call__(self, message: FlushTraceMessage) -> None:
        record = message.record

        try:
            logger.info("async_trace_flush_started", trace_name=record.name)
            self.sync_flusher.flush(record)
            logger.info(
                "async_trace_flush_finished",
                trace_name=record.name,
                has_generation=record.model is not None,
                has_usage=record.usage is not None,
            )
        except Exception as exc:
            logger.error("async_trace_flush_failed", trace_name=record.name, error=str(exc))
            raise
