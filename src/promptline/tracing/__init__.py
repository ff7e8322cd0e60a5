"""Trace capture and flush pipeline."""

from promptline.tracing.clock import Clock, SystemClock
from promptline.tracing.flushers import (
    ASYNC_TAG,
    AsyncTraceFlusher,
    SyncTraceFlusher,
    TraceFlusher,
)
from promptline.tracing.manager import TraceManager
from promptline.tracing.models import TraceRecord, UsageRecord
from promptline.tracing.serialization import extract_output, serialize_input

__all__ = [
    "ASYNC_TAG",
    "AsyncTraceFlusher",
    "Clock",
    "SyncTraceFlusher",
    "SystemClock",
    "TraceFlusher",
    "TraceManager",
    "TraceRecord",
    "UsageRecord",
    "extract_output",
    "serialize_input",
]
