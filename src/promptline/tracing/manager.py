"""TraceManager: wraps operations, measures them, and flushes a record.

Per call: sampling decides whether the call is traced at all. A traced
call is timed with the injected clock, a TraceRecord is built whether
the operation returned or raised, and the record is handed to the
flusher before the result is returned or the exception re-raised.
"""

from __future__ import annotations

import random as _random
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, TypeVar

import structlog

from promptline.platform.results import Result
from promptline.tracing.clock import Clock
from promptline.tracing.flushers import TraceFlusher
from promptline.tracing.models import TraceRecord, UsageRecord
from promptline.tracing.serialization import extract_output, serialize_input

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class TraceManager:
    """Traces AI operations and delegates delivery to a flusher.

    Args:
        flusher: Sync or async delivery strategy.
        clock: Source of timestamps and durations.
        environment: Deployment environment, recorded as tag and field.
        enabled: Global tracing switch.
        sampling_rate: Probability in [0, 1] that a call is traced.
        random: Uniform [0, 1) source used for sampling.
    """

    def __init__(
        self,
        flusher: TraceFlusher,
        clock: Clock,
        environment: str,
        enabled: bool = True,
        sampling_rate: float = 1.0,
        random: Callable[[], float] = _random.random,
    ) -> None:
        self.flusher = flusher
        self.clock = clock
        self.environment = environment
        self.enabled = enabled
        self.sampling_rate = sampling_rate
        self._random = random

    def is_enabled(self) -> bool:
        return self.enabled

    def trace(
        self,
        name: str,
        metadata: Mapping[str, Any],
        input: Any,
        operation: Callable[[], T],
    ) -> T:
        """Run operation and trace it.

        The operation's own result or exception always reaches the
        caller; flushing never raises.
        """
        if not self._should_trace():
            return operation()

        trace_metadata = dict(metadata)
        trace_metadata["timestamp"] = self.clock.now().isoformat()

        start_time = self.clock.now()
        result: Any = None
        error: BaseException | None = None

        try:
            result = operation()
            return result
        except BaseException as exc:
            error = exc
            raise
        finally:
            self._capture(name, trace_metadata, input, result, start_time, error)

    def _capture(
        self,
        name: str,
        metadata: dict[str, Any],
        input: Any,
        result: Any,
        start_time: datetime,
        error: BaseException | None,
    ) -> None:
        try:
            duration = self._duration_since(start_time)
            record = self._build_record(name, metadata, input, result, duration, error)
            self.flusher.flush(record)
        except Exception as exc:
            logger.error("trace_capture_failed", trace_name=name, error=str(exc))

    def _should_trace(self) -> bool:
        if not self.enabled:
            return False

        if self.sampling_rate >= 1.0:
            return True

        return self._random() < self.sampling_rate

    def _duration_since(self, start_time: datetime) -> float:
        return (self.clock.now() - start_time).total_seconds()

    def _build_record(
        self,
        name: str,
        metadata: dict[str, Any],
        input: Any,
        result: Any,
        duration: float,
        error: BaseException | None,
    ) -> TraceRecord:
        fields: dict[str, Any] = {
            "name": name,
            "tags": [self.environment],
            "environment": self.environment,
            "metadata": metadata,
            "input": serialize_input(input),
            "duration": duration,
            "status": "error" if error is not None else "success",
        }

        if error is None and isinstance(result, Result):
            fields["output"] = extract_output(result)

            # The model that served the call wins over the caller's hint
            result_model = result.metadata.get("model")
            if result_model is not None:
                metadata["model"] = result_model

            if result.usage is not None:
                fields["usage"] = UsageRecord.from_usage(result.usage)

        if error is not None:
            fields["error"] = str(error)

        return TraceRecord(**fields)
