"""Message bus boundary for async trace delivery.

Any object with a ``dispatch(message)`` method can act as the bus, so
applications can route FlushTraceMessage through their own transport.
ThreadedMessageBus is the built-in in-process option: it only moves
delivery off the calling thread and offers no persistence or retry.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)


@runtime_checkable
class MessageBus(Protocol):
    def dispatch(self, message: Any) -> None:
        ...


class ThreadedMessageBus:
    """Runs a handler for each dispatched message on a worker thread.

    Args:
        handler: Callable invoked with each message.
        max_workers: Worker thread count.
    """

    def __init__(self, handler: Callable[[Any], None], max_workers: int = 1) -> None:
        self.handler = handler
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="promptline-trace"
        )

    def dispatch(self, message: Any) -> None:
        future = self._executor.submit(self.handler, message)
        future.add_done_callback(self._log_failure)

    @staticmethod
    def _log_failure(future: Future[None]) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("message_handler_failed", error=str(exc))

    def close(self, wait: bool = True) -> None:
        """Stop accepting messages; with wait=True, drain pending ones."""
        self._executor.shutdown(wait=wait)
