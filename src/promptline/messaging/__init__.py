"""Async trace delivery: message, handler, and bus boundary."""

from promptline.messaging.bus import MessageBus, ThreadedMessageBus
from promptline.messaging.handler import FlushTraceHandler
from promptline.messaging.messages import FlushTraceMessage

__all__ = [
    "FlushTraceHandler",
    "FlushTraceMessage",
    "MessageBus",
    "ThreadedMessageBus",
]
