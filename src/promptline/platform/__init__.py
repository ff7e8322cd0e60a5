"""AI platform abstraction, result types and the tracing decorator."""

from promptline.platform.base import AudioOptions, BasePlatform, Model, PlatformInput, Provider
from promptline.platform.results import (
    BinaryResult,
    ObjectResult,
    Result,
    StreamResult,
    TextResult,
    ToolCall,
    ToolCallResult,
    Usage,
)
from promptline.platform.traced import TracedPlatform

__all__ = [
    "AudioOptions",
    "BasePlatform",
    "BinaryResult",
    "Model",
    "ObjectResult",
    "PlatformInput",
    "Provider",
    "Result",
    "StreamResult",
    "TextResult",
    "ToolCall",
    "ToolCallResult",
    "TracedPlatform",
    "Usage",
]
