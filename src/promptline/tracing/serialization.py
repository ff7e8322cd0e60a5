"""Input and output payload serialization for trace records.

Payloads are tagged mappings; ``type`` selects how the rest of the
mapping is read.
"""

from __future__ import annotations

from typing import Any

from promptline.platform.results import (
    BinaryResult,
    ObjectResult,
    Result,
    StreamResult,
    TextResult,
    ToolCallResult,
)


def serialize_input(value: Any) -> dict[str, Any]:
    """Serialize the traced operation's input.

    Strings are kept verbatim; structured objects are converted with
    their ``to_dict()`` (or Pydantic ``model_dump()``) and tagged with
    their class name.
    """
    if isinstance(value, str):
        return {"type": "string", "content": value}

    if hasattr(value, "to_dict"):
        content = value.to_dict()
    elif hasattr(value, "model_dump"):
        content = value.model_dump(mode="json")
    else:
        content = repr(value)

    return {"type": "object", "class": type(value).__name__, "content": content}


def extract_output(result: Result) -> dict[str, Any]:
    """Serialize a platform result according to its kind.

    Binary results record only MIME type and byte size, and stream
    results only their MIME type, so raw audio never enters a trace.
    """
    if isinstance(result, TextResult):
        return {"type": "text", "content": result.content}

    if isinstance(result, ToolCallResult):
        return {
            "type": "tool_call",
            "tools": [
                {"name": tool.name, "arguments": tool.arguments} for tool in result.content
            ],
        }

    if isinstance(result, ObjectResult):
        return {"type": "object", "data": result.content}

    if isinstance(result, BinaryResult):
        return {
            "type": "binary",
            "mime_type": result.mime_type,
            "size": len(result.content),
        }

    if isinstance(result, StreamResult):
        return {"type": "stream", "mime_type": result.mime_type}

    return {"type": type(result).__name__, "content": result.content}
