"""Turns raw Langfuse prompt data into a Conversation."""

from __future__ import annotations

from typing import Any

from promptline.errors import DeserializationError
from promptline.prompts.conversation import Conversation


class PromptDeserializer:
    """Deserializes the ``prompt`` message list of a Langfuse chat prompt."""

    def deserialize(self, prompt_data: dict[str, Any]) -> Conversation:
        """Build a Conversation from raw prompt data.

        Raises:
            DeserializationError: If ``prompt`` is missing, not a list,
                empty, or contains malformed messages.
        """
        messages = prompt_data.get("prompt")
        if not isinstance(messages, list):
            raise DeserializationError(
                'Invalid prompt data: missing "prompt" field or not an array'
            )

        if not messages:
            raise DeserializationError("No valid prompts found in data")

        try:
            return Conversation.from_messages(messages)
        except ValueError as exc:
            raise DeserializationError(
                f"Failed to create conversation from prompt data: {exc}"
            ) from exc
