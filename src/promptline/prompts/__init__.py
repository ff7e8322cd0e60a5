"""Prompt resolution: conversation model, deserializer, and registry."""

from promptline.prompts.conversation import Conversation, PromptMessage, substitute
from promptline.prompts.deserializer import PromptDeserializer
from promptline.prompts.registry import PromptRegistry

__all__ = [
    "Conversation",
    "PromptDeserializer",
    "PromptMessage",
    "PromptRegistry",
    "substitute",
]
