"""BasePlatform ABC and the provider/model/audio option types.

A platform fronts one or more AI providers. TracedPlatform
(platform/traced.py) decorates any BasePlatform implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from promptline.platform.results import BinaryResult, Result, StreamResult, TextResult
from promptline.prompts.conversation import Conversation, PromptMessage

PlatformInput = str | PromptMessage | Conversation


@dataclass(frozen=True)
class Provider:
    """An AI provider known to the platform."""

    name: str
    default_model: str | None = None


@dataclass(frozen=True)
class Model:
    """A resolved model and the provider serving it."""

    id: str
    provider: Provider


@dataclass
class AudioOptions:
    """Options for speech synthesis, transcription and translation."""

    model: str | None = None
    voice: str | None = None
    format: str | None = None
    language: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)


class BasePlatform(ABC):
    """Abstract AI platform.

    Subclasses implement the operations; the discovery and configuration
    methods describe which providers and models are available.
    """

    @abstractmethod
    def ask(
        self,
        input: PlatformInput,
        model_id: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> Result:
        """Send a prompt or conversation to a model."""
        ...

    @abstractmethod
    def text_to_speech(self, input: str, options: AudioOptions) -> BinaryResult:
        ...

    @abstractmethod
    def text_to_speech_stream(self, input: str, options: AudioOptions) -> StreamResult:
        ...

    @abstractmethod
    def transcribe_audio(self, audio_file_path: str, options: AudioOptions) -> TextResult:
        ...

    @abstractmethod
    def translate_audio(self, audio_file_path: str, options: AudioOptions) -> TextResult:
        ...

    @abstractmethod
    def get_provider(self, name: str) -> Provider:
        ...

    @abstractmethod
    def get_available_providers(self) -> list[Provider]:
        ...

    @abstractmethod
    def has_provider(self, name: str) -> bool:
        ...

    @abstractmethod
    def configure_provider_default_model(self, provider_name: str, default_model: str) -> None:
        ...

    @abstractmethod
    def resolve_model(self, model_id: str | None) -> Model:
        """Resolve a model id (or the default model when None)."""
        ...
