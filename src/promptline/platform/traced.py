"""TracedPlatform: a BasePlatform decorator that traces every AI call.

Each traced capability forwards to the wrapped platform inside
``TraceManager.trace``, so the caller always sees the wrapped call's own
result or exception. Provider discovery and configuration calls are
forwarded untraced.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from promptline.platform.base import (
    AudioOptions,
    BasePlatform,
    Model,
    PlatformInput,
    Provider,
)
from promptline.platform.results import BinaryResult, Result, StreamResult, TextResult

if TYPE_CHECKING:
    from promptline.tracing.manager import TraceManager

R = TypeVar("R", bound=Result)

TRACE_NAME_OPTION = "trace_name"

COMPLETION_TRACE = "ai-completion"
TEXT_TO_SPEECH_TRACE = "text-to-speech"
TEXT_TO_SPEECH_STREAM_TRACE = "text-to-speech-stream"
TRANSCRIPTION_TRACE = "audio-transcription"
TRANSLATION_TRACE = "audio-translation"


class TracedPlatform(BasePlatform):
    """Wraps a platform and traces its operations.

    Args:
        decorated: The platform doing the actual work.
        trace_manager: Records and flushes one trace per call.
    """

    def __init__(self, decorated: BasePlatform, trace_manager: TraceManager) -> None:
        self.decorated = decorated
        self.trace_manager = trace_manager

    def ask(
        self,
        input: PlatformInput,
        model_id: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> Result:
        forwarded = dict(options or {})
        trace_name = forwarded.pop(TRACE_NAME_OPTION, None) or COMPLETION_TRACE

        model = self.decorated.resolve_model(model_id)
        metadata = {"provider": model.provider.name, "model": model.id}

        return self._traced(
            trace_name,
            metadata,
            input,
            lambda: self.decorated.ask(input, model_id, forwarded),
            Result,
        )

    def text_to_speech(self, input: str, options: AudioOptions) -> BinaryResult:
        return self._traced(
            TEXT_TO_SPEECH_TRACE,
            {"input_length": len(input)},
            input,
            lambda: self.decorated.text_to_speech(input, options),
            BinaryResult,
        )

    def text_to_speech_stream(self, input: str, options: AudioOptions) -> StreamResult:
        return self._traced(
            TEXT_TO_SPEECH_STREAM_TRACE,
            {"input_length": len(input)},
            input,
            lambda: self.decorated.text_to_speech_stream(input, options),
            StreamResult,
        )

    def transcribe_audio(self, audio_file_path: str, options: AudioOptions) -> TextResult:
        return self._traced(
            TRANSCRIPTION_TRACE,
            {"audio_file": os.path.basename(audio_file_path)},
            audio_file_path,
            lambda: self.decorated.transcribe_audio(audio_file_path, options),
            TextResult,
        )

    def translate_audio(self, audio_file_path: str, options: AudioOptions) -> TextResult:
        return self._traced(
            TRANSLATION_TRACE,
            {"audio_file": os.path.basename(audio_file_path)},
            audio_file_path,
            lambda: self.decorated.translate_audio(audio_file_path, options),
            TextResult,
        )

    def get_provider(self, name: str) -> Provider:
        return self.decorated.get_provider(name)

    def get_available_providers(self) -> list[Provider]:
        return self.decorated.get_available_providers()

    def has_provider(self, name: str) -> bool:
        return self.decorated.has_provider(name)

    def configure_provider_default_model(self, provider_name: str, default_model: str) -> None:
        self.decorated.configure_provider_default_model(provider_name, default_model)

    def resolve_model(self, model_id: str | None) -> Model:
        return self.decorated.resolve_model(model_id)

    def _traced(
        self,
        name: str,
        metadata: Mapping[str, Any],
        input: Any,
        operation: Callable[[], Any],
        expected: type[R],
    ) -> R:
        result = self.trace_manager.trace(name, metadata, input, operation)
        if not isinstance(result, expected):
            raise TypeError(
                f"Expected {expected.__name__} from {type(self.decorated).__name__}, "
                f"got {type(result).__name__}"
            )
        return result
