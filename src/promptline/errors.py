"""Exception hierarchy for Promptline.

Only RemoteError (once fallback storage is exhausted) and
InvalidPromptError reach PromptRegistry callers. StorageError and
TraceDeliveryError are raised by low-level components and downgraded
to log entries by the layers above them.
"""

from __future__ import annotations


class PromptlineError(Exception):
    """Base class for all Promptline errors."""


class RemoteError(PromptlineError):
    """A Langfuse API call failed.

    Attributes:
        status_code: HTTP status for HTTP-level failures, 404 for a
            missing prompt, 0 for transport and payload failures.
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class PromptNotFoundError(RemoteError):
    """The requested prompt does not exist in Langfuse."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Prompt "{name}" not found in Langfuse', status_code=404)
        self.name = name


class DeserializationError(PromptlineError):
    """Prompt data could not be turned into a Conversation."""


class InvalidPromptError(DeserializationError):
    """A resolved prompt failed deserialization.

    Wraps the underlying DeserializationError with the prompt name.
    """

    def __init__(self, prompt_name: str, cause: Exception) -> None:
        super().__init__(f'Failed to deserialize prompt "{prompt_name}": {cause}')
        self.prompt_name = prompt_name


class StorageError(PromptlineError):
    """A fallback storage backend cannot operate (e.g. unwritable directory)."""


class TraceDeliveryError(PromptlineError):
    """Trace events could not be delivered to Langfuse."""
