"""PromptRegistry: cache -> Langfuse API -> fallback storage resolution.

The main entry point for application code that needs prompts. Reads
go through the cache when one is configured; cache misses (and
uncached reads) fetch from the API, persisting successful fetches to
fallback storage and falling back to the stored copy when the API
fails.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from promptline.cache.prompt_cache import PromptCache
from promptline.client.prompt_client import PromptClient
from promptline.errors import DeserializationError, InvalidPromptError, RemoteError
from promptline.prompts.conversation import Conversation
from promptline.prompts.deserializer import PromptDeserializer
from promptline.storage.base import PromptStorage

logger = structlog.get_logger(__name__)


class PromptRegistry:
    """Resolves prompts by name, version and label."""

    def __init__(
        self,
        client: PromptClient,
        cache: PromptCache,
        storage: PromptStorage,
        deserializer: PromptDeserializer | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.storage = storage
        self.deserializer = deserializer or PromptDeserializer()

    def get(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
        use_cache: bool = True,
    ) -> Conversation:
        """Resolve and deserialize a prompt.

        Raises:
            RemoteError: If the API failed and no stored copy exists.
            InvalidPromptError: If the resolved data is not a usable prompt.
        """
        prompt_data = self.get_raw(name, version, label, use_cache)
        try:
            return self.deserializer.deserialize(prompt_data)
        except DeserializationError as exc:
            raise InvalidPromptError(name, exc) from exc

    def get_compiled(
        self,
        name: str,
        parameters: Mapping[str, Any],
        version: int | None = None,
        label: str | None = None,
        use_cache: bool = True,
    ) -> Conversation:
        """Resolve a prompt and substitute parameters into every message."""
        conversation = self.get(name, version, label, use_cache)
        return conversation.with_parameters(parameters)

    def has(self, name: str, version: int | None = None, label: str | None = None) -> bool:
        """Check fallback storage only; never touches the cache or the API."""
        return self.storage.exists(name, version, label)

    def get_raw(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
        use_cache: bool = True,
    ) -> dict[str, Any]:
        """Resolve raw prompt data without deserializing it."""
        if not use_cache or not self.cache.is_available():
            return self._fetch_or_fallback(name, version, label)

        cache_key = self.cache.build_key(name, version, label)
        return self.cache.get(cache_key, lambda: self._fetch_or_fallback(name, version, label))

    def _fetch_or_fallback(
        self, name: str, version: int | None, label: str | None
    ) -> dict[str, Any]:
        try:
            prompt = self.client.get_prompt(name, version, label)
        except RemoteError as exc:
            logger.warning(
                "prompt_fetch_failed",
                name=name,
                version=version,
                label=label,
                status_code=exc.status_code,
                error=str(exc),
            )
            if self.storage.is_available():
                stored = self.storage.load(name, version, label)
                if stored is not None:
                    logger.info("prompt_served_from_fallback", name=name, version=version, label=label)
                    return stored
            raise

        if self.storage.is_available():
            self.storage.save(name, prompt, version, label)

        return prompt
