"""Configuration models for Promptline.

Captures promptline.yaml: Langfuse connection settings, tracing
behavior, and prompt caching / fallback storage.
"""

from __future__ import annotations

import base64
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

CONFIG_FILENAME = "promptline.yaml"
DEFAULT_FALLBACK_PATH = "var/prompts"


class RetryConfig(BaseModel):
    """Retry policy for trace delivery. ``delay`` is in milliseconds."""

    model_config = {"extra": "forbid"}

    max_attempts: int = Field(default=3, ge=1)
    delay: int = Field(default=1000, ge=0)


class ConnectionConfig(BaseModel):
    """Langfuse API credentials and transport settings."""

    model_config = {"extra": "forbid"}

    public_key: str
    secret_key: str
    host: str = "https://cloud.langfuse.com"
    timeout: int = Field(default=30, ge=1)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    def auth_header(self) -> str:
        """Return the Authorization header value for the key pair."""
        token = base64.b64encode(f"{self.public_key}:{self.secret_key}".encode()).decode("ascii")
        return f"Basic {token}"

    def url(self, path: str) -> str:
        return self.host.rstrip("/") + "/" + path.lstrip("/")


class AsyncFlushConfig(BaseModel):
    """Out-of-band trace delivery through a message bus."""

    model_config = {"extra": "forbid"}

    enabled: bool = False
    message_bus: str = "threaded"


class TracingConfig(BaseModel):
    """Controls whether and how often AI calls are traced."""

    model_config = {"extra": "forbid"}

    enabled: bool = True
    sampling_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    async_flush: AsyncFlushConfig = Field(default_factory=AsyncFlushConfig)


class CachingConfig(BaseModel):
    """Prompt cache settings. ``service`` names the cache backend."""

    model_config = {"extra": "forbid"}

    enabled: bool = False
    ttl: int = Field(default=3600, ge=0)
    service: str = "memory"


class FallbackStorageConfig(BaseModel):
    """Where fallback prompts live: a directory path or a filesystem service."""

    model_config = {"extra": "forbid"}

    path: str | None = None
    service: str | None = None

    @model_validator(mode="after")
    def _path_and_service_exclusive(self) -> FallbackStorageConfig:
        if self.path and self.service:
            raise ValueError("Cannot specify both path and service for fallback storage")
        return self


class FallbackConfig(BaseModel):
    """Local fallback storage used when the Langfuse API is unreachable."""

    model_config = {"extra": "forbid"}

    enabled: bool = True
    storage: FallbackStorageConfig = Field(default_factory=FallbackStorageConfig)

    @model_validator(mode="after")
    def _default_storage_path(self) -> FallbackConfig:
        if self.enabled and not self.storage.path and not self.storage.service:
            self.storage = FallbackStorageConfig(path=DEFAULT_FALLBACK_PATH)
        return self


class PromptsConfig(BaseModel):
    """Prompt resolution settings."""

    model_config = {"extra": "forbid"}

    caching: CachingConfig = Field(default_factory=CachingConfig)
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)


class Settings(BaseModel):
    """Top-level configuration loaded from promptline.yaml."""

    model_config = {"extra": "forbid"}

    environment: str = "production"
    connection: ConnectionConfig
    tracing: TracingConfig = Field(default_factory=TracingConfig)
    prompts: PromptsConfig = Field(default_factory=PromptsConfig)


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for promptline.yaml.

    Args:
        start: Starting path (file or directory). Defaults to cwd.

    Returns:
        The directory containing promptline.yaml, or cwd if none is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists():
            return current
        current = current.parent
    return Path.cwd()


def load_settings(project_root: Path | None = None, config_path: Path | None = None) -> Settings:
    """Load Settings from promptline.yaml.

    Args:
        project_root: Directory holding promptline.yaml. If None, uses
            find_project_root() to locate it.
        config_path: Explicit config file; overrides project_root.

    Returns:
        Validated Settings instance.

    Raises:
        FileNotFoundError: If the config file does not exist.
        pydantic.ValidationError: If the file content is invalid.
    """
    if config_path is None:
        if project_root is None:
            project_root = find_project_root()
        config_path = project_root / CONFIG_FILENAME

    import yaml

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    return Settings.model_validate(raw or {})
