"""Promptline configuration models."""

from promptline.models.config import (
    AsyncFlushConfig,
    CachingConfig,
    ConnectionConfig,
    FallbackConfig,
    FallbackStorageConfig,
    PromptsConfig,
    RetryConfig,
    Settings,
    TracingConfig,
    find_project_root,
    load_settings,
)

__all__ = [
    "AsyncFlushConfig",
    "CachingConfig",
    "ConnectionConfig",
    "FallbackConfig",
    "FallbackStorageConfig",
    "PromptsConfig",
    "RetryConfig",
    "Settings",
    "TracingConfig",
    "find_project_root",
    "load_settings",
]
