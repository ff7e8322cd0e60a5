"""Assemble Promptline components from Settings.

This is the composition root: every collaborator is built here and
passed explicitly, so the library classes never read configuration
themselves.
"""

from __future__ import annotations

from pathlib import Path

import fsspec
import structlog
from fsspec import AbstractFileSystem

from promptline.cache.backends import CacheBackend, MemoryCacheBackend, RedisCacheBackend
from promptline.cache.prompt_cache import PromptCache
from promptline.client.ingestion import IngestionClient
from promptline.client.prompt_client import PromptClient
from promptline.client.trace_client import TraceClient
from promptline.messaging.bus import MessageBus, ThreadedMessageBus
from promptline.messaging.handler import FlushTraceHandler
from promptline.models.config import CachingConfig, FallbackConfig, FallbackStorageConfig, Settings
from promptline.platform.base import BasePlatform
from promptline.platform.traced import TracedPlatform
from promptline.prompts.registry import PromptRegistry
from promptline.services import resolve_service
from promptline.storage.factory import StorageFactory
from promptline.tracing.clock import SystemClock
from promptline.tracing.flushers import AsyncTraceFlusher, SyncTraceFlusher, TraceFlusher
from promptline.tracing.manager import TraceManager

logger = structlog.get_logger(__name__)

MEMORY_CACHE = "memory"
THREADED_BUS = "threaded"
_REDIS_SCHEMES = ("redis://", "rediss://")


def build_cache_backend(caching: CachingConfig) -> CacheBackend | None:
    """Create the cache backend named by ``caching.service``.

    Returns None when caching is disabled.
    """
    if not caching.enabled:
        return None

    service = caching.service
    if service == MEMORY_CACHE:
        return MemoryCacheBackend()
    if service.startswith(_REDIS_SCHEMES):
        return RedisCacheBackend.from_url(service)
    return resolve_service(service, CacheBackend)


def build_storage_factory(fallback: FallbackConfig) -> StorageFactory:
    """Create a StorageFactory, resolving ``fallback.storage.service``.

    The service may be an fsspec URL (``memory://prompts``,
    ``s3://bucket/prompts``) or a dotted path to a factory returning an
    AbstractFileSystem.
    """
    service = fallback.storage.service
    if not fallback.enabled or not service:
        return StorageFactory()

    if "://" in service:
        filesystem, root = fsspec.core.url_to_fs(service)
        return StorageFactory(filesystem=filesystem, filesystem_root=root)

    return StorageFactory(filesystem=resolve_service(service, AbstractFileSystem))


def _resolve_fallback_path(fallback: FallbackConfig, project_root: Path) -> FallbackConfig:
    path = fallback.storage.path
    if not path or Path(path).is_absolute():
        return fallback
    return fallback.model_copy(
        update={"storage": FallbackStorageConfig(path=str(project_root / path))}
    )


def build_prompt_registry(settings: Settings, project_root: Path) -> PromptRegistry:
    """Create a PromptRegistry with client, cache and fallback storage.

    Relative fallback paths are resolved against project_root.
    """
    prompts = settings.prompts
    fallback = _resolve_fallback_path(prompts.fallback, project_root)

    storage = build_storage_factory(fallback).create(fallback)
    cache = PromptCache(build_cache_backend(prompts.caching), ttl=prompts.caching.ttl)
    client = PromptClient(settings.connection)

    logger.debug(
        "prompt_registry_built",
        cache_enabled=cache.is_available(),
        fallback_enabled=fallback.enabled,
    )
    return PromptRegistry(client, cache, storage)


def build_trace_client(settings: Settings) -> TraceClient:
    return TraceClient(IngestionClient(settings.connection))


def build_message_bus(service: str, sync_flusher: SyncTraceFlusher) -> MessageBus:
    """Create the async delivery bus named by ``async_flush.message_bus``."""
    if service == THREADED_BUS:
        return ThreadedMessageBus(FlushTraceHandler(sync_flusher))
    return resolve_service(service, MessageBus)


def build_trace_manager(
    settings: Settings, trace_client: TraceClient | None = None
) -> TraceManager:
    """Create a TraceManager with the configured flush strategy."""
    tracing = settings.tracing
    sync_flusher = SyncTraceFlusher(trace_client or build_trace_client(settings))

    flusher: TraceFlusher = sync_flusher
    if tracing.async_flush.enabled:
        bus = build_message_bus(tracing.async_flush.message_bus, sync_flusher)
        flusher = AsyncTraceFlusher(bus)

    return TraceManager(
        flusher,
        SystemClock(),
        settings.environment,
        enabled=tracing.enabled,
        sampling_rate=tracing.sampling_rate,
    )


def build_traced_platform(
    platform: BasePlatform,
    settings: Settings,
    trace_manager: TraceManager | None = None,
) -> TracedPlatform:
    """Wrap platform so that every AI call is traced."""
    return TracedPlatform(platform, trace_manager or build_trace_manager(settings))
