"""Prompt caching over a pluggable get-or-compute backend."""

from promptline.cache.backends import CacheBackend, MemoryCacheBackend, RedisCacheBackend
from promptline.cache.prompt_cache import CACHE_KEY_PREFIX, PromptCache

__all__ = [
    "CACHE_KEY_PREFIX",
    "CacheBackend",
    "MemoryCacheBackend",
    "PromptCache",
    "RedisCacheBackend",
]
