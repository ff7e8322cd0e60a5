"""Fallback prompt storage: backends, failure wrapper, and strategy selector."""

from promptline.storage.base import PromptStorage, decode_prompt, encode_prompt
from promptline.storage.factory import StorageFactory
from promptline.storage.fs_store import FilesystemPromptStorage
from promptline.storage.path_store import PathPromptStorage
from promptline.storage.registry import PromptStorageRegistry
from promptline.storage.safe import SafePromptStorage

__all__ = [
    "FilesystemPromptStorage",
    "PathPromptStorage",
    "PromptStorage",
    "PromptStorageRegistry",
    "SafePromptStorage",
    "StorageFactory",
    "decode_prompt",
    "encode_prompt",
]
