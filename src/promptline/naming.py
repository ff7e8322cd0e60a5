"""Prompt identifiers shared by the cache and fallback storage.

The label is hashed rather than embedded so identifiers stay
filesystem-safe and bounded in length.
"""

from __future__ import annotations

import hashlib


class PromptIdentifier:
    """Builds deterministic identifiers from name, version and label."""

    def build(self, name: str, version: int | None = None, label: str | None = None) -> str:
        """Return ``name[_v{version}][_l{md5(label)}]``.

        A version of 0 is still appended; only None is treated as absent.
        """
        identifier = name

        if version is not None:
            identifier += f"_v{version}"

        if label is not None:
            digest = hashlib.md5(label.encode("utf-8")).hexdigest()  # noqa: S324
            identifier += f"_l{digest}"

        return identifier


def build_identifier(name: str, version: int | None = None, label: str | None = None) -> str:
    """Module-level shortcut for PromptIdentifier().build()."""
    return PromptIdentifier().build(name, version, label)
