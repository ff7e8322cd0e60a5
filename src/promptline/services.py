"""Resolve dotted-path service references from configuration.

Configuration names pluggable collaborators (cache backends, fallback
filesystems, message buses) by dotted path, e.g.
``myapp.services.make_cache``. The target may be a class or a factory
function; it is called with no arguments and the result is checked
against the expected type.
"""

from __future__ import annotations

import importlib
from typing import Any


def resolve_service(dotted_path: str, expected: type | None = None) -> Any:
    """Import and instantiate the service at dotted_path.

    Args:
        dotted_path: Fully-qualified path to a class or zero-argument
            factory (e.g., ``"my.module.make_bus"``).
        expected: Type (or runtime-checkable Protocol) the resulting
            service must be an instance of.

    Returns:
        The service instance.

    Raises:
        ValueError: If dotted_path is not of the form 'module.attribute'.
        ImportError: If the module or attribute cannot be found.
        TypeError: If the target is not callable or the service has the
            wrong type.
    """
    module_path, _, attr_name = dotted_path.rpartition(".")
    if not module_path or not attr_name:
        raise ValueError(
            f"Invalid service path '{dotted_path}'. "
            f"Expected format: 'module.path.factory'."
        )

    module = importlib.import_module(module_path)

    try:
        target = getattr(module, attr_name)
    except AttributeError:
        raise ImportError(
            f"Module '{module_path}' has no attribute '{attr_name}'."
        ) from None

    if not callable(target):
        raise TypeError(f"'{dotted_path}' is not a class or factory function.")

    service = target()

    if expected is not None and not isinstance(service, expected):
        raise TypeError(
            f"'{dotted_path}' produced {type(service).__name__}, "
            f"expected {expected.__name__}."
        )

    return service
