"""Synchronous retry for Langfuse requests.

Retries timeouts, connection failures and rate-limit or server-side
HTTP statuses with exponential backoff and full jitter. Anything else
is raised on the first attempt.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from typing import Any

import httpx

# Exception types considered transient (network-level issues)
TRANSIENT_EXCEPTIONS: tuple[type[Exception], ...] = (
    TimeoutError,
    ConnectionError,
    httpx.TimeoutException,
    httpx.NetworkError,
)

# HTTP status codes considered transient (rate-limit, server errors)
TRANSIENT_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503})


def _is_transient(exc: Exception) -> bool:
    """Check if an exception represents a transient error.

    Matches against known transient exception types, then checks
    for HTTP status codes on httpx errors or status attributes.
    """
    if isinstance(exc, TRANSIENT_EXCEPTIONS):
        return True

    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in TRANSIENT_STATUS_CODES

    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    if status is not None and status in TRANSIENT_STATUS_CODES:
        return True

    return False


def retry_with_backoff(
    fn: Callable[[], Any],
    max_retries: int = 2,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Call fn, retrying on transient errors.

    Uses exponential backoff with full jitter to avoid thundering herd.

    Args:
        fn: Zero-argument callable performing one attempt.
        max_retries: Maximum number of retries (total calls = max_retries + 1).
        base_delay: Initial backoff delay in seconds.
        max_delay: Maximum backoff delay cap in seconds.
        sleep: Sleep function, replaceable in tests.

    Returns:
        The return value of the first successful call.

    Raises:
        Exception: The last exception if all retries exhausted or non-transient.
    """
    for attempt in range(max_retries + 1):
        try:
            return fn()
        except Exception as exc:
            is_last = attempt == max_retries
            if not _is_transient(exc) or is_last:
                raise

            delay = min(base_delay * (2**attempt), max_delay)
            sleep(random.uniform(0, delay))  # noqa: S311

    # Unreachable, but satisfies type checker
    raise RuntimeError("Retry loop exited unexpectedly")  # pragma: no cover
