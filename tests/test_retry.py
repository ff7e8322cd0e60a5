"""Tests for promptline.client.retry - transient error retry with backoff."""

from __future__ import annotations

import httpx
import pytest

from promptline.client.retry import _is_transient, retry_with_backoff


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://langfuse.test/api/public/ingestion")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class TestIsTransient:
    """Test _is_transient detection logic."""

    def test_timeout_error_is_transient(self):
        assert _is_transient(TimeoutError("timed out")) is True

    def test_connection_error_is_transient(self):
        assert _is_transient(ConnectionError("refused")) is True

    def test_httpx_connect_error_is_transient(self):
        assert _is_transient(httpx.ConnectError("refused")) is True

    def test_httpx_timeout_is_transient(self):
        assert _is_transient(httpx.ReadTimeout("slow")) is True

    def test_value_error_not_transient(self):
        assert _is_transient(ValueError("bad input")) is False

    @pytest.mark.parametrize("status", [429, 500, 502, 503])
    def test_transient_http_statuses(self, status):
        assert _is_transient(_status_error(status)) is True

    @pytest.mark.parametrize("status", [400, 401, 404])
    def test_client_errors_not_transient(self, status):
        assert _is_transient(_status_error(status)) is False

    def test_status_code_attribute(self):
        exc = Exception("rate limited")
        exc.status_code = 429  # type: ignore[attr-defined]
        assert _is_transient(exc) is True


class TestRetryWithBackoff:
    """Test retry_with_backoff retry logic."""

    def test_success_no_retry(self):
        """Immediate success returns without sleeping."""
        sleeps = []
        assert retry_with_backoff(lambda: "ok", sleep=sleeps.append) == "ok"
        assert sleeps == []

    def test_transient_then_success(self):
        """A transient failure is retried."""
        attempts = []
        sleeps = []

        def fn():
            attempts.append(1)
            if len(attempts) < 3:
                raise ConnectionError("refused")
            return "ok"

        result = retry_with_backoff(fn, max_retries=2, base_delay=0.5, sleep=sleeps.append)
        assert result == "ok"
        assert len(attempts) == 3
        assert len(sleeps) == 2
        assert 0 <= sleeps[0] <= 0.5
        assert 0 <= sleeps[1] <= 1.0

    def test_exhausted_raises_last_error(self):
        """The last transient error is raised once retries run out."""
        attempts = []

        def fn():
            attempts.append(1)
            raise TimeoutError(f"attempt {len(attempts)}")

        with pytest.raises(TimeoutError, match="attempt 3"):
            retry_with_backoff(fn, max_retries=2, sleep=lambda _: None)
        assert len(attempts) == 3

    def test_non_transient_not_retried(self):
        """Non-transient errors are raised immediately."""
        attempts = []

        def fn():
            attempts.append(1)
            raise ValueError("bad payload")

        with pytest.raises(ValueError):
            retry_with_backoff(fn, max_retries=5, sleep=lambda _: None)
        assert len(attempts) == 1

    def test_delay_capped(self):
        """Backoff never exceeds max_delay."""
        sleeps = []

        def fn():
            raise ConnectionError("refused")

        with pytest.raises(ConnectionError):
            retry_with_backoff(fn, max_retries=6, base_delay=1.0, max_delay=2.0, sleep=sleeps.append)
        assert all(delay <= 2.0 for delay in sleeps)
