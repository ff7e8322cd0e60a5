"""Shared fixtures for the Promptline test suite."""

from __future__ import annotations

import pytest
import structlog

from promptline.models.config import ConnectionConfig


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Give each test structlog's defaults so capture_logs sees every event."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def connection_config() -> ConnectionConfig:
    return ConnectionConfig(
        public_key="pk-lf-test",
        secret_key="sk-lf-test",
        host="https://langfuse.test",
        retry={"max_attempts": 3, "delay": 10},
    )
