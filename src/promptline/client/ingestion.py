"""Langfuse ingestion API client.

Events are buffered in memory and sent as one batch on flush():

    POST {host}/api/public/ingestion
    {"batch": [{"id", "timestamp", "type", "body"}, ...]}

Traces are upserted by id, so ending a trace re-sends ``trace-create``
with the final fields.
"""

from __future__ import annotations

import json
import threading
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import httpx
import structlog

from promptline.client.retry import retry_with_backoff
from promptline.errors import TraceDeliveryError
from promptline.models.config import ConnectionConfig

logger = structlog.get_logger(__name__)

INGESTION_ENDPOINT = "api/public/ingestion"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _compact(body: dict[str, Any]) -> dict[str, Any]:
    """Drop None-valued fields from an event body."""
    return {key: value for key, value in body.items() if value is not None}


class GenerationHandle:
    """A model generation inside a trace."""

    def __init__(self, client: IngestionClient, generation_id: str, trace_id: str) -> None:
        self.client = client
        self.id = generation_id
        self.trace_id = trace_id
        self.usage_details: dict[str, int] | None = None

    def with_usage(self, usage_details: dict[str, int]) -> GenerationHandle:
        """Attach token usage, sent when the generation ends."""
        self.usage_details = dict(usage_details)
        return self

    def end(
        self,
        output: Any = None,
        error: str | None = None,
        level: str | None = None,
    ) -> None:
        self.client.enqueue(
            "generation-update",
            _compact(
                {
                    "id": self.id,
                    "traceId": self.trace_id,
                    "endTime": _timestamp(),
                    "output": output,
                    "level": level,
                    "statusMessage": error,
                    "usageDetails": self.usage_details,
                }
            ),
        )


class TraceHandle:
    """A trace whose create event has been buffered."""

    def __init__(self, client: IngestionClient, trace_id: str, name: str) -> None:
        self.client = client
        self.id = trace_id
        self.name = name

    def generation(
        self,
        name: str,
        model: str,
        model_parameters: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
        input: Any = None,
    ) -> GenerationHandle:
        generation_id = str(uuid.uuid4())
        self.client.enqueue(
            "generation-create",
            _compact(
                {
                    "id": generation_id,
                    "traceId": self.id,
                    "name": name,
                    "startTime": _timestamp(),
                    "model": model,
                    "modelParameters": model_parameters,
                    "metadata": metadata,
                    "input": input,
                }
            ),
        )
        return GenerationHandle(self.client, generation_id, self.id)

    def end(
        self,
        output: Any = None,
        status: str | None = None,
        error: str | None = None,
        level: str | None = None,
    ) -> None:
        """Upsert the trace with its outcome."""
        outcome = _compact({"status": status, "error": error, "level": level})
        self.client.enqueue(
            "trace-create",
            _compact(
                {
                    "id": self.id,
                    "timestamp": _timestamp(),
                    "output": output,
                    "metadata": outcome or None,
                }
            ),
        )


class IngestionClient:
    """Buffers ingestion events and delivers them in batches.

    flush() retries transient failures using the connection retry policy
    and raises TraceDeliveryError once delivery has definitively failed.
    A failed batch is dropped, never requeued.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self._http = http_client or httpx.Client(timeout=config.timeout)
        self._sleep = sleep
        self._events: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def enqueue(self, event_type: str, body: dict[str, Any]) -> None:
        event = {
            "id": str(uuid.uuid4()),
            "timestamp": _timestamp(),
            "type": event_type,
            "body": body,
        }
        with self._lock:
            self._events.append(event)

    def pending(self) -> int:
        with self._lock:
            return len(self._events)

    def trace(
        self,
        name: str,
        metadata: dict[str, Any] | None = None,
        tags: list[str] | None = None,
        input: Any = None,
        output: Any = None,
        environment: str | None = None,
        user_id: str | None = None,
        session_id: str | None = None,
        version: str | None = None,
        release: str | None = None,
    ) -> TraceHandle:
        trace_id = str(uuid.uuid4())
        self.enqueue(
            "trace-create",
            _compact(
                {
                    "id": trace_id,
                    "timestamp": _timestamp(),
                    "name": name,
                    "metadata": metadata,
                    "tags": tags,
                    "input": input,
                    "output": output,
                    "environment": environment,
                    "userId": user_id,
                    "sessionId": session_id,
                    "version": version,
                    "release": release,
                }
            ),
        )
        return TraceHandle(self, trace_id, name)

    def flush(self) -> None:
        """Send all buffered events.

        Raises:
            TraceDeliveryError: If the batch could not be delivered or
                Langfuse rejected any of its events.
        """
        with self._lock:
            batch, self._events = self._events, []

        if not batch:
            return

        try:
            response = retry_with_backoff(
                lambda: self._post(batch),
                max_retries=self.config.retry.max_attempts - 1,
                base_delay=self.config.retry.delay / 1000,
                sleep=self._sleep,
            )
        except Exception as exc:
            raise TraceDeliveryError(
                f"Failed to deliver {len(batch)} trace event(s): {exc}"
            ) from exc

        errors = self._rejected_events(response)
        if errors:
            raise TraceDeliveryError(
                f"Langfuse rejected {len(errors)} of {len(batch)} trace event(s): "
                f"{errors[0].get('message') or errors[0].get('error') or errors[0]}"
            )

        logger.debug("trace_events_flushed", count=len(batch))

    def _post(self, batch: list[dict[str, Any]]) -> httpx.Response:
        # default=str keeps arbitrary metadata values from failing the batch
        payload = json.dumps({"batch": batch}, ensure_ascii=False, default=str)
        response = self._http.post(
            self.config.url(INGESTION_ENDPOINT),
            content=payload.encode("utf-8"),
            headers={
                "Authorization": self.config.auth_header(),
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=self.config.timeout,
        )
        response.raise_for_status()
        return response

    @staticmethod
    def _rejected_events(response: httpx.Response) -> list[dict[str, Any]]:
        try:
            data = response.json()
        except ValueError:
            return []
        if not isinstance(data, dict):
            return []
        errors = data.get("errors") or []
        return [error for error in errors if isinstance(error, dict)]

    def close(self) -> None:
        self._http.close()
