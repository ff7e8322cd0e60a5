"""Client for the Langfuse prompt API."""

from __future__ import annotations

from typing import Any

import httpx

from promptline.errors import PromptNotFoundError, RemoteError
from promptline.models.config import ConnectionConfig

PROMPTS_ENDPOINT = "api/public/prompts"

# Prompt fetches sit on the caller's request path; the ceiling is fixed.
REQUEST_TIMEOUT = 30.0


class PromptClient:
    """Fetches raw prompt data from Langfuse over HTTP.

    Every failure mode (transport error, non-2xx status, unparsable or
    non-object JSON) is normalized into RemoteError; a 404 becomes
    PromptNotFoundError.
    """

    def __init__(self, config: ConnectionConfig, http_client: httpx.Client | None = None) -> None:
        self.config = config
        self._http = http_client or httpx.Client(timeout=REQUEST_TIMEOUT)

    def get_prompt(
        self, name: str, version: int | None = None, label: str | None = None
    ) -> dict[str, Any]:
        """Fetch a prompt by name and optional version/label.

        Raises:
            PromptNotFoundError: If Langfuse has no such prompt.
            RemoteError: For any other failure.
        """
        params: dict[str, str] = {"name": name}
        if version is not None:
            params["version"] = str(version)
        if label is not None:
            params["label"] = label

        try:
            return self._get(params)
        except RemoteError as exc:
            if exc.status_code == 404:
                raise PromptNotFoundError(name) from exc
            raise

    def _get(self, params: dict[str, str]) -> dict[str, Any]:
        try:
            response = self._http.get(
                self.config.url(PROMPTS_ENDPOINT),
                params=params,
                headers={
                    "Authorization": self.config.auth_header(),
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 404:
                raise RemoteError("Resource not found", status_code=404) from exc
            raise RemoteError(f"Request failed: HTTP {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            raise RemoteError(f"HTTP request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteError("Invalid JSON response from Langfuse API") from exc

        if not isinstance(data, dict):
            raise RemoteError("Invalid JSON response from Langfuse API")

        return data

    def close(self) -> None:
        self._http.close()
