"""Async HTTP client for the Exa API.

This module implements ExaClient, a thin wrapper around ``httpx`` that owns
the base URL, the ``x-api-key`` header, the per-call timeout policy, and the
mapping of HTTP failures onto the ``ExaAPIError`` hierarchy. Tools build
request bodies and reshape responses; they never touch ``httpx`` directly.

Exa API documentation: https://docs.exa.ai/

Example usage:
    client = ExaClient(api_key="...")
    data = await client.post(SEARCH_ENDPOINT, {"query": "rust async runtimes"})
"""

import logging
import os
from typing import Any, Mapping, Optional

import httpx

from exa_mcp.core.exa.errors import (
    AuthenticationError,
    ExaAPIError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

# Exa API constants
EXA_API_BASE_URL = "https://api.exa.ai"
DEFAULT_TIMEOUT = 25.0

SEARCH_ENDPOINT = "/search"
CONTENTS_ENDPOINT = "/contents"
FIND_SIMILAR_ENDPOINT = "/findSimilar"
ANSWER_ENDPOINT = "/answer"
RESEARCH_TASKS_ENDPOINT = "/research/v0/tasks"
RESEARCH_TASK_ENDPOINT = "/research/v0/tasks/{task_id}"

WEBSETS_ENDPOINT = "/websets/v0/websets"
WEBSET_ENDPOINT = "/websets/v0/websets/{webset_id}"
WEBSET_CANCEL_ENDPOINT = "/websets/v0/websets/{webset_id}/cancel"
WEBSET_SEARCHES_ENDPOINT = "/websets/v0/websets/{webset_id}/searches"
WEBSET_SEARCH_ENDPOINT = "/websets/v0/websets/{webset_id}/searches/{search_id}"
WEBSET_SEARCH_CANCEL_ENDPOINT = "/websets/v0/websets/{webset_id}/searches/{search_id}/cancel"
WEBSET_ENRICHMENTS_ENDPOINT = "/websets/v0/websets/{webset_id}/enrichments"
WEBSET_ENRICHMENT_ENDPOINT = "/websets/v0/websets/{webset_id}/enrichments/{enrichment_id}"
WEBSET_ENRICHMENT_CANCEL_ENDPOINT = (
    "/websets/v0/websets/{webset_id}/enrichments/{enrichment_id}/cancel"
)
WEBSET_ITEMS_ENDPOINT = "/websets/v0/websets/{webset_id}/items"
WEBSET_ITEM_ENDPOINT = "/websets/v0/websets/{webset_id}/items/{item_id}"
WEBSET_MONITORS_ENDPOINT = "/websets/v0/websets/{webset_id}/monitors"
WEBSET_MONITOR_ENDPOINT = "/websets/v0/websets/{webset_id}/monitors/{monitor_id}"
IMPORTS_ENDPOINT = "/websets/v0/imports"
IMPORT_ENDPOINT = "/websets/v0/imports/{import_id}"
WEBHOOKS_ENDPOINT = "/websets/v0/webhooks"
WEBHOOK_ATTEMPTS_ENDPOINT = "/websets/v0/webhooks/{webhook_id}/attempts"
EVENTS_ENDPOINT = "/websets/v0/events"
EVENT_ENDPOINT = "/websets/v0/events/{event_id}"


class ExaClient:
    """Exa API client.

    Each call opens its own ``httpx.AsyncClient``, so concurrent tool
    invocations never share connection state.

    Attributes:
        api_key: Exa API key (sent as ``x-api-key``)
        base_url: API base URL (default: https://api.exa.ai)
        timeout: Base request timeout in seconds (default: 25.0)

    Example:
        client = ExaClient(api_key="...", timeout=25.0)
        task = await client.post(RESEARCH_TASKS_ENDPOINT, body, timeout_multiplier=4)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = EXA_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the Exa client.

        Args:
            api_key: Exa API key. If not provided, reads from EXA_API_KEY env var.
                A missing key is not fatal here; the provider rejects the call
                with a 401 that surfaces as an AuthenticationError.
            base_url: API base URL (default: https://api.exa.ai)
            timeout: Base request timeout in seconds (default: 25.0)
            transport: Optional httpx transport (used by tests)
        """
        self._api_key = api_key or os.environ.get("EXA_API_KEY") or ""
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: Any) -> "ExaClient":
        """Build a client from a ``ServerConfig``."""
        return cls(
            api_key=config.exa_api_key,
            base_url=config.base_url,
            timeout=config.request_timeout,
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "content-type": "application/json",
            "x-api-key": self._api_key,
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        timeout_multiplier: float = 1.0,
    ) -> Any:
        """Execute one API request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Endpoint path relative to the base URL
            json: Request body
            params: Query parameters (None values are dropped)
            timeout_multiplier: Scale applied to the base timeout for slow endpoints

        Returns:
            Parsed JSON response, or None for an empty body

        Raises:
            AuthenticationError: If the API key is rejected
            RateLimitError: If the rate limit is exceeded
            ExaAPIError: For other HTTP errors and transport failures
        """
        url = f"{self._base_url}{path}"
        timeout = self._timeout * timeout_multiplier
        query = {k: v for k, v in (params or {}).items() if v is not None}

        logger.debug("Exa %s %s (timeout=%.1fs)", method, path, timeout)

        try:
            async with httpx.AsyncClient(
                timeout=timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method,
                    url,
                    json=dict(json) if json is not None else None,
                    params=query or None,
                    headers=self._headers(),
                )
        except httpx.TimeoutException as e:
            raise ExaAPIError(
                f"Request timed out after {timeout:.0f}s", original_error=e
            ) from e
        except httpx.RequestError as e:
            raise ExaAPIError(f"Request failed: {e}", original_error=e) from e

        if response.status_code == 401:
            raise AuthenticationError(self._extract_error_message(response, "Invalid API key"))

        if response.status_code == 429:
            raise RateLimitError(
                self._extract_error_message(response, "Rate limit exceeded"),
                retry_after=self._parse_retry_after(response),
            )

        if response.status_code >= 400:
            raise ExaAPIError(
                self._extract_error_message(response),
                status_code=response.status_code,
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ExaAPIError(
                "Invalid JSON in response",
                status_code=response.status_code,
                original_error=e,
            ) from e

    async def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        timeout_multiplier: float = 1.0,
    ) -> Any:
        return await self.request(
            "GET", path, params=params, timeout_multiplier=timeout_multiplier
        )

    async def post(
        self,
        path: str,
        body: Optional[Mapping[str, Any]] = None,
        *,
        timeout_multiplier: float = 1.0,
    ) -> Any:
        return await self.request(
            "POST", path, json=body, timeout_multiplier=timeout_multiplier
        )

    async def patch(self, path: str, body: Mapping[str, Any]) -> Any:
        return await self.request("PATCH", path, json=body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def _parse_retry_after(self, response: httpx.Response) -> Optional[float]:
        """Parse Retry-After header from response.

        Returns:
            Seconds to wait, or None if not provided
        """
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass
        return None

    def _extract_error_message(
        self, response: httpx.Response, default: Optional[str] = None
    ) -> str:
        """Extract error message from response.

        Exa reports errors under ``message`` on the search API and under
        ``error`` on the websets API.
        """
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            message = data.get("message") or data.get("error")
            if message:
                return str(message)
        if response.text:
            return response.text[:200]
        return default or response.reason_phrase or "Unknown error"
