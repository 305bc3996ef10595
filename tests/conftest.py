"""
Root pytest configuration and shared fixtures.

Provides a fake Exa API served through ``httpx.MockTransport`` and helpers
for decoding tool results.
"""

import json
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx
import pytest
from mcp.types import TextContent

from exa_mcp.core.exa.client import ExaClient

# Response contract version from responses.py
RESPONSE_CONTRACT_VERSION = "response-v2"


def extract_response_dict(result: Union[Dict[str, Any], TextContent, str]) -> Dict[str, Any]:
    """Extract dict from tool result, handling dict, TextContent and JSON text.

    Tools wrapped with canonical_tool return TextContent with minified JSON
    for error envelopes; handlers called directly return the raw dict.

    Raises:
        TypeError: If result is not one of the supported shapes
        json.JSONDecodeError: If the text is not valid JSON
    """
    if isinstance(result, dict):
        return result
    if isinstance(result, TextContent):
        return json.loads(result.text)
    if isinstance(result, str):
        return json.loads(result)
    raise TypeError(f"Expected dict, TextContent or str, got {type(result).__name__}")


def assert_error_envelope(result: Any, *, error_code: str, message_prefix: Optional[str] = None) -> Dict[str, Any]:
    """Assert ``result`` is a failed response-v2 envelope and return it."""
    payload = extract_response_dict(result)
    assert payload["success"] is False
    assert payload["meta"]["version"] == RESPONSE_CONTRACT_VERSION
    assert payload["data"]["error_code"] == error_code
    if message_prefix is not None:
        assert payload["error"].startswith(message_prefix), payload["error"]
    return payload


class FakeExaAPI:
    """In-memory stand-in for api.exa.ai.

    Routes are keyed by ``(method, path)``. Each route holds a queue of
    responses; the last one repeats once the queue is drained. A queued
    exception is raised from the transport instead of answering.
    """

    def __init__(self) -> None:
        self._routes: Dict[Tuple[str, str], List[Any]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Any) -> "FakeExaAPI":
        """Queue responses: ``(status, body)`` tuples, bare JSON bodies, or exceptions."""
        self._routes.setdefault((method.upper(), path), []).extend(responses)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"error": f"No route for {request.method} {request.url.path}"})

        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        if isinstance(entry, tuple):
            status, body = entry
        else:
            status, body = 200, entry
        if body is None:
            return httpx.Response(status)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def body(self, index: int = -1) -> Any:
        """Decoded JSON body of a recorded request."""
        return json.loads(self.requests[index].content)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def exa_api() -> FakeExaAPI:
    return FakeExaAPI()


@pytest.fixture
def client(exa_api: FakeExaAPI) -> ExaClient:
    """ExaClient wired to the fake API."""
    return ExaClient(api_key="test-key", transport=httpx.MockTransport(exa_api.handler))


class FakeClock:
    """Deterministic clock whose ``sleep`` advances time instantly."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
