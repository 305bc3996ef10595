"""Tests for the canonical_tool registration wrapper."""

import pytest
from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent

from exa_mcp.core.context import get_correlation_id, get_tool_name
from exa_mcp.core.naming import canonical_tool
from tests.conftest import assert_error_envelope


@pytest.fixture
def mcp():
    return FastMCP("test")


class TestCanonicalTool:
    @pytest.mark.asyncio
    async def test_text_results_pass_through(self, mcp):
        @canonical_tool(mcp, canonical_name="echo_exa")
        async def echo(value: str) -> str:
            """Echo the value."""
            return f"echo: {value}"

        assert await echo(value="hi") == "echo: hi"

    @pytest.mark.asyncio
    async def test_dict_results_are_minified(self, mcp):
        @canonical_tool(mcp, canonical_name="dict_exa")
        async def as_dict() -> dict:
            return {"success": False, "data": {"a": 1}}

        result = await as_dict()

        assert isinstance(result, TextContent)
        assert result.text == '{"success":false,"data":{"a":1}}'

    @pytest.mark.asyncio
    async def test_runs_inside_request_context(self, mcp):
        seen = {}

        @canonical_tool(mcp, canonical_name="context_exa")
        async def capture() -> str:
            seen["tool"] = get_tool_name()
            seen["corr"] = get_correlation_id()
            return "ok"

        await capture()

        assert seen["tool"] == "context_exa"
        assert seen["corr"].startswith("context_exa_")
        assert get_correlation_id() == ""

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_internal_error(self, mcp):
        @canonical_tool(mcp, canonical_name="broken_exa")
        async def broken() -> str:
            raise RuntimeError("kaboom")

        payload = assert_error_envelope(
            await broken(),
            error_code="INTERNAL_ERROR",
            message_prefix="broken_exa error: kaboom",
        )
        assert payload["meta"]["request_id"].startswith("broken_exa_")

    @pytest.mark.asyncio
    async def test_registered_under_canonical_name(self, mcp):
        @canonical_tool(mcp, canonical_name="named_exa")
        async def some_function(query: str) -> str:
            """Describe the tool."""
            return query

        tools = await mcp.list_tools()

        assert [t.name for t in tools] == ["named_exa"]
        assert tools[0].description == "Describe the tool."

    @pytest.mark.asyncio
    async def test_call_through_server(self, mcp):
        @canonical_tool(mcp, canonical_name="upper_exa")
        async def upper(text: str) -> str:
            return text.upper()

        result = await mcp.call_tool("upper_exa", {"text": "abc"})

        blocks = result[0] if isinstance(result, tuple) else result
        assert blocks[0].text == "ABC"
