"""Tests for the MCP server wiring."""

import json

import httpx
import pytest
from mcp.types import TextContent

from klaud_mcp.config.settings import Settings
from klaud_mcp.core.dispatcher import Dispatcher
from klaud_mcp.registry.operations import create_registry
from klaud_mcp.server import KlaudMCPServer, ToolInvocationError


@pytest.fixture
def upstream_requests():
    return []


@pytest.fixture
def server(upstream_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(request)
        if request.url.path == "/api/crypto":
            return httpx.Response(500, text="boom")
        return httpx.Response(200, json={"posts": [{"title": "hello"}]})

    settings = Settings(api_base="https://upstream.test", environ={})
    registry = create_registry()
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    dispatcher = Dispatcher(settings, registry=registry, client=client)
    return KlaudMCPServer(settings, registry=registry, dispatcher=dispatcher)


class TestToolListing:

    def test_one_tool_per_operation(self, server):
        tools = server.list_tools()

        assert [t.name for t in tools] == server.registry.names()

    def test_tool_schema_matches_registry(self, server):
        tools = {t.name: t for t in server.list_tools()}
        operation = server.registry.resolve("search_pubmed")

        assert tools["search_pubmed"].description == operation.description
        assert tools["search_pubmed"].inputSchema == operation.input_schema
        assert tools["search_pubmed"].inputSchema["required"] == ["query"]


class TestToolCalls:

    @pytest.mark.asyncio
    async def test_success_returns_pretty_json(self, server):
        content = await server.call_tool("search_hackernews", {"category": "ai", "limit": 1})

        assert len(content) == 1
        assert isinstance(content[0], TextContent)
        assert content[0].text == json.dumps({"posts": [{"title": "hello"}]}, indent=2)

    @pytest.mark.asyncio
    async def test_upstream_failure_raises_for_error_flag(self, server):
        with pytest.raises(ToolInvocationError) as exc_info:
            await server.call_tool("get_crypto_prices", {})

        assert str(exc_info.value) == "API 500: boom"

    @pytest.mark.asyncio
    async def test_invalid_argument_raises(self, server, upstream_requests):
        with pytest.raises(ToolInvocationError) as exc_info:
            await server.call_tool("extract_url", {"url": "not-a-url"})

        assert "url" in str(exc_info.value)
        assert upstream_requests == []

    @pytest.mark.asyncio
    async def test_none_arguments_accepted(self, server):
        content = await server.call_tool("search_hackernews", None)

        assert content[0].text
