"""
Unit tests for MCP server construction and the stdio entry point.

Run with: pytest tests/test_server.py -v
"""

import os
import sys
import asyncio
from unittest.mock import create_autospec, patch

import pytest
import mcp.types as types
from mem0 import AsyncMemoryClient

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from mem0_memory_mcp import server as server_module
from mem0_memory_mcp.dispatcher import Dispatcher
from mem0_memory_mcp.gateway import MemoryGateway
from mem0_memory_mcp.server import build_server, create_server, main, parse_args


@pytest.fixture
def no_env_key():
    """Pretend no Mem0 key is set in the environment."""
    with patch.object(server_module, "env_api_key", return_value=None):
        yield


def list_tools(server):
    handler = server.request_handlers[types.ListToolsRequest]
    result = asyncio.run(handler(types.ListToolsRequest(method="tools/list")))
    return result.root.tools


def call_tool(server, name, arguments):
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    return asyncio.run(handler(request)).root


@pytest.fixture
def mem0_client():
    """Create a Mem0 async client mock bound to the real method signatures."""
    client = create_autospec(AsyncMemoryClient, instance=True)
    client.add.return_value = {"results": []}
    client.search.return_value = {
        "results": [
            {"memory": "Prefers dark mode", "score": 0.9},
            {"memory": "Works with Pave Worx", "score": 0.4},
        ]
    }
    return client


class TestCreateServer:
    """Tests for the create_server() factory."""

    def test_lists_both_tools(self, no_env_key):
        """The server lists add-memory and search-memories."""
        server = create_server({"mem0ApiKey": "cfg-key"})
        tools = list_tools(server)

        assert [tool.name for tool in tools] == ["add-memory", "search-memories"]
        assert tools[0].inputSchema["required"] == ["content"]
        assert tools[1].inputSchema["required"] == ["query"]

    def test_server_identity(self, no_env_key):
        """The server is named memory."""
        server = create_server({"mem0ApiKey": "cfg-key"})
        assert server.name == "memory"

    def test_lists_tools_without_key(self, no_env_key):
        """Tools are listed even when no key is configured."""
        server = create_server()
        assert len(list_tools(server)) == 2

    def test_config_key_used(self, no_env_key):
        """The injected config key builds the gateway."""
        with patch.object(server_module, "MemoryGateway") as gateway_cls:
            create_server({"mem0ApiKey": "cfg-key"})
        gateway_cls.assert_called_once_with(api_key="cfg-key")

    def test_config_key_beats_environment(self):
        """The injected config key wins over the environment."""
        with patch.object(server_module, "env_api_key", return_value="env-key"), \
                patch.object(server_module, "MemoryGateway") as gateway_cls:
            create_server({"mem0ApiKey": "cfg-key"})
        gateway_cls.assert_called_once_with(api_key="cfg-key")

    def test_environment_fallback(self):
        """The environment key is used when config has none."""
        with patch.object(server_module, "env_api_key", return_value="env-key"), \
                patch.object(server_module, "MemoryGateway") as gateway_cls:
            create_server({})
        gateway_cls.assert_called_once_with(api_key="env-key")

    def test_no_gateway_without_key(self, no_env_key):
        """No gateway is built when no key is available."""
        with patch.object(server_module, "MemoryGateway") as gateway_cls:
            create_server(None)
        gateway_cls.assert_not_called()


class TestParseArgs:
    """Tests for stdio command line parsing."""

    def test_flag(self):
        assert parse_args(["--mem0-api-key", "flag-key"]).api_key == "flag-key"

    def test_bare_assignment(self):
        """A bare mem0ApiKey=<key> argument is accepted."""
        assert parse_args(["mem0ApiKey=bare-key"]).api_key == "bare-key"

    def test_flag_beats_bare_assignment(self):
        args = parse_args(["--mem0-api-key", "flag-key", "mem0ApiKey=bare-key"])
        assert args.api_key == "flag-key"

    def test_none(self):
        assert parse_args([]).api_key is None


class TestMain:
    """Tests for the stdio entry point."""

    def test_missing_key_exits_with_1(self, no_env_key):
        """Startup without any key is fatal."""
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1

    def test_transport_failure_exits_with_1(self, no_env_key):
        """A failing transport is fatal."""
        async def broken_transport(server):
            raise OSError("stdin closed")

        with patch.object(server_module, "run_stdio", broken_transport):
            with pytest.raises(SystemExit) as exc_info:
                main(["--mem0-api-key", "flag-key"])
        assert exc_info.value.code == 1

    def test_serves_with_resolved_key(self, no_env_key):
        """The resolved key builds the gateway before serving."""
        served = []

        async def fake_transport(server):
            served.append(server)

        with patch.object(server_module, "run_stdio", fake_transport), \
                patch.object(server_module, "MemoryGateway") as gateway_cls:
            main(["mem0ApiKey=bare-key"])

        gateway_cls.assert_called_once_with(api_key="bare-key")
        assert len(served) == 1


class TestCallTool:
    """Tests for tool calls through the MCP request handler."""

    def test_search_success(self, mem0_client):
        """A search reply is a single text block with isError false."""
        server = build_server(Dispatcher(MemoryGateway(client=mem0_client)))

        result = call_tool(server, "search-memories", {"query": "what do I like?"})

        assert result.isError is False
        assert len(result.content) == 1
        assert result.content[0].text == (
            "Memory: Prefers dark mode\nRelevance: 0.9\n---\n"
            "Memory: Works with Pave Worx\nRelevance: 0.4\n---"
        )
        mem0_client.search.assert_awaited_once_with(
            "what do I like?", filters={"user_id": "quinn_may"}
        )

    def test_add_success(self, mem0_client):
        """An add reply names the user."""
        server = build_server(Dispatcher(MemoryGateway(client=mem0_client)))

        result = call_tool(server, "add-memory", {"content": "I like tea", "userId": "raven"})

        assert result.isError is False
        assert result.content[0].text == "Memory added successfully for user raven"

    def test_unknown_tool(self, mem0_client):
        """Unknown tools produce an error reply naming the tool."""
        server = build_server(Dispatcher(MemoryGateway(client=mem0_client)))

        result = call_tool(server, "delete-memory", {"id": "m-1"})

        assert result.isError is True
        assert "delete-memory" in result.content[0].text

    def test_missing_key(self, no_env_key):
        """Without a key, tool calls reply with the missing-key error."""
        server = create_server()

        result = call_tool(server, "search-memories", {"query": "weather"})

        assert result.isError is True
        assert "Mem0 API key is required" in result.content[0].text

    def test_non_string_config_key(self, no_env_key):
        """A non-string config key is treated as missing."""
        server = create_server({"mem0ApiKey": 12345})

        result = call_tool(server, "search-memories", {"query": "weather"})

        assert result.isError is True
        assert "Mem0 API key is required" in result.content[0].text
