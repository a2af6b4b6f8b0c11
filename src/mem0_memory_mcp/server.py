"""
MCP server construction and the stdio entry point.

create_server() is the factory used by hosting platforms that own the
transport. main() resolves the credential once, builds a single gateway and
serves over stdin/stdout.
"""

import sys
import asyncio
import logging
import argparse
from typing import Any, Mapping, Optional

import mcp.types as types
import mcp.server.stdio
from mcp.server.lowlevel import Server

from .config import (
    API_KEY_PARAM,
    SERVER_NAME,
    SERVER_VERSION,
    configure_logging,
    env_api_key,
    resolve_api_key,
)
from .dispatcher import Dispatcher
from .errors import MissingApiKeyError
from .gateway import MemoryGateway
from .tools import TOOLS

logger = logging.getLogger("mcp-server")


# =============================================================================
# Server Setup
# =============================================================================

def build_server(dispatcher: Dispatcher) -> Server:
    """Create an MCP server whose tool calls go through dispatcher."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return list(TOOLS)

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: Optional[dict[str, Any]]) -> types.CallToolResult:
        response = await dispatcher.dispatch(name, arguments)
        return response.to_call_tool_result()

    return server


def gateway_for(api_key: Optional[str]) -> Optional[MemoryGateway]:
    return MemoryGateway(api_key=api_key) if api_key else None


def create_server(config: Optional[Mapping[str, Any]] = None) -> Server:
    """
    Build a server from an injected configuration object.

    The key is taken from config["mem0ApiKey"], then from the environment.
    A missing key does not stop the server from listing its tools; tool
    calls then reply with the missing-key error.
    """
    config = config or {}
    try:
        api_key = resolve_api_key([
            ("config", config.get(API_KEY_PARAM)),
            ("environment", env_api_key()),
        ])
    except MissingApiKeyError:
        logger.warning("No Mem0 API key configured; tool calls will fail until one is provided")
        api_key = None
    return build_server(Dispatcher(gateway_for(api_key)))


# =============================================================================
# Stdio Entry Point
# =============================================================================

async def run_stdio(server: Server):
    """Serve the MCP protocol over stdin/stdout until the client disconnects."""
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        logger.info("Memory MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mem0-backed memory MCP server (stdio transport)",
    )
    parser.add_argument("--mem0-api-key", dest="api_key",
                        help="Mem0 API key (default: MEM0_API_KEY from the environment)")
    args, extra = parser.parse_known_args(argv)

    # Hosting platforms may pass the key as a bare mem0ApiKey=<key> argument
    if not args.api_key:
        for arg in extra:
            if arg.startswith(f"{API_KEY_PARAM}="):
                args.api_key = arg.split("=", 1)[1]
    return args


def main(argv: Optional[list[str]] = None):
    configure_logging()
    args = parse_args(argv)
    logger.info("Initializing memory MCP server...")

    try:
        api_key = resolve_api_key([
            ("command line", args.api_key),
            ("environment", env_api_key()),
        ])
    except MissingApiKeyError as e:
        logger.critical(f"Fatal error: {e}")
        sys.exit(1)

    server = build_server(Dispatcher(MemoryGateway(api_key=api_key)))
    try:
        asyncio.run(run_stdio(server))
    except Exception as e:
        logger.critical(f"Fatal error running server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
