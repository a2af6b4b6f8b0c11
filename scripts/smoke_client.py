#!/usr/bin/env python3
"""
Smoke test for a running Mem0 Memory MCP HTTP server.

Usage:
    # Test against local server
    python scripts/smoke_client.py

    # Test against remote server, running one search
    python scripts/smoke_client.py https://mcp.yourdomain.com "What do I like?"
"""

import os
import sys
import asyncio

from dotenv import load_dotenv
from mcp import ClientSession
from mcp.client.sse import sse_client

load_dotenv()

# =============================================================================
# Configuration
# =============================================================================

DEFAULT_BASE_URL = "http://127.0.0.1:8000"
API_KEY = os.getenv("MEM0_API_KEY", "")


def print_result(test_name: str, success: bool, message: str = ""):
    """Print test result with color coding."""
    status = "✓ PASS" if success else "✗ FAIL"
    color = "\033[92m" if success else "\033[91m"
    reset = "\033[0m"
    print(f"{color}{status}{reset} - {test_name}")
    if message:
        print(f"       {message}")


async def run_checks(base_url: str, query: str = "") -> bool:
    url = f"{base_url}/mcp/sse"
    params = f"?mem0ApiKey={API_KEY}" if API_KEY else ""

    async with sse_client(url + params) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()

            tools = await session.list_tools()
            names = [tool.name for tool in tools.tools]
            listed = names == ["add-memory", "search-memories"]
            print_result("List tools", listed, f"Tools: {', '.join(names)}")

            if not query:
                return listed

            result = await session.call_tool("search-memories", {"query": query})
            text = result.content[0].text if result.content else ""
            print_result("Search memories", not result.isError, text)
            return listed and not result.isError


def main():
    base_url = sys.argv[1].rstrip("/") if len(sys.argv) > 1 else DEFAULT_BASE_URL
    query = sys.argv[2] if len(sys.argv) > 2 else ""

    print(f"Testing {base_url}")
    try:
        success = asyncio.run(run_checks(base_url, query))
    except Exception as e:
        print_result("Connect", False, str(e))
        success = False
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
