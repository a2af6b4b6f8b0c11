"""
Mem0 Memory MCP Server - HTTP transport

Serves the memory tools over MCP's SSE transport. Each SSE connection gets
its own server and gateway, keyed by the mem0ApiKey query parameter or, when
that is absent, the server's environment.
"""

import logging
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response
from mcp.server.sse import SseServerTransport

from .config import (
    API_KEY_PARAM,
    HOST,
    PORT,
    SERVER_NAME,
    SERVER_VERSION,
    configure_logging,
    env_api_key,
    resolve_api_key,
)
from .dispatcher import Dispatcher
from .errors import MissingApiKeyError
from .gateway import MemoryGateway
from .server import build_server
from .tools import TOOLS

logger = logging.getLogger("mcp-server")
audit_logger = logging.getLogger("audit")

MCP_SSE_PATH = "/mcp/sse"
MCP_MESSAGES_PATH = "/mcp/messages/"

sse_transport = SseServerTransport(MCP_MESSAGES_PATH)


# =============================================================================
# FastAPI Application
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Memory MCP HTTP server started")
    logger.info(f"MCP endpoint: {MCP_SSE_PATH}")
    logger.info(f"Environment API key: {'configured' if env_api_key() else 'missing'}")
    yield
    logger.info("Memory MCP HTTP server shutting down")


app = FastAPI(
    title="Mem0 Memory MCP Server",
    version=SERVER_VERSION,
    description="An MCP server that stores and searches memories in Mem0",
    lifespan=lifespan
)

app.mount(MCP_MESSAGES_PATH, app=sse_transport.handle_post_message)


# =============================================================================
# MCP Endpoint
# =============================================================================

@app.get(MCP_SSE_PATH)
async def mcp_sse(request: Request):
    """
    Open an MCP session over server-sent events.

    The Mem0 key comes from ?mem0ApiKey=..., falling back to the environment.
    Connections without any key are refused with 401.
    """
    client_ip = request.client.host if request.client else "unknown"

    try:
        api_key = resolve_api_key([
            ("query parameter", request.query_params.get(API_KEY_PARAM)),
            ("environment", env_api_key()),
        ])
    except MissingApiKeyError as e:
        audit_logger.warning(f"MCP_AUTH_FAILED - IP: {client_ip} - No Mem0 API key")
        return JSONResponse(status_code=401, content={"error": str(e)})

    audit_logger.info(f"MCP_SESSION - IP: {client_ip}")
    server = build_server(Dispatcher(MemoryGateway(api_key=api_key)))

    async with sse_transport.connect_sse(
        request.scope, request.receive, request._send
    ) as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())

    return Response()


# =============================================================================
# REST Endpoints
# =============================================================================

@app.get("/")
async def root():
    """Basic root endpoint."""
    return {
        "service": "Mem0 Memory MCP Server",
        "status": "active",
        "mcp_endpoint": MCP_SSE_PATH,
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Public health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "server": {"name": SERVER_NAME, "version": SERVER_VERSION},
        "tools": [tool.name for tool in TOOLS],
        "api_key_configured": env_api_key() is not None
    }


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
