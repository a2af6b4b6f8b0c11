"""
Mem0 Memory MCP Server

An MCP server that stores and searches categorized memories in Mem0.
"""

__version__ = "0.0.1"

from .categories import categorize
from .dispatcher import Dispatcher, ToolResponse
from .gateway import MemoryGateway, MemoryResult
from .server import create_server

__all__ = [
    "categorize",
    "create_server",
    "Dispatcher",
    "MemoryGateway",
    "MemoryResult",
    "ToolResponse",
    "__version__",
]
