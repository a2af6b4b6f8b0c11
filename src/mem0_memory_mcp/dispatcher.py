"""
Tool call dispatch.

Dispatcher.dispatch() validates the argument bag, routes the call to the
memory gateway and shapes the reply. It never raises: every failure becomes
an error-flagged ToolResponse.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mcp.types as types

from .config import DEFAULT_USER_ID
from .errors import InvalidArgumentsError, MissingApiKeyError
from .gateway import MemoryGateway, MemoryResult
from .tools import ADD_MEMORY, SEARCH_MEMORIES

logger = logging.getLogger("mcp-server.dispatcher")


@dataclass(frozen=True)
class ToolResponse:
    text: str
    is_error: bool = False

    def to_call_tool_result(self) -> types.CallToolResult:
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=self.text)],
            isError=self.is_error,
        )


def format_search_results(query: str, results: list[MemoryResult]) -> str:
    """Render hits as "Memory/Relevance/---" blocks, or a not-found message."""
    if not results:
        return f'No memories found for query: "{query}"'
    return "\n".join(
        f"Memory: {result.text}\nRelevance: {result.relevance}\n---"
        for result in results
    )


def _require_text(arguments: Mapping[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentsError(f"Missing required argument: {key}")
    return value


class Dispatcher:
    """Routes tool invocations to the memory gateway."""

    def __init__(self, gateway: Optional[MemoryGateway], default_user_id: str = DEFAULT_USER_ID):
        self.gateway = gateway
        self.default_user_id = default_user_id

    def _require_gateway(self) -> MemoryGateway:
        if self.gateway is None:
            raise MissingApiKeyError()
        return self.gateway

    def _user_id(self, arguments: Mapping[str, Any]) -> str:
        user_id = arguments.get("userId")
        if user_id is None:
            return self.default_user_id
        if not isinstance(user_id, str) or not user_id.strip():
            raise InvalidArgumentsError("userId must be a non-empty string")
        return user_id

    async def add_memory(self, arguments: Mapping[str, Any]) -> ToolResponse:
        content = _require_text(arguments, "content")
        user_id = self._user_id(arguments)
        await self._require_gateway().store(content, user_id)
        return ToolResponse(f"Memory added successfully for user {user_id}")

    async def search_memories(self, arguments: Mapping[str, Any]) -> ToolResponse:
        query = _require_text(arguments, "query")
        user_id = self._user_id(arguments)
        results = await self._require_gateway().search(query, user_id)
        return ToolResponse(format_search_results(query, results))

    async def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]]) -> ToolResponse:
        """Run one tool call and return its reply."""
        handlers = {
            ADD_MEMORY: self.add_memory,
            SEARCH_MEMORIES: self.search_memories,
        }
        handler = handlers.get(name)
        if handler is None:
            logger.warning(f"Unknown tool requested: {name}")
            return ToolResponse(f"Unknown tool: {name}", is_error=True)

        try:
            if not arguments:
                raise InvalidArgumentsError("No arguments provided")
            return await handler(arguments)
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}")
            return ToolResponse(f"Error: {e}", is_error=True)
