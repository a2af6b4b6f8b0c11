"""
Gateway to the hosted Mem0 memory service.

The gateway owns one AsyncMemoryClient, created on first use. Every store and
search is a live call; nothing is cached locally. Client failures are logged
and re-raised as MemoryServiceError with the original message.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from mem0 import AsyncMemoryClient

from .categories import format_enhanced_content
from .errors import MemoryServiceError

logger = logging.getLogger("mcp-server.gateway")
audit_logger = logging.getLogger("audit")


@dataclass(frozen=True)
class MemoryResult:
    """A single search hit: the memory text and its relevance score."""

    text: str
    relevance: Optional[float]


class MemoryGateway:
    """Store and search memories for a user through the Mem0 API."""

    def __init__(self, api_key: Optional[str] = None, client: Any = None):
        if api_key is None and client is None:
            raise ValueError("MemoryGateway needs an api_key or a client")
        self._api_key = api_key
        self._client = client

    async def get_client(self) -> Any:
        """Return the Mem0 client, building it on first use."""
        if self._client is None:
            # The constructor validates the key with a blocking HTTP request
            self._client = await asyncio.to_thread(AsyncMemoryClient, api_key=self._api_key)
        return self._client

    async def store(self, content: str, user_id: str) -> bool:
        """Categorize content and add it as a single user message."""
        messages = [{"role": "user", "content": format_enhanced_content(content)}]
        try:
            client = await self.get_client()
            await client.add(messages, user_id=user_id)
        except Exception as e:
            logger.error(f"Error adding memory: {e}")
            raise MemoryServiceError(str(e)) from e

        audit_logger.info(
            f"WRITE - User: {user_id} - Size: {len(content)} bytes - "
            f"Preview: {content[:100]}{'...' if len(content) > 100 else ''}"
        )
        return True

    async def search(self, query: str, user_id: str) -> list[MemoryResult]:
        """Run a semantic search and return hits in service order."""
        try:
            client = await self.get_client()
            # search() only takes entity ids inside filters
            response = await client.search(query, filters={"user_id": user_id})
        except Exception as e:
            logger.error(f"Error searching memories: {e}")
            raise MemoryServiceError(str(e)) from e

        # Current API versions wrap the hits in {"results": [...]}
        if isinstance(response, dict):
            response = response.get("results", [])

        results = [
            MemoryResult(text=item.get("memory", ""), relevance=item.get("score"))
            for item in response or []
        ]
        logger.debug(f"Search for user {user_id} returned {len(results)} memories")
        return results
