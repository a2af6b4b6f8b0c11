"""Tool descriptors returned on tools/list."""

import mcp.types as types

from .config import DEFAULT_USER_ID

ADD_MEMORY = "add-memory"
SEARCH_MEMORIES = "search-memories"

_USER_ID_PROPERTY = {
    "type": "string",
    "description": f"User ID for memory storage. Defaults to '{DEFAULT_USER_ID}' if not provided.",
    "default": DEFAULT_USER_ID,
}

ADD_MEMORY_TOOL = types.Tool(
    name=ADD_MEMORY,
    description=(
        "Add a new memory. This method is called everytime the user informs anything "
        "about themselves, their preferences, or anything that has any relevant information "
        "which can be useful in the future conversation. This can also be called when the "
        "user asks you to remember something."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "content": {
                "type": "string",
                "description": "The content to store in memory",
            },
            "userId": _USER_ID_PROPERTY,
        },
        "required": ["content"],
    },
)

SEARCH_MEMORIES_TOOL = types.Tool(
    name=SEARCH_MEMORIES,
    description="Search through stored memories. This method is called ANYTIME the user asks anything.",
    inputSchema={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": (
                    "The search query. This is the query that the user has asked for. "
                    "Example: 'What did I tell you about the weather last week?' or "
                    "'What did I tell you about my friend John?'"
                ),
            },
            "userId": _USER_ID_PROPERTY,
        },
        "required": ["query"],
    },
)

TOOLS: tuple[types.Tool, ...] = (ADD_MEMORY_TOOL, SEARCH_MEMORIES_TOOL)
