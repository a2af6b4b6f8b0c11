"""Exception types raised by the memory server."""


class Mem0McpError(Exception):
    """Base class for all errors raised by this package."""


class MissingApiKeyError(Mem0McpError):
    """No Mem0 API key could be resolved from any configured source."""

    def __init__(self, message: str = (
        "Mem0 API key is required. "
        "Please configure mem0ApiKey in your connection settings."
    )):
        super().__init__(message)


class InvalidArgumentsError(Mem0McpError):
    """A tool was invoked with missing or malformed arguments."""


class MemoryServiceError(Mem0McpError):
    """The Mem0 service rejected a request or could not be reached."""
