"""
Configuration for the Mem0 memory server.

Values are read from the environment (and a local .env file) at import time.
The Mem0 credential is the exception: each entry point resolves it through
resolve_api_key() from its own ordered list of sources.
"""

import os
import logging
from typing import Any, Iterable, Optional

from dotenv import load_dotenv

from .errors import MissingApiKeyError

# =============================================================================
# Configuration
# =============================================================================

load_dotenv()

SERVER_NAME = "memory"
SERVER_VERSION = "0.0.1"

# Both spellings are accepted; hosting platforms pass the camelCase one
API_KEY_ENV_VARS = ("MEM0_API_KEY", "mem0ApiKey")
API_KEY_PARAM = "mem0ApiKey"

DEFAULT_USER_ID = os.getenv("MEM0_DEFAULT_USER_ID", "quinn_may")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
AUDIT_LOG_PATH = os.getenv("AUDIT_LOG_PATH")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("mcp-server")


# =============================================================================
# Logging Setup
# =============================================================================

def configure_logging(level: str = LOG_LEVEL, audit_log_path: Optional[str] = AUDIT_LOG_PATH):
    """
    Configure application and audit logging.

    Application logs go to stderr so that stdout stays free for the stdio
    transport. The audit logger only gets a file handler when a path is set.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)

    audit_logger = logging.getLogger("audit")
    audit_logger.setLevel(logging.INFO)
    if audit_log_path and not audit_logger.handlers:
        audit_handler = logging.FileHandler(audit_log_path)
        audit_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        audit_logger.addHandler(audit_handler)


# =============================================================================
# Credential Resolution
# =============================================================================

def env_api_key() -> Optional[str]:
    """Return the Mem0 API key from the environment, if any."""
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return None


def resolve_api_key(sources: Iterable[tuple[str, Any]]) -> str:
    """
    Return the first non-blank API key from an ordered list of sources.

    Args:
        sources: (source_name, value) pairs in priority order, for example
                 [("config", config.get("mem0ApiKey")), ("environment", env_api_key())]

    Raises:
        MissingApiKeyError: if no source supplies a value.
    """
    for source_name, value in sources:
        if isinstance(value, str) and value.strip():
            logger.info(f"Mem0 API key resolved from {source_name}")
            return value.strip()
    raise MissingApiKeyError()
