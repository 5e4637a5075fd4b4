"""Faker MCP Server Constants.

This module contains the fixed names, protocol codes and defaults used
throughout the Faker MCP server application.

Constants
---------
SERVER_NAME : str
    Name the MCP server reports during initialization
DISPLAY_NAME : str
    Human readable service name used by the informational endpoints
MCP_SESSION_ID_HEADER : str
    HTTP header correlating requests with a session
NO_VALID_SESSION_CODE : int
    JSON-RPC error code for a missing or unknown session
INTERNAL_ERROR_CODE : int
    JSON-RPC error code for unhandled errors
TEXT_KINDS : tuple
    Kinds of text accepted by the text generation tool

See Also
--------
faker_mcp.config : Runtime configuration loaded from the environment
"""

from . import __version__

# Application identification constants
SERVER_NAME = "faker-server"
"""str: Name reported to MCP clients in the initialize result."""

DISPLAY_NAME = "Faker MCP Server"
"""str: Service name shown on the root endpoint."""

SERVER_VERSION = __version__

SERVER_DESCRIPTION = "MCP server for generating fake data using Faker"

# HTTP surface
MCP_ENDPOINT = "/mcp"
HEALTH_ENDPOINT = "/health"

MCP_SESSION_ID_HEADER = "mcp-session-id"
"""str: Header carrying the opaque session identifier."""

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"

# JSON-RPC error envelope
JSONRPC_VERSION = "2.0"

NO_VALID_SESSION_CODE = -32000
"""int: Error code for a non-initialization request without a valid session."""

NO_VALID_SESSION_MESSAGE = "Bad Request: No valid session ID provided"

INTERNAL_ERROR_CODE = -32603
"""int: Error code for an unhandled error while serving a request."""

INTERNAL_ERROR_MESSAGE = "Internal server error"

# Generation limits
DEFAULT_LOCALE = "en_US"

MAX_COUNT = 1000
"""int: Default upper bound on the number of records a single tool call returns."""

TEXT_KINDS = ("word", "sentence", "paragraph", "text")
"""tuple: Faker text providers accepted by ``generate_text``."""

DISALLOWED_PROVIDERS = frozenset(
    {
        "add_provider",
        "del_arguments",
        "factories",
        "format",
        "get_arguments",
        "get_formatter",
        "get_providers",
        "items",
        "locales",
        "optional",
        "parse",
        "provider",
        "random",
        "seed",
        "seed_instance",
        "seed_locale",
        "set_arguments",
        "set_formatter",
        "unique",
        "weights",
    }
)
"""frozenset: Faker proxy attributes that are not data providers."""
