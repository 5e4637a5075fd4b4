"""Application Context Management.

This module wires together the components of the Faker MCP server: the
configuration, the shared FastMCP protocol service, the Faker service, the
session registry and the session router.

Classes
-------
Context
    Central application context owning one set of server components

Module Variables
----------------
context : Context
    Default context used by the importable ``faker_mcp.app:app``

Examples
--------
Build an isolated context, e.g. for tests:

    >>> from faker_mcp.config import AppConfig
    >>> ctx = Context(AppConfig())
    >>> len(ctx.store)
    0

Notes
-----
Each context owns its own ``SessionStore``. Nothing keeps sessions in
module-level state, so separate contexts never share sessions.

See Also
--------
faker_mcp.app : HTTP application built from a context
"""

from typing import Optional

from .config import AppConfig, get_config
from .mcp.faker import create_faker_server
from .router import SessionRouter
from .services.faker import FakerService
from .session_store import SessionStore


class Context:
    """Central application context manager.

    Attributes
    ----------
    config : AppConfig
        Application configuration
    mcp : FastMCP
        Shared protocol service
    service : FakerService
        Faker tools registered on ``mcp``
    store : SessionStore
        Registry of session transports
    router : SessionRouter
        ASGI app serving ``/mcp``
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or get_config()
        self.mcp = create_faker_server()
        self.service = FakerService(mcp=self.mcp, config=self.config)
        self.store = SessionStore()
        self.router = SessionRouter(self.mcp, self.store, json_response=self.config.server.json_response)

    @property
    def active_sessions(self) -> int:
        """Number of registered sessions."""
        return len(self.store)

    async def close(self) -> None:
        """Close the shared protocol service."""
        await self.service.shutdown()


# Global context instance
context = Context()
"""Context: Default application context behind ``faker_mcp.app:app``."""
