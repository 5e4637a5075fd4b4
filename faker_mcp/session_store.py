"""Session registry for streamable HTTP transports.

The store maps an opaque session identifier to the transport handle that
speaks the MCP framing for that session. It is the only owner of the
handles: routes look transports up per request and never keep them.

Classes
-------
SessionStore
    In-memory mapping from session id to transport

Notes
-----
At most one transport exists per session id. A second registration under
the same id raises ``DuplicateSessionError`` instead of replacing the
first transport.
"""

from typing import Dict, List, Optional

from mcp.server.streamable_http import StreamableHTTPServerTransport

from .exceptions import DuplicateSessionError


class SessionStore:
    """In-memory registry of active session transports.

    Examples
    --------
        >>> store = SessionStore()
        >>> store.register("abc", transport)
        >>> store.get("abc") is transport
        True
        >>> len(store)
        1
    """

    def __init__(self) -> None:
        self._transports: Dict[str, StreamableHTTPServerTransport] = {}

    def register(self, session_id: str, transport: StreamableHTTPServerTransport) -> None:
        """Register ``transport`` under ``session_id``.

        Raises
        ------
        DuplicateSessionError
            If the id is already mapped to a transport
        """
        if not session_id:
            raise ValueError("Session id must be a non-empty string")
        if session_id in self._transports:
            raise DuplicateSessionError(
                f"Session '{session_id}' is already registered", details={"session_id": session_id}
            )
        self._transports[session_id] = transport

    def get(self, session_id: Optional[str]) -> Optional[StreamableHTTPServerTransport]:
        """Return the transport for ``session_id`` or None."""
        if not session_id:
            return None
        return self._transports.get(session_id)

    def remove(
        self, session_id: str, transport: Optional[StreamableHTTPServerTransport] = None
    ) -> Optional[StreamableHTTPServerTransport]:
        """Unregister ``session_id`` and return its transport.

        When ``transport`` is given the entry is only removed if it still maps
        to that exact instance. Removing an absent id is a no-op returning None.
        """
        current = self._transports.get(session_id)
        if current is None:
            return None
        if transport is not None and current is not transport:
            return None
        return self._transports.pop(session_id)

    def session_ids(self) -> List[str]:
        """Snapshot of registered session ids."""
        return list(self._transports)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._transports

    def __len__(self) -> int:
        return len(self._transports)
