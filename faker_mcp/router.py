"""Session Router for the MCP streamable HTTP endpoint.

This module implements the ASGI application mounted on ``/mcp``. It maps
every request to the streamable HTTP transport of its session, provisions a
transport for initialization requests, and answers everything else with a
JSON-RPC error envelope.

Classes
-------
BoundSession
    A transport together with the session id it is registered under
SessionRouter
    ASGI app dispatching requests to per-session transports

Notes
-----
Routing rules, in order:

1. ``mcp-session-id`` header present and registered: the request goes to
   that session's transport.
2. Header absent and the body is an MCP ``initialize`` request: a new
   session is opened and the request is handed to its transport.
3. Anything else: HTTP 400 with JSON-RPC code -32000.

Unhandled errors become HTTP 500 with JSON-RPC code -32603, unless the
response has already started.

Each session's protocol loop runs in the router's task group, so the router
must be started with ``async with router.run():`` before serving.

See Also
--------
faker_mcp.session_store : Registry of session transports
mcp.server.streamable_http : Transport implementation
"""

import json
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional
from uuid import uuid4

import anyio
from anyio.abc import TaskGroup, TaskStatus
from fastmcp import FastMCP
from mcp.server.streamable_http import StreamableHTTPServerTransport
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import Message, Receive, Scope, Send

from .constants import (
    INTERNAL_ERROR_CODE,
    INTERNAL_ERROR_MESSAGE,
    MCP_SESSION_ID_HEADER,
    NO_VALID_SESSION_CODE,
    NO_VALID_SESSION_MESSAGE,
)
from .exceptions import ServerError, SessionCloseError
from .logging_config import get_logger, log_error_with_context
from .mcp.faker import run_protocol_session
from .session_store import SessionStore
from .utils import jsonrpc_error
from .validation import is_initialize_request

logger = get_logger(__name__)


@dataclass(frozen=True)
class BoundSession:
    """A transport registered under its session id."""

    session_id: str
    transport: StreamableHTTPServerTransport


class _ResponseTracker:
    """ASGI ``send`` wrapper recording whether the response has started."""

    def __init__(self, send: Send):
        self._send = send
        self.started = False
        self.status: Optional[int] = None

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.started = True
            self.status = message["status"]
        await self._send(message)


def _replay_receive(body: bytes, receive: Receive) -> Receive:
    """Return a ``receive`` that yields the already-read body once, then defers to ``receive``."""
    replayed = False

    async def replay() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


def _decode_json(body: bytes):
    if not body:
        return None
    try:
        return json.loads(body)
    except (UnicodeDecodeError, ValueError):
        return None


class SessionRouter:
    """ASGI application dispatching ``/mcp`` requests to session transports.

    Parameters
    ----------
    server : FastMCP
        Shared protocol service every session runs against
    store : SessionStore
        Registry owning the session transports
    json_response : bool, optional
        Let transports answer POST requests with JSON instead of SSE
    session_id_factory : Callable[[], str], optional
        Generator for new session ids (default: ``uuid4().hex``)

    Examples
    --------
        >>> router = SessionRouter(server, SessionStore())
        >>> async with router.run():
        ...     await serve(router)
    """

    def __init__(
        self,
        server: FastMCP,
        store: SessionStore,
        json_response: bool = False,
        session_id_factory: Callable[[], str] = lambda: uuid4().hex,
    ):
        self.server = server
        self.store = store
        self.json_response = json_response
        self._session_id_factory = session_id_factory
        self._task_group: Optional[TaskGroup] = None

    @property
    def running(self) -> bool:
        """Whether the session task group is active."""
        return self._task_group is not None

    @asynccontextmanager
    async def run(self) -> AsyncIterator["SessionRouter"]:
        """Run the task group hosting the per-session protocol loops.

        On exit, protocol loops still running are cancelled. Closing the
        transports themselves is the caller's job (see ``close_all_sessions``).
        """
        if self._task_group is not None:
            raise ServerError("Session router is already running", error_code="ROUTER_ALREADY_RUNNING")

        async with anyio.create_task_group() as task_group:
            self._task_group = task_group
            try:
                yield self
            finally:
                task_group.cancel_scope.cancel()
                self._task_group = None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        tracker = _ResponseTracker(send)
        try:
            await self._dispatch(scope, receive, tracker)
        except Exception as e:
            log_error_with_context(logger, "Error handling MCP request", e, method=scope.get("method"))
            if not tracker.started:
                response = JSONResponse(jsonrpc_error(INTERNAL_ERROR_CODE, INTERNAL_ERROR_MESSAGE), status_code=500)
                await response(scope, receive, tracker)

    async def _dispatch(self, scope: Scope, receive: Receive, send: _ResponseTracker) -> None:
        request = Request(scope, receive)
        session_id = request.headers.get(MCP_SESSION_ID_HEADER) or None

        transport = self.store.get(session_id)
        if transport is not None:
            await transport.handle_request(scope, receive, send)
            if transport.is_terminated:
                self._forget(session_id, transport)
            return

        if session_id is None and request.method == "POST":
            body = await request.body()
            if is_initialize_request(_decode_json(body)):
                await self._initialize(scope, _replay_receive(body, receive), send)
                return

        response = JSONResponse(jsonrpc_error(NO_VALID_SESSION_CODE, NO_VALID_SESSION_MESSAGE), status_code=400)
        await response(scope, receive, send)

    async def _initialize(self, scope: Scope, receive: Receive, send: _ResponseTracker) -> None:
        """Open a session and hand it the initialization request.

        The session stays registered only if its transport accepted the
        request.
        """
        bound = await self.open_session()
        try:
            await bound.transport.handle_request(scope, receive, send)
        except Exception:
            await self.close_session(bound.session_id)
            raise

        if send.status is None or send.status >= 400:
            logger.warning(
                f"Session initialization rejected: {bound.session_id}", extra={"status_code": send.status}
            )
            await self.close_session(bound.session_id)
            return

        logger.info(f"Session initialized: {bound.session_id}")

    async def open_session(self) -> BoundSession:
        """Create a transport, wait for its protocol loop, then register it.

        Returns
        -------
        BoundSession
            The registered transport and its session id

        Raises
        ------
        ServerError
            If the router is not running
        """
        if self._task_group is None:
            raise ServerError("Session router is not running", error_code="ROUTER_NOT_RUNNING")

        session_id = self._session_id_factory()
        transport = StreamableHTTPServerTransport(
            mcp_session_id=session_id,
            is_json_response_enabled=self.json_response,
        )
        await self._task_group.start(self._run_session, session_id, transport)
        self.store.register(session_id, transport)
        return BoundSession(session_id=session_id, transport=transport)

    async def _run_session(
        self,
        session_id: str,
        transport: StreamableHTTPServerTransport,
        *,
        task_status: TaskStatus = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        """Serve one session's protocol loop until its transport closes."""
        try:
            async with transport.connect() as (read_stream, write_stream):
                task_status.started()
                await run_protocol_session(self.server, read_stream, write_stream)
        except Exception as e:
            log_error_with_context(logger, f"Session {session_id} crashed", e, session_id=session_id)
        finally:
            self._forget(session_id, transport)

    def _forget(self, session_id: str, transport: StreamableHTTPServerTransport) -> None:
        if self.store.remove(session_id, transport) is not None:
            logger.info(f"Session closed: {session_id}")

    async def close_session(self, session_id: str) -> bool:
        """Unregister a session and terminate its transport.

        Returns
        -------
        bool
            False if the session was not registered

        Raises
        ------
        SessionCloseError
            If the transport fails to terminate; the entry is removed anyway
        """
        transport = self.store.remove(session_id)
        if transport is None:
            return False
        try:
            await transport.terminate()
        except Exception as e:
            raise SessionCloseError(
                f"Failed to close session {session_id}", details={"session_id": session_id}, cause=e
            ) from e
        logger.info(f"Session closed: {session_id}")
        return True

    async def close_all_sessions(self) -> int:
        """Close every registered session, isolating failures.

        Every entry leaves the registry even when its transport fails to
        close; failures are logged and do not stop the remaining closes.

        Returns
        -------
        int
            Number of sessions closed without error
        """
        session_ids = self.store.session_ids()
        if not session_ids:
            return 0

        logger.info(f"Closing {len(session_ids)} active session(s)...")
        closed = 0
        for session_id in session_ids:
            try:
                if await self.close_session(session_id):
                    closed += 1
            except SessionCloseError as e:
                log_error_with_context(logger, f"Error closing session {session_id}", e, session_id=session_id)
        return closed
