"""Faker MCP Server Application Entry Point.

This module builds the HTTP application and runs it with uvicorn. The
application serves the MCP endpoint through the session router, plus
health and service information endpoints.

Endpoints
---------
/mcp
    MCP streamable HTTP endpoint (GET, POST, DELETE)
/health
    Liveness summary with the number of active sessions
/health/ready
    Readiness probe (session router running)
/health/live
    Liveness probe with process resource usage
/
    Service descriptor

Environment Variables
--------------------
PORT : str, optional
    Port number for the server (default: "3000")
HOST : str, optional
    Host address for the server (default: "0.0.0.0")

Examples
--------
Run the server with default settings:

    $ python -m faker_mcp.app

Run the server on another port:

    $ PORT=8080 python -m faker_mcp.app

Notes
-----
SIGINT and SIGTERM are handled by uvicorn, which runs the application
lifespan shutdown: every session transport is closed (failures are logged
and skipped), the protocol service is closed and the process exits with
code 0. A port that is already in use makes the process exit with code 1.

See Also
--------
faker_mcp.context : Application context and component wiring
faker_mcp.router : Session router serving /mcp
"""

import errno
import os
import signal
import socket
import sys
import threading
from contextlib import asynccontextmanager, contextmanager
from typing import Iterator, Optional

import psutil
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import AppConfig
from .constants import (
    DISPLAY_NAME,
    HEALTH_ENDPOINT,
    MCP_ENDPOINT,
    SERVER_DESCRIPTION,
)
from .context import Context, context
from .exceptions import (
    ConfigurationError,
    FakerMCPException,
    PortInUseError,
    ServerError,
    ServerStartupError,
    create_error_response,
    format_exception,
)
from .logging_config import get_logger, log_error_with_context, setup_logging
from .utils import utc_timestamp

logger = get_logger(__name__)


def create_app(ctx: Optional[Context] = None) -> FastAPI:
    """Create the HTTP application for a context.

    Parameters
    ----------
    ctx : Context, optional
        Components to serve (default: the module-level context)

    Returns
    -------
    FastAPI
        Application whose lifespan runs the session router and performs the
        shutdown sequence
    """
    ctx = ctx or context

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        async with ctx.router.run():
            logger.info(f"{DISPLAY_NAME} ready", extra={"port": ctx.config.server.port})
            try:
                yield
            finally:
                logger.info("Shutting down server...")
                await ctx.router.close_all_sessions()

        try:
            await ctx.close()
            logger.info("Server closed successfully", extra={"log_metrics": logger.metrics.get_summary()})
        except Exception as e:
            log_error_with_context(logger, "Error closing server", e)

    app = FastAPI(
        title=DISPLAY_NAME,
        description=SERVER_DESCRIPTION,
        version=ctx.config.version,
        lifespan=lifespan,
    )
    app.state.context = ctx

    @app.exception_handler(FakerMCPException)
    async def faker_mcp_exception_handler(_: Request, exc: FakerMCPException) -> JSONResponse:
        status_code = 503 if isinstance(exc, ServerError) else 500
        return JSONResponse(create_error_response(exc), status_code=status_code)

    @app.get(HEALTH_ENDPOINT)
    async def health_check():
        """Basic health check."""
        return {
            "status": "healthy",
            "activeSessions": ctx.active_sessions,
            "timestamp": utc_timestamp(),
        }

    @app.get(f"{HEALTH_ENDPOINT}/ready")
    async def readiness_probe():
        """Readiness probe - the session router accepts new sessions."""
        if not ctx.router.running:
            raise ServerError("Session router is not running", error_code="NOT_READY")
        return {
            "status": "ready",
            "service": ctx.config.app_name,
            "activeSessions": ctx.active_sessions,
            "timestamp": utc_timestamp(),
        }

    @app.get(f"{HEALTH_ENDPOINT}/live")
    async def liveness_probe():
        """Liveness probe - checks process resource usage."""
        memory_percent = psutil.virtual_memory().percent
        cpu_percent = psutil.cpu_percent(interval=None)
        threshold = ctx.config.health.critical_resource_percent

        if memory_percent > threshold or cpu_percent > threshold:
            raise ServerError(
                f"High resource usage: CPU {cpu_percent}%, Memory {memory_percent}%",
                error_code="RESOURCE_EXHAUSTED",
                details={"cpu_percent": cpu_percent, "memory_percent": memory_percent},
            )

        return {
            "status": "alive",
            "service": ctx.config.app_name,
            "process_id": os.getpid(),
            "memory_percent": memory_percent,
            "cpu_percent": cpu_percent,
            "timestamp": utc_timestamp(),
        }

    @app.get("/")
    async def service_info():
        """Service descriptor."""
        return {
            "name": DISPLAY_NAME,
            "version": ctx.config.version,
            "description": SERVER_DESCRIPTION,
            "endpoints": {
                "mcp": MCP_ENDPOINT,
                "health": HEALTH_ENDPOINT,
            },
            "activeSessions": ctx.active_sessions,
        }

    app.add_route(MCP_ENDPOINT, ctx.router, include_in_schema=False)
    return app


class GracefulServer(uvicorn.Server):
    """uvicorn server that treats SIGINT and SIGTERM as a normal shutdown.

    uvicorn re-raises a captured signal once the lifespan shutdown has
    finished, so the process would die from that signal. Here the handlers
    only request the shutdown, and the process exits through ``main``.
    """

    @contextmanager
    def capture_signals(self) -> Iterator[None]:
        if threading.current_thread() is not threading.main_thread():
            yield
            return

        original_handlers = {sig: signal.signal(sig, self.handle_exit) for sig in (signal.SIGINT, signal.SIGTERM)}
        try:
            yield
        finally:
            for sig, handler in original_handlers.items():
                signal.signal(sig, handler)


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind the listening socket before handing it to uvicorn.

    Raises
    ------
    PortInUseError
        If another process already listens on ``port``
    ServerStartupError
        For any other bind failure
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        if e.errno == errno.EADDRINUSE:
            raise PortInUseError(f"Port {port} is already in use", details={"host": host, "port": port}, cause=e) from e
        raise ServerStartupError(f"Server error: {e}", details={"host": host, "port": port}, cause=e) from e
    sock.set_inheritable(True)
    return sock


def main(ctx: Optional[Context] = None) -> None:
    """Start the server and block until it shuts down.

    Exits with code 0 after a signal-triggered shutdown, and with code 1
    when the configuration is invalid or the listener cannot be started.
    """
    ctx = ctx or context
    config: AppConfig = ctx.config

    try:
        setup_logging(config)
    except ConfigurationError as e:
        print(f"Invalid logging configuration: {format_exception(e)}", file=sys.stderr)
        sys.exit(1)

    host, port = config.server.host, config.server.port
    try:
        sock = bind_socket(host, port)
    except ServerStartupError as e:
        logger.error(f"✗ {e.message}", extra={"error_code": e.error_code})
        sys.exit(1)

    logger.info(f"✓ {DISPLAY_NAME} listening on port {port}")
    logger.info(f"  MCP endpoint: http://localhost:{port}{MCP_ENDPOINT}")
    logger.info(f"  Health check: http://localhost:{port}{HEALTH_ENDPOINT}")

    server = GracefulServer(
        uvicorn.Config(
            create_app(ctx),
            host=host,
            port=port,
            log_config=None,
            timeout_graceful_shutdown=config.server.graceful_shutdown_timeout,
        )
    )
    server.run(sockets=[sock])

    if not server.started:
        logger.error("✗ Server failed to start")
        sys.exit(1)

    sys.exit(0)


app = create_app(context)


if __name__ == "__main__":
    main()
