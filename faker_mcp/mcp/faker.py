"""Faker MCP Server Implementation.

This module creates the FastMCP protocol service for the Faker tools and
runs its protocol loop over the streams of a single session transport.

Functions
---------
create_faker_server
    Build the shared FastMCP instance
run_protocol_session
    Serve one session's read/write streams until the transport closes

Notes
-----
One FastMCP instance serves all sessions. Each streamable HTTP transport
gets its own protocol loop over the low-level server, the same way the MCP
SDK's session manager drives it.

See Also
--------
fastmcp : FastMCP framework for MCP server implementation
faker_mcp.router : Session router creating the transports
"""

from typing import Any

from fastmcp import FastMCP

from ..constants import SERVER_NAME

INSTRUCTIONS = (
    "Generate realistic fake data with Faker. Use generate_person, generate_company, "
    "generate_address and generate_text for common records, generate_custom to combine "
    "any Faker providers, and list_locales to discover supported locales. Pass a seed "
    "for reproducible output."
)


def create_faker_server() -> FastMCP:
    """Create the FastMCP server shared by all sessions.

    Returns
    -------
    FastMCP
        Server instance without tools; ``FakerService`` registers them.
    """
    return FastMCP(SERVER_NAME, instructions=INSTRUCTIONS)


async def run_protocol_session(server: FastMCP, read_stream: Any, write_stream: Any) -> None:
    """Run the MCP protocol loop for one session.

    Returns when the session's read stream is closed, which happens when its
    transport terminates.

    Parameters
    ----------
    server : FastMCP
        Shared protocol service
    read_stream, write_stream
        Streams yielded by ``StreamableHTTPServerTransport.connect()``
    """
    # Low-level server behind FastMCP; fastmcp 2.x keeps it on _mcp_server
    protocol = server._mcp_server
    await protocol.run(
        read_stream,
        write_stream,
        protocol.create_initialization_options(),
        stateless=False,
    )
