"""Faker MCP Server Package.

This package exposes the Faker fake-data library through a Model Context
Protocol (MCP) server speaking the streamable HTTP transport. Every client
session gets its own transport instance; all sessions share a single FastMCP
protocol service carrying the Faker tools.

The package consists of:
- Session registry and router multiplexing clients over ``/mcp``
- Faker service registering the data generation tools
- Health and service information endpoints
- Configuration, logging and exception handling

Examples
--------
To run the server:

    $ python -m faker_mcp.app

Or, once installed:

    $ faker-mcp

Notes
-----
Data generation is delegated entirely to Faker and protocol framing to the
MCP SDK. This package only wires them together.

See Also
--------
fastmcp : FastMCP framework for MCP server implementation
faker : Fake data generation library
"""

__version__ = "0.1.0"
