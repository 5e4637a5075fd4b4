"""MCP (Model Context Protocol) Server Implementation Package.

This package builds the FastMCP protocol service shared by every client
session of the Faker MCP server.

Modules
-------
faker
    Server factory and the hook that runs the protocol loop for one session

See Also
--------
fastmcp : FastMCP framework for MCP server implementation
faker_mcp.services.faker : Faker tools registered on the server
"""
