"""Services Package for Fake Data Generation.

This package contains the service that exposes Faker through MCP tools
registered on the shared FastMCP server.

Modules
-------
faker
    Faker service implementation registering the generation tools

Classes
-------
FakerService
    Service class providing Faker data generation through MCP tools

See Also
--------
faker_mcp.mcp : MCP server implementation
faker : Fake data generation library
"""
