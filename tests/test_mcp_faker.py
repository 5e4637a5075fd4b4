"""Tests for faker_mcp/mcp/faker.py module."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastmcp import FastMCP

from faker_mcp.mcp.faker import INSTRUCTIONS, create_faker_server, run_protocol_session


class TestCreateFakerServer:
    def test_returns_fastmcp_instance(self):
        server = create_faker_server()

        assert isinstance(server, FastMCP)
        assert server.name == "faker-server"
        assert server.instructions == INSTRUCTIONS

    def test_each_call_builds_new_server(self):
        assert create_faker_server() is not create_faker_server()


class TestRunProtocolSession:
    @pytest.mark.asyncio
    async def test_runs_low_level_server_statefully(self):
        server = Mock()
        server._mcp_server.run = AsyncMock()
        server._mcp_server.create_initialization_options.return_value = "options"
        read_stream, write_stream = Mock(), Mock()

        await run_protocol_session(server, read_stream, write_stream)

        server._mcp_server.run.assert_awaited_once_with(read_stream, write_stream, "options", stateless=False)
