"""Pytest configuration and shared fixtures."""

import logging
from typing import Any, Dict, Generator

import pytest
from fastapi.testclient import TestClient

from faker_mcp.app import create_app
from faker_mcp.config import AppConfig, ServerConfig
from faker_mcp.context import Context

MCP_HEADERS = {
    "Accept": "application/json, text/event-stream",
    "Content-Type": "application/json",
}

INITIALIZE_REQUEST: Dict[str, Any] = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "initialize",
    "params": {
        "protocolVersion": "2025-03-26",
        "capabilities": {},
        "clientInfo": {"name": "test-client", "version": "1.0.0"},
    },
}

INITIALIZED_NOTIFICATION: Dict[str, Any] = {"jsonrpc": "2.0", "method": "notifications/initialized"}


def initialize_session(client: TestClient) -> str:
    """Run the MCP handshake and return the issued session id."""
    response = client.post("/mcp", json=INITIALIZE_REQUEST, headers=MCP_HEADERS)
    assert response.status_code == 200
    session_id = response.headers["mcp-session-id"]

    response = client.post(
        "/mcp", json=INITIALIZED_NOTIFICATION, headers={**MCP_HEADERS, "mcp-session-id": session_id}
    )
    assert response.status_code == 202
    return session_id


@pytest.fixture
def test_config() -> AppConfig:
    """Create a test configuration with plain JSON transport responses."""
    return AppConfig(server=ServerConfig(json_response=True))


@pytest.fixture
def test_context(test_config: AppConfig) -> Context:
    """Create an isolated application context."""
    return Context(test_config)


@pytest.fixture
def client(test_context: Context) -> Generator[TestClient, None, None]:
    """Create a test client with the application lifespan running."""
    with TestClient(create_app(test_context)) as test_client:
        yield test_client


@pytest.fixture
def restore_root_logger() -> Generator[logging.Logger, None, None]:
    """Restore root logger handlers and level after a test reconfigures logging."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            handler.close()
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
