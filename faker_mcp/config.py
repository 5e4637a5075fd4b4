"""Configuration Management for the Faker MCP Server.

This module provides centralized configuration management for the Faker MCP
server application. It handles environment variables, default values, and
configuration validation using Pydantic models.

The configuration is organized into logical sections:
- Server configuration (host, port, transport options)
- Logging settings
- Faker generation defaults and limits
- Health probe thresholds

Classes
-------
ServerConfig
    Server-related configuration settings
LoggingConfig
    Logging configuration
FakerConfig
    Fake data generation defaults and limits
HealthConfig
    Health probe thresholds
AppConfig
    Main application configuration container

Functions
---------
get_config
    Get the global configuration instance
load_config
    Load configuration from environment variables
reload_config
    Force a reload from environment variables

Environment Variables
--------------------
PORT : int
    Listening port (default: 3000)
HOST : str
    Listening interface (default: "0.0.0.0")
FAKER_MCP_JSON_RESPONSE : bool
    Answer POST requests with plain JSON instead of SSE streams (default: False)
FAKER_MCP_SHUTDOWN_TIMEOUT : int
    Seconds uvicorn waits for open connections on shutdown (default: 5)
FAKER_MCP_LOG_LEVEL : str
    Logging level (default: "INFO")
FAKER_MCP_LOG_FILE : str
    Optional log file path
FAKER_MCP_DEFAULT_LOCALE : str
    Locale used when a tool call does not name one (default: "en_US")
FAKER_MCP_MAX_COUNT : int
    Maximum records per tool call (default: 1000)

Examples
--------
    >>> from faker_mcp.config import get_config
    >>> config = get_config()
    >>> config.server.port
    3000

See Also
--------
pydantic : Data validation and settings management
faker_mcp.constants : Fixed names and defaults
"""

import os
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import DEFAULT_HOST, DEFAULT_LOCALE, DEFAULT_PORT, MAX_COUNT, SERVER_VERSION
from .exceptions import ConfigurationError


class ServerConfig(BaseModel):
    """Server configuration settings.

    Attributes
    ----------
    host : str
        Interface the HTTP listener binds to
    port : int
        Listening port
    json_response : bool
        Return JSON bodies instead of SSE streams for POST requests
    graceful_shutdown_timeout : int
        Seconds to wait for open connections during shutdown
    """

    host: str = Field(default=DEFAULT_HOST, description="Server host address")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Server port number")
    json_response: bool = Field(default=False, description="Use JSON responses instead of SSE")
    graceful_shutdown_timeout: int = Field(default=5, ge=0, description="Graceful shutdown timeout in seconds")

    @field_validator("host")
    @classmethod
    def validate_host(cls, v):
        """Validate host address format."""
        if not v or not isinstance(v, str) or not v.strip():
            raise ValueError("Host must be a non-empty string")
        return v.strip()


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes
    ----------
    level : str
        Logging level
    json_format : bool
        Emit JSON lines instead of human-readable text
    file_path : Optional[str]
        Path to log file (None for console only)
    max_file_size_mb : int
        Maximum log file size in MB
    backup_count : int
        Number of backup log files to keep
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Logging level")
    json_format: bool = Field(default=False, description="JSON log output")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=1, description="Number of backup log files")


class FakerConfig(BaseModel):
    """Fake data generation defaults and limits.

    Attributes
    ----------
    default_locale : str
        Locale used when a tool call does not specify one
    max_count : int
        Maximum number of records a single tool call may request
    """

    default_locale: str = Field(default=DEFAULT_LOCALE, description="Default Faker locale")
    max_count: int = Field(default=MAX_COUNT, ge=1, description="Maximum records per tool call")

    @field_validator("default_locale")
    @classmethod
    def validate_default_locale(cls, v):
        """Ensure the default locale is one Faker ships."""
        from faker.config import AVAILABLE_LOCALES

        if v not in AVAILABLE_LOCALES:
            raise ValueError(f"Unsupported Faker locale: {v}")
        return v


class HealthConfig(BaseModel):
    """Health probe thresholds."""

    critical_resource_percent: float = Field(
        default=95.0, gt=0, le=100, description="CPU/memory usage above which the liveness probe fails"
    )


class AppConfig(BaseModel):
    """Main application configuration container.

    Attributes
    ----------
    server : ServerConfig
        Server configuration
    logging : LoggingConfig
        Logging configuration
    faker : FakerConfig
        Generation defaults
    health : HealthConfig
        Health probe thresholds
    app_name : str
        Application name
    version : str
        Application version
    """

    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    faker: FakerConfig = Field(default_factory=FakerConfig)
    health: HealthConfig = Field(default_factory=HealthConfig)
    app_name: str = Field(default="faker-mcp-server", description="Application name")
    version: str = Field(default=SERVER_VERSION, description="Application version")


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


def load_config() -> AppConfig:
    """Load configuration from environment variables.

    Returns
    -------
    AppConfig
        Configured application settings

    Raises
    ------
    ConfigurationError
        If an environment variable holds an invalid value

    Notes
    -----
    ``PORT`` and ``HOST`` are read without prefix so that container
    platforms can set them directly. Everything else uses ``FAKER_MCP_``.
    """
    try:
        server = ServerConfig(
            host=os.getenv("HOST", DEFAULT_HOST),
            port=int(os.getenv("PORT", DEFAULT_PORT)),
            json_response=_env_bool("FAKER_MCP_JSON_RESPONSE", False),
            graceful_shutdown_timeout=int(os.getenv("FAKER_MCP_SHUTDOWN_TIMEOUT", 5)),
        )

        log_level = os.getenv("FAKER_MCP_LOG_LEVEL", "INFO").upper()
        logging_config = LoggingConfig(
            level=log_level if log_level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] else "INFO",
            json_format=_env_bool("FAKER_MCP_LOG_JSON", False),
            file_path=os.getenv("FAKER_MCP_LOG_FILE"),
            max_file_size_mb=int(os.getenv("FAKER_MCP_LOG_MAX_SIZE_MB", 10)),
            backup_count=int(os.getenv("FAKER_MCP_LOG_BACKUP_COUNT", 5)),
        )

        faker_config = FakerConfig(
            default_locale=os.getenv("FAKER_MCP_DEFAULT_LOCALE", DEFAULT_LOCALE),
            max_count=int(os.getenv("FAKER_MCP_MAX_COUNT", MAX_COUNT)),
        )

        health = HealthConfig(
            critical_resource_percent=float(os.getenv("FAKER_MCP_CRITICAL_RESOURCE_PERCENT", 95.0)),
        )
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {str(e)}", cause=e) from e

    return AppConfig(
        server=server,
        logging=logging_config,
        faker=faker_config,
        health=health,
        app_name=os.getenv("FAKER_MCP_APP_NAME", "faker-mcp-server"),
    )


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance.

    The configuration is loaded once and reused throughout the application.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> AppConfig:
    """Reload configuration from environment variables."""
    global _config
    _config = load_config()
    return _config
