"""Custom Exception Classes for the Faker MCP Server.

This module defines the exception hierarchy used for error handling and
user feedback in the Faker MCP server application.

Exception Hierarchy
------------------
FakerMCPException (base)
├── ConfigurationError
├── SessionError
│   ├── DuplicateSessionError
│   └── SessionCloseError
├── GenerationError
│   ├── InvalidLocaleError
│   ├── UnknownProviderError
│   └── CountLimitError
└── ServerError
    ├── ServerStartupError
    └── PortInUseError

Functions
---------
format_exception
    Format exception for user-friendly display
create_error_response
    Create standardized error response

Notes
-----
All custom exceptions carry an error code for programmatic handling, a
user-friendly message, a details dictionary and the original cause.

Examples
--------
Raise a custom exception:

    >>> from faker_mcp.exceptions import InvalidLocaleError
    >>> raise InvalidLocaleError("Unknown locale 'xx_XX'", details={"locale": "xx_XX"})

See Also
--------
faker_mcp.validation : Input validation raising these errors
"""

from typing import Any, Dict, Optional


class FakerMCPException(Exception):
    """Base exception class for all Faker MCP application errors.

    Attributes
    ----------
    error_code : str
        Unique error code for programmatic handling
    message : str
        User-friendly error message
    details : Dict[str, Any]
        Additional error details and context
    cause : Optional[Exception]
        Original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """Return string representation of the exception."""
        result = f"[{self.error_code}] {self.message}"
        if self.details:
            result += f" | Details: {self.details}"
        if self.cause:
            result += f" | Caused by: {self.cause}"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
            "type": self.__class__.__name__,
        }


# Configuration Errors
class ConfigurationError(FakerMCPException):
    """Raised when configuration values are missing or invalid."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="CONFIG_ERROR", **kwargs)


# Session Errors
class SessionError(FakerMCPException):
    """Base class for session registry errors."""

    def __init__(self, message: str, error_code: str = "SESSION_ERROR", **kwargs):
        super().__init__(message, error_code=error_code, **kwargs)


class DuplicateSessionError(SessionError):
    """Raised when a second transport is registered under an existing session id."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="DUPLICATE_SESSION", **kwargs)


class SessionCloseError(SessionError):
    """Raised when a session transport fails to close."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="SESSION_CLOSE_ERROR", **kwargs)


# Generation Errors
class GenerationError(FakerMCPException):
    """Base class for fake data generation errors."""

    def __init__(self, message: str, error_code: str = "GENERATION_ERROR", **kwargs):
        super().__init__(message, error_code=error_code, **kwargs)


class InvalidLocaleError(GenerationError):
    """Raised when a requested locale is not supported by Faker."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="INVALID_LOCALE", **kwargs)


class UnknownProviderError(GenerationError):
    """Raised when a requested Faker provider does not exist or is not allowed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="UNKNOWN_PROVIDER", **kwargs)


class CountLimitError(GenerationError):
    """Raised when a requested record count is out of bounds."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="COUNT_LIMIT", **kwargs)


# Server Errors
class ServerError(FakerMCPException):
    """Base class for server-related errors."""

    def __init__(self, message: str, error_code: str = "SERVER_ERROR", **kwargs):
        super().__init__(message, error_code=error_code, **kwargs)


class ServerStartupError(ServerError):
    """Raised when the HTTP listener cannot be started."""

    def __init__(self, message: str, error_code: str = "SERVER_STARTUP_ERROR", **kwargs):
        super().__init__(message, error_code=error_code, **kwargs)


class PortInUseError(ServerStartupError):
    """Raised when the listening port is already taken."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="PORT_IN_USE", **kwargs)


# Utility Functions
def format_exception(exception: Exception) -> str:
    """Format exception for user-friendly display.

    Parameters
    ----------
    exception : Exception
        The exception to format

    Returns
    -------
    str
        Formatted exception message

    Examples
    --------
        >>> format_exception(ValueError("Invalid value"))
        'ValueError: Invalid value'
    """
    if isinstance(exception, FakerMCPException):
        return str(exception)

    return f"{exception.__class__.__name__}: {str(exception)}"


def create_error_response(exception: Exception, include_technical_details: bool = False) -> Dict[str, Any]:
    """Create standardized error response dictionary.

    Parameters
    ----------
    exception : Exception
        The exception to convert to response
    include_technical_details : bool, optional
        Whether to include technical details (default: False)

    Returns
    -------
    Dict[str, Any]
        Standardized error response dictionary
    """
    if isinstance(exception, FakerMCPException):
        response = {
            "success": False,
            "error_code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
        }

        if include_technical_details:
            response["technical_details"] = {
                "exception_type": exception.__class__.__name__,
                "cause": str(exception.cause) if exception.cause else None,
                "full_message": str(exception),
            }
    else:
        response = {
            "success": False,
            "error_code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "details": {},
        }

        if include_technical_details:
            response["technical_details"] = {
                "exception_type": exception.__class__.__name__,
                "full_message": str(exception),
            }

    return response
