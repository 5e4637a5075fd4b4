"""Input Validation for the Faker MCP Server.

This module validates the inputs the server acts on: raw JSON-RPC payloads
arriving on ``/mcp`` and the arguments of the Faker tools.

Functions
---------
is_initialize_request
    Check whether a decoded payload is an MCP ``initialize`` request
validate_count
    Check a requested record count against the configured limit
validate_locale
    Check that Faker ships a locale
validate_provider_name
    Check that a name refers to a public Faker data provider
validate_text_kind
    Check the kind of text requested from ``generate_text``

Notes
-----
The tool validators raise ``GenerationError`` subclasses so that tool
implementations can turn them into readable messages.

See Also
--------
faker_mcp.exceptions : Exceptions raised by the validators
mcp.types : MCP protocol models
"""

from typing import Any, Optional

from faker.config import AVAILABLE_LOCALES
from mcp.types import InitializeRequest, JSONRPCRequest
from pydantic import ValidationError

from .constants import DISALLOWED_PROVIDERS, TEXT_KINDS
from .exceptions import CountLimitError, GenerationError, InvalidLocaleError, UnknownProviderError


def is_initialize_request(payload: Any) -> bool:
    """Check whether ``payload`` is a JSON-RPC ``initialize`` request.

    Parameters
    ----------
    payload : Any
        Decoded JSON request body

    Returns
    -------
    bool
        True if the payload is a well formed JSON-RPC request whose method is
        ``initialize`` and whose params satisfy the MCP initialize schema.
        Batches, notifications and responses are never initialize requests.

    Examples
    --------
        >>> is_initialize_request({
        ...     "jsonrpc": "2.0", "id": 1, "method": "initialize",
        ...     "params": {"protocolVersion": "2025-03-26", "capabilities": {},
        ...                "clientInfo": {"name": "client", "version": "1.0"}},
        ... })
        True
        >>> is_initialize_request({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        False
    """
    if not isinstance(payload, dict) or payload.get("method") != "initialize":
        return False

    try:
        request = JSONRPCRequest.model_validate(payload)
        InitializeRequest.model_validate({"method": request.method, "params": request.params})
    except ValidationError:
        return False

    return True


def validate_count(count: Any, max_count: int) -> int:
    """Validate a requested record count.

    Raises
    ------
    CountLimitError
        If ``count`` is not an integer in ``1..max_count``
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise CountLimitError("Count must be an integer", details={"count": count})
    if count < 1 or count > max_count:
        raise CountLimitError(
            f"Count must be between 1 and {max_count}", details={"count": count, "max_count": max_count}
        )
    return count


def validate_locale(locale: Optional[str], default_locale: str) -> str:
    """Resolve and validate a Faker locale.

    Returns ``default_locale`` when ``locale`` is empty.

    Raises
    ------
    InvalidLocaleError
        If Faker does not ship the locale
    """
    resolved = locale or default_locale
    if resolved not in AVAILABLE_LOCALES:
        raise InvalidLocaleError(f"Unsupported locale '{resolved}'", details={"locale": resolved})
    return resolved


def validate_provider_name(name: Any) -> str:
    """Validate a Faker provider name used by ``generate_custom``.

    Only checks the name itself; whether the provider exists for a given
    locale is resolved against the Faker instance.

    Raises
    ------
    UnknownProviderError
        If the name is empty, private or refers to a Faker proxy method
    """
    if not isinstance(name, str) or not name.strip():
        raise UnknownProviderError("Provider name must be a non-empty string", details={"provider": name})
    name = name.strip()
    if name.startswith("_") or name in DISALLOWED_PROVIDERS:
        raise UnknownProviderError(f"'{name}' is not a Faker data provider", details={"provider": name})
    return name


def validate_text_kind(kind: str) -> str:
    """Validate the kind of text requested.

    Raises
    ------
    GenerationError
        If ``kind`` is not one of ``TEXT_KINDS``
    """
    if kind not in TEXT_KINDS:
        raise GenerationError(
            f"Text kind must be one of {list(TEXT_KINDS)}", error_code="INVALID_TEXT_KIND", details={"kind": kind}
        )
    return kind
