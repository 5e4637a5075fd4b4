"""Utility Functions for the Faker MCP Server.

Functions
---------
utc_timestamp
    Current time as an ISO-8601 UTC string with millisecond precision
to_json_safe
    Convert Faker return values into JSON serializable data
format_records
    Render generated records as the JSON text returned by the tools
jsonrpc_error
    Build the JSON-RPC error envelope used for transport level failures
"""

import base64
import json
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from .constants import JSONRPC_VERSION


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Return ``now`` (default: current time) as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Examples
    --------
        >>> utc_timestamp(datetime(2024, 5, 1, 12, 30, tzinfo=UTC))
        '2024-05-01T12:30:00.000Z'
    """
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_json_safe(value: Any) -> Any:
    """Convert a value produced by a Faker provider into JSON serializable data.

    Dates and times become ISO strings, decimals floats, bytes base64 text,
    tuples and sets lists. Containers are converted recursively; anything else
    unknown falls back to ``str``.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, dict):
        return {str(k): to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_safe(v) for v in value]
    return str(value)


def format_records(records: List[Any]) -> str:
    """Render generated records as indented JSON text."""
    return json.dumps(to_json_safe(records), indent=2, ensure_ascii=False)


def jsonrpc_error(code: int, message: str) -> Dict[str, Any]:
    """Build a JSON-RPC error envelope with a null id.

    Examples
    --------
        >>> jsonrpc_error(-32603, "Internal server error")
        {'jsonrpc': '2.0', 'error': {'code': -32603, 'message': 'Internal server error'}, 'id': None}
    """
    return {"jsonrpc": JSONRPC_VERSION, "error": {"code": code, "message": message}, "id": None}
