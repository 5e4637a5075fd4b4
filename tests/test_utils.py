"""Tests for utility functions."""

import json
from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID

from faker_mcp.utils import format_records, jsonrpc_error, to_json_safe, utc_timestamp


class TestUtcTimestamp:
    def test_millisecond_precision_with_z_suffix(self):
        assert utc_timestamp(datetime(2024, 5, 1, 12, 30, 5, 123456, tzinfo=UTC)) == "2024-05-01T12:30:05.123Z"

    def test_converts_other_timezones(self):
        plus_two = timezone(timedelta(hours=2))
        assert utc_timestamp(datetime(2024, 5, 1, 14, 0, tzinfo=plus_two)) == "2024-05-01T12:00:00.000Z"

    def test_current_time(self):
        stamp = utc_timestamp()
        assert stamp.endswith("Z")
        assert len(stamp) == len("2024-05-01T12:00:00.000Z")


class TestToJsonSafe:
    def test_scalars_pass_through(self):
        for value in (None, True, 3, 2.5, "text"):
            assert to_json_safe(value) == value

    def test_special_types(self):
        assert to_json_safe(Decimal("12.50")) == 12.5
        assert to_json_safe(date(2020, 1, 2)) == "2020-01-02"
        assert to_json_safe(datetime(2020, 1, 2, 3, 4, 5)) == "2020-01-02T03:04:05"
        assert to_json_safe(timedelta(minutes=2)) == 120.0
        assert to_json_safe(b"hi") == "aGk="
        assert to_json_safe(UUID(int=1)) == "00000000-0000-0000-0000-000000000001"

    def test_containers_are_converted_recursively(self):
        value = {"coords": (Decimal("1.5"), Decimal("2.5")), 7: {date(2021, 3, 4)}}

        assert to_json_safe(value) == {"coords": [1.5, 2.5], "7": ["2021-03-04"]}

    def test_unknown_objects_become_strings(self):
        class Custom:
            def __str__(self):
                return "custom"

        assert to_json_safe(Custom()) == "custom"


class TestFormatRecords:
    def test_indented_json(self):
        text = format_records([{"name": "Zoë", "joined": date(2022, 6, 1)}])

        assert json.loads(text) == [{"name": "Zoë", "joined": "2022-06-01"}]
        assert "Zoë" in text
        assert "\n  " in text


class TestJsonRpcError:
    def test_envelope(self):
        assert jsonrpc_error(-32000, "Bad Request: No valid session ID provided") == {
            "jsonrpc": "2.0",
            "error": {"code": -32000, "message": "Bad Request: No valid session ID provided"},
            "id": None,
        }
