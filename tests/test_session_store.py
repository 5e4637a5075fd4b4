"""Tests for the session registry."""

from unittest.mock import Mock

import pytest
from mcp.server.streamable_http import StreamableHTTPServerTransport

from faker_mcp.exceptions import DuplicateSessionError, SessionError
from faker_mcp.session_store import SessionStore


def make_transport():
    return Mock(spec=StreamableHTTPServerTransport)


class TestSessionStore:
    """Test SessionStore registration, lookup and removal."""

    def test_new_store_is_empty(self):
        store = SessionStore()

        assert len(store) == 0
        assert store.session_ids() == []
        assert "anything" not in store

    def test_register_and_get(self):
        store = SessionStore()
        transport = make_transport()

        store.register("abc", transport)

        assert store.get("abc") is transport
        assert "abc" in store
        assert len(store) == 1

    def test_get_missing_or_empty_id(self):
        store = SessionStore()
        store.register("abc", make_transport())

        assert store.get("missing") is None
        assert store.get("") is None
        assert store.get(None) is None

    def test_duplicate_registration_keeps_first_transport(self):
        store = SessionStore()
        first = make_transport()
        store.register("abc", first)

        with pytest.raises(DuplicateSessionError) as exc_info:
            store.register("abc", make_transport())

        assert isinstance(exc_info.value, SessionError)
        assert exc_info.value.details == {"session_id": "abc"}
        assert store.get("abc") is first

    def test_register_empty_id(self):
        with pytest.raises(ValueError):
            SessionStore().register("", make_transport())

    def test_remove(self):
        store = SessionStore()
        transport = make_transport()
        store.register("abc", transport)

        assert store.remove("abc") is transport
        assert "abc" not in store
        assert store.remove("abc") is None

    def test_remove_only_matching_transport(self):
        store = SessionStore()
        transport = make_transport()
        store.register("abc", transport)

        assert store.remove("abc", make_transport()) is None
        assert store.get("abc") is transport
        assert store.remove("abc", transport) is transport

    def test_session_ids_snapshot_allows_removal(self):
        store = SessionStore()
        store.register("a", make_transport())
        store.register("b", make_transport())

        for session_id in store.session_ids():
            store.remove(session_id)

        assert len(store) == 0

    def test_stores_are_isolated(self):
        first, second = SessionStore(), SessionStore()
        first.register("abc", make_transport())

        assert "abc" not in second
