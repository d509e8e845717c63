# mypy: ignore-errors
"""Tests for session storage and tokens."""

import time
from unittest.mock import MagicMock

from tuiter_stage.core.security import create_session_token, decode_session_token
from tuiter_stage.models import Role
from tuiter_stage.schemas.user import PrincipalSnapshot
from tuiter_stage.services.sessions import InMemorySessionStore, RedisSessionStore, SessionContext

PRINCIPAL = PrincipalSnapshot(id="a" * 32, username="alice", role=Role.REGULAR)


def test_token_round_trip() -> None:
    token = create_session_token("session-123")

    assert decode_session_token(token) == "session-123"


def test_garbage_token_is_ignored() -> None:
    assert decode_session_token("not-a-token") is None
    assert SessionContext(InMemorySessionStore(60), "not-a-token").principal is None


def test_expired_token_is_ignored() -> None:
    token = create_session_token("session-123", ttl_minutes=-1)

    assert decode_session_token(token) is None


def test_establish_rotates_session() -> None:
    store = InMemorySessionStore(60)
    first = SessionContext(store)
    first.establish(PRINCIPAL)
    old_id = first.session_id

    first.establish(PRINCIPAL.model_copy(update={"username": "alice2"}))

    assert first.session_id != old_id
    assert store.get(old_id) is None
    assert len(store) == 1
    again = SessionContext(store, first.issued_token)
    assert again.principal.username == "alice2"


def test_entries_expire() -> None:
    store = InMemorySessionStore(ttl_seconds=-1)
    store.set("sid", PRINCIPAL)

    assert store.get("sid") is None


def test_refresh_keeps_session_id() -> None:
    store = InMemorySessionStore(60)
    context = SessionContext(store)
    context.establish(PRINCIPAL)
    session_id = context.session_id

    context.refresh(PRINCIPAL.model_copy(update={"first_name": "Alice"}))

    assert context.session_id == session_id
    assert store.get(session_id).first_name == "Alice"


def test_redis_store_uses_prefixed_keys() -> None:
    client = MagicMock()
    client.get.return_value = PRINCIPAL.model_dump_json()
    store = RedisSessionStore(client, ttl_seconds=120)

    store.set("sid", PRINCIPAL)
    loaded = store.get("sid")
    store.destroy("sid")

    client.set.assert_called_once_with("session:sid", PRINCIPAL.model_dump_json(), ex=120)
    client.get.assert_called_once_with("session:sid")
    client.delete.assert_called_once_with("session:sid")
    assert loaded.id == PRINCIPAL.id


def test_set_sweeps_expired_entries() -> None:
    store = InMemorySessionStore(ttl_seconds=60)
    store.set("abandoned", PRINCIPAL)
    store._entries["abandoned"] = (time.monotonic() - 1, PRINCIPAL.model_dump_json())

    store.set("fresh", PRINCIPAL)

    assert len(store) == 1
    assert store.get("fresh") is not None
