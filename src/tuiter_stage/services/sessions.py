"""Session storage for the acting principal.

A session maps an opaque session id to at most one ``PrincipalSnapshot``. The
store is shared across requests; the request-scoped ``SessionContext`` carries
the caller's token and is passed explicitly to identity resolution.
"""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Protocol

import redis

from tuiter_stage.core.security import create_session_token, decode_session_token, new_session_id
from tuiter_stage.schemas.user import PrincipalSnapshot

logger = logging.getLogger(__name__)

_KEY_PREFIX = "session:"


class SessionStore(Protocol):
    """Holds one principal snapshot per session id."""

    def get(self, session_id: str) -> PrincipalSnapshot | None: ...

    def set(self, session_id: str, principal: PrincipalSnapshot) -> None: ...

    def destroy(self, session_id: str) -> None: ...


class InMemorySessionStore:
    """Process-local session store with per-entry expiry."""

    def __init__(self, ttl_seconds: int) -> None:
        self._ttl_seconds = ttl_seconds
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = Lock()

    def get(self, session_id: str) -> PrincipalSnapshot | None:
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            expiry, payload = entry
            if expiry < now:
                self._entries.pop(session_id, None)
                return None
        return PrincipalSnapshot.model_validate_json(payload)

    def set(self, session_id: str, principal: PrincipalSnapshot) -> None:
        now = time.monotonic()
        with self._lock:
            self._sweep(now)
            self._entries[session_id] = (now + self._ttl_seconds, principal.model_dump_json())

    def destroy(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _sweep(self, now: float) -> None:
        # Caller holds the lock.
        expired = [key for key, (expiry, _) in self._entries.items() if expiry < now]
        for key in expired:
            del self._entries[key]


class RedisSessionStore:
    """Session store shared between processes through Redis."""

    def __init__(self, client: redis.Redis, ttl_seconds: int) -> None:
        self._redis = client
        self._ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int) -> RedisSessionStore:
        return cls(redis.from_url(url), ttl_seconds)  # type: ignore[no-untyped-call]

    def get(self, session_id: str) -> PrincipalSnapshot | None:
        payload = self._redis.get(f"{_KEY_PREFIX}{session_id}")
        if payload is None:
            return None
        return PrincipalSnapshot.model_validate_json(payload)

    def set(self, session_id: str, principal: PrincipalSnapshot) -> None:
        self._redis.set(
            f"{_KEY_PREFIX}{session_id}",
            principal.model_dump_json(),
            ex=self._ttl_seconds,
        )

    def destroy(self, session_id: str) -> None:
        self._redis.delete(f"{_KEY_PREFIX}{session_id}")


class SessionContext:
    """Request-scoped handle on the caller's session.

    ``token`` is the signed session token presented by the client (if any).
    ``establish`` issues a new token, which the API layer writes back to the
    client as a cookie.
    """

    def __init__(self, store: SessionStore, token: str | None = None) -> None:
        self.store = store
        self.token = token
        self.issued_token: str | None = None
        self.destroyed = False
        self._session_id = decode_session_token(token) if token else None

    @property
    def session_id(self) -> str | None:
        return self._session_id

    @property
    def principal(self) -> PrincipalSnapshot | None:
        if self._session_id is None:
            return None
        return self.store.get(self._session_id)

    def establish(self, principal: PrincipalSnapshot) -> str:
        """Bind ``principal`` to a fresh session and return its token."""
        if self._session_id is not None:
            self.store.destroy(self._session_id)
        self._session_id = new_session_id()
        self.store.set(self._session_id, principal)
        self.issued_token = create_session_token(self._session_id)
        self.destroyed = False
        return self.issued_token

    def refresh(self, principal: PrincipalSnapshot) -> None:
        """Replace the stored snapshot without rotating the session."""
        if self._session_id is not None:
            self.store.set(self._session_id, principal)

    def destroy(self) -> None:
        if self._session_id is not None:
            self.store.destroy(self._session_id)
            logger.debug("Destroyed session %s", self._session_id[:8])
        self._session_id = None
        self.destroyed = True
