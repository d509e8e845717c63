"""Password hashing and session token helpers."""
from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from tuiter_stage.core.settings import settings

REDACTED_PASSWORD = "******"


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a bcrypt digest of ``password``."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_digest: str) -> bool:
    """Compare a plaintext password against a stored bcrypt digest."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_digest.encode("utf-8"))
    except ValueError:
        # Digest is not a bcrypt hash.
        return False


def new_session_id() -> str:
    """Return a random, URL-safe session identifier."""
    return secrets.token_urlsafe(32)


def create_session_token(session_id: str, ttl_minutes: int | None = None) -> str:
    """Sign a session identifier into a JWT the client carries between requests.

    Args:
        session_id: Opaque identifier keying the session store.
        ttl_minutes: Token lifetime; defaults to ``SESSION_TTL_MINUTES``.

    Returns:
        Encoded JWT with the session id as subject.
    """
    ttl = ttl_minutes if ttl_minutes is not None else settings.session_ttl_minutes
    expires = datetime.now(UTC) + timedelta(minutes=ttl)
    payload = {"sub": session_id, "exp": expires}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> str | None:
    """Return the session id carried by ``token``, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None
