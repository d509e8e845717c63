"""Shared API dependencies for sessions, services and request payloads."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from tuiter_stage.core.errors import InvalidInputError
from tuiter_stage.core.settings import settings
from tuiter_stage.db.session import get_db
from tuiter_stage.schemas.user import PrincipalSnapshot
from tuiter_stage.services.media import MediaAsset
from tuiter_stage.services.registry import ServiceRegistry
from tuiter_stage.services.sessions import SessionContext

SESSION_TOKEN_HEADER = "X-Session-Token"

# Bearer tokens are optional; browsers carry the session in a cookie instead.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_registry(request: Request) -> ServiceRegistry:
    """Return the service registry built at startup."""
    return request.app.state.registry


RegistryDep = Annotated[ServiceRegistry, Depends(get_registry)]


def get_session_context(
    request: Request,
    registry: RegistryDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> SessionContext:
    """Build the request-scoped session handle from a bearer token or cookie."""
    token = credentials.credentials if credentials else None
    if token is None:
        token = request.cookies.get(settings.session_cookie_name)
    return SessionContext(registry.session_store, token)


SessionContextDep = Annotated[SessionContext, Depends(get_session_context)]


def get_current_principal(
    session: SessionContextDep,
    registry: RegistryDep,
) -> PrincipalSnapshot:
    """Return the logged-in principal or fail with ``NotAuthenticatedError``."""
    return registry.identity.resolve_principal(session)


CurrentPrincipalDep = Annotated[PrincipalSnapshot, Depends(get_current_principal)]


def write_session(response: Response, session: SessionContext) -> None:
    """Reflect session changes made during the request onto the response."""
    if session.issued_token:
        response.set_cookie(
            settings.session_cookie_name,
            session.issued_token,
            max_age=settings.session_ttl_minutes * 60,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="none" if settings.session_cookie_secure else "lax",
        )
        response.headers[SESSION_TOKEN_HEADER] = session.issued_token
    elif session.destroyed:
        response.delete_cookie(settings.session_cookie_name)


def _require_text(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidInputError(f"Expected text for field '{key}'")
    return value


@dataclass
class RequestPayload:
    """Fields and uploaded files of a form, multipart or JSON body."""

    values: dict[str, list[Any]] = field(default_factory=dict)
    files: dict[str, list[MediaAsset]] = field(default_factory=dict)

    def first(self, key: str, default: str | None = None) -> str | None:
        """Return the first text value of ``key``.

        Raises:
            InvalidInputError: If the value is not a string.
        """
        items = self.values.get(key)
        if not items or items[0] is None:
            return default
        return _require_text(key, items[0])

    def all(self, key: str) -> list[str]:
        return [
            _require_text(key, item)
            for item in self.values.get(key, [])
            if item not in (None, "")
        ]

    def scalars(self) -> dict[str, Any]:
        """Return every field with a single value as a plain mapping."""
        return {key: items[0] for key, items in self.values.items() if len(items) == 1}


async def read_payload(request: Request) -> RequestPayload:
    """Parse the body into string fields and in-memory file assets."""
    content_type = request.headers.get("content-type", "")
    values: dict[str, list[Any]] = defaultdict(list)
    files: dict[str, list[MediaAsset]] = defaultdict(list)

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as err:
            raise InvalidInputError("Malformed JSON body") from err
        if not isinstance(body, dict):
            raise InvalidInputError("Expected a JSON object")
        for key, value in body.items():
            values[key].extend(value if isinstance(value, list) else [value])
        return RequestPayload(values=dict(values))

    if not content_type:
        return RequestPayload()

    form = await request.form()
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            data = await value.read()
            if not data and not value.filename:
                # Empty file input submitted by a browser form.
                continue
            files[key].append(
                MediaAsset(
                    filename=value.filename or "",
                    content_type=value.content_type or "",
                    data=data,
                )
            )
        else:
            values[key].append(value)
    return RequestPayload(values=dict(values), files=dict(files))


PayloadDep = Annotated[RequestPayload, Depends(read_payload)]
