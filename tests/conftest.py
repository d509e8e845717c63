# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tuiter_stage.api.v1.dependencies import get_registry
from tuiter_stage.core.security import hash_password
from tuiter_stage.core.settings import Settings
from tuiter_stage.db.session import Base
from tuiter_stage.db.session import get_db as app_get_session
from tuiter_stage.main import app as fastapi_app
from tuiter_stage.models import Role, Tuit, User
from tuiter_stage.schemas.user import PrincipalSnapshot
from tuiter_stage.services.registry import ServiceRegistry
from tuiter_stage.services.sessions import InMemorySessionStore, SessionContext

from tests.fakes import TEST_PASSWORD, FakeObjectStore

TEST_DB_URL = "sqlite://"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


@pytest.fixture()
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture()
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore(ttl_seconds=3600)


@pytest.fixture()
def registry(
    app_settings: Settings,
    object_store: FakeObjectStore,
    session_store: InMemorySessionStore,
) -> ServiceRegistry:
    return ServiceRegistry.build(
        app_settings,
        object_store=object_store,
        session_store=session_store,
    )


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    registry: ServiceRegistry,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_registry] = lambda: registry
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_registry, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with ``TEST_PASSWORD``."""

    def _make_user(username: str, role: Role = Role.REGULAR, **fields: object) -> User:
        user = User(
            username=username,
            password=hash_password(TEST_PASSWORD, rounds=4),
            role=role,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def alice(make_user: Callable[..., User]) -> User:
    return make_user("alice")


@pytest.fixture()
def bob(make_user: Callable[..., User]) -> User:
    return make_user("bob")


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user("root", role=Role.ADMIN)


@pytest.fixture()
def session_for(session_store: InMemorySessionStore) -> Callable[[User], SessionContext]:
    """Return a factory binding a user to a fresh session."""

    def _session_for(user: User) -> SessionContext:
        context = SessionContext(session_store)
        context.establish(PrincipalSnapshot.model_validate(user))
        return context

    return _session_for


@pytest.fixture()
def headers_for(
    session_for: Callable[[User], SessionContext],
) -> Callable[[User], dict[str, str]]:
    """Return a factory producing bearer headers for a logged-in user."""

    def _headers_for(user: User) -> dict[str, str]:
        token = session_for(user).issued_token
        return {"Authorization": f"Bearer {token}"}

    return _headers_for


@pytest.fixture()
def make_tuit(db_session: Session) -> Callable[..., Tuit]:
    def _make_tuit(
        author: User,
        text: str = "hello tuiter",
        image: list[str] | None = None,
        video: list[str] | None = None,
    ) -> Tuit:
        tuit = Tuit(
            posted_by=author.id,
            tuit=text,
            image=image or [],
            video=video or [],
            likes=0,
        )
        db_session.add(tuit)
        db_session.commit()
        db_session.refresh(tuit)
        return tuit

    return _make_tuit

