# mypy: ignore-errors
"""Tests for identity resolution and authorization."""

import pytest

from tuiter_stage.core.errors import (
    InvalidInputError,
    NoPermissionError,
    NoSuchUserError,
    NotAuthenticatedError,
    UserAlreadyExistsError,
)
from tuiter_stage.core.security import verify_password
from tuiter_stage.models import Role
from tuiter_stage.repositories.user_repo import UserRepository
from tuiter_stage.schemas.user import Credentials, PrincipalSnapshot
from tuiter_stage.services.identity import IdentityService
from tuiter_stage.services.sessions import SessionContext

from tests.fakes import TEST_PASSWORD


@pytest.fixture()
def identity():
    return IdentityService(bcrypt_rounds=4)


@pytest.fixture()
def anonymous(session_store):
    return SessionContext(session_store)


def test_my_resolves_to_principal(identity, session_for, alice) -> None:
    session = session_for(alice)

    assert identity.resolve_target_id("my", session) == alice.id


def test_my_without_session_is_not_authenticated(identity, anonymous) -> None:
    with pytest.raises(NotAuthenticatedError):
        identity.resolve_target_id("my", anonymous)


def test_explicit_id_passes_through_without_session(identity, anonymous) -> None:
    assert identity.resolve_target_id("a" * 32, anonymous) == "a" * 32


@pytest.mark.parametrize("candidate", ["", "my", "abc", "A" * 32, "g" * 32, None, 12])
def test_invalid_ids(identity, candidate) -> None:
    assert identity.is_valid_id(candidate) is False


def test_require_valid_id_checks_every_candidate(identity) -> None:
    with pytest.raises(InvalidInputError):
        identity.require_valid_id("a" * 32, "nope")


def test_owner_or_admin(identity, alice, bob, admin) -> None:
    identity.require_owner_or_admin(PrincipalSnapshot.model_validate(alice), alice.id)
    identity.require_owner_or_admin(PrincipalSnapshot.model_validate(admin), alice.id)

    with pytest.raises(NoPermissionError):
        identity.require_owner_or_admin(PrincipalSnapshot.model_validate(bob), alice.id)


def test_require_admin(identity, alice, admin) -> None:
    identity.require_admin(PrincipalSnapshot.model_validate(admin))

    with pytest.raises(NoPermissionError):
        identity.require_admin(PrincipalSnapshot.model_validate(alice))


def test_register_creates_regular_user_and_logs_in(db_session, identity, anonymous) -> None:
    principal = identity.register(
        db_session,
        anonymous,
        Credentials(username="erin", password="s3cret", email="erin@example.com"),
    )

    assert principal.role == Role.REGULAR
    assert principal.password == "******"
    assert anonymous.principal.id == principal.id
    assert anonymous.issued_token

    stored = UserRepository(db_session).get_by_username("erin")
    assert stored.password != "s3cret"
    assert verify_password("s3cret", stored.password)


def test_register_duplicate_username(db_session, identity, anonymous, alice) -> None:
    with pytest.raises(UserAlreadyExistsError):
        identity.register(db_session, anonymous, Credentials(username="alice", password="x"))

    assert anonymous.principal is None


def test_register_requires_credentials(db_session, identity, anonymous) -> None:
    with pytest.raises(InvalidInputError):
        identity.register(db_session, anonymous, Credentials(username="frank"))


def test_login_success(db_session, identity, anonymous, alice) -> None:
    principal = identity.login(
        db_session, anonymous, Credentials(username="alice", password=TEST_PASSWORD)
    )

    assert principal.id == alice.id
    assert anonymous.principal.username == "alice"


@pytest.mark.parametrize(
    "username,password",
    [("alice", "wrong password"), ("nobody", TEST_PASSWORD)],
)
def test_login_failure_is_indistinguishable(db_session, identity, anonymous, alice, username, password) -> None:
    with pytest.raises(NoSuchUserError):
        identity.login(db_session, anonymous, Credentials(username=username, password=password))

    assert anonymous.principal is None


def test_logout_clears_principal(identity, session_for, alice) -> None:
    session = session_for(alice)

    identity.logout(session)

    assert session.principal is None
    assert session.destroyed is True
    with pytest.raises(NotAuthenticatedError):
        identity.profile(session)
