# src/tuiter_stage/scripts/create_admin.py
"""Bootstrap an admin account.

Registration only ever creates regular users and roles can only be changed by
an admin, so the first admin has to be created out of band:

    python -m tuiter_stage.scripts.create_admin --username root --password secret
"""

from __future__ import annotations

import argparse
import sys

from sqlalchemy.orm import Session

from tuiter_stage.core.security import hash_password
from tuiter_stage.db.session import SessionLocal
from tuiter_stage.models import Role, User
from tuiter_stage.repositories.user_repo import UserRepository


def create_or_promote_admin(db: Session, username: str, password: str | None) -> tuple[User, bool]:
    """Create ``username`` as an admin, or promote it if it already exists.

    Returns:
        The admin user and True if a new row was inserted.
    """
    users = UserRepository(db)
    user = users.get_by_username(username)
    if user is not None:
        fields: dict[str, object] = {"role": Role.ADMIN}
        if password:
            fields["password"] = hash_password(password)
        users.update(user, fields)
        db.commit()
        return user, False

    if not password:
        raise ValueError("A password is required to create a new admin")
    user = users.create(username=username, password=hash_password(password), role=Role.ADMIN)
    db.commit()
    return user, True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create or promote an admin account.")
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", help="Required when the account does not exist yet")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user, created = create_or_promote_admin(db, args.username, args.password)
        action = "Created" if created else "Promoted"
        print(f"{action} admin {user.username} ({user.id})")
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
