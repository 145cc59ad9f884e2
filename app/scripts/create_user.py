"""
Create a user (e.g. the first main admin). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user "Family Admin" admin@example.com your-secure-password main_admin
"""
import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.logging_config import configure_logging
from app.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
)
from app.models import Role, User
from app.schemas.auth import normalize_email

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    configure_logging(settings.LOG_LEVEL)
    parser = argparse.ArgumentParser(description="Create a family tree user account.")
    parser.add_argument("name", help=f"Display name ({NAME_MIN_LEN}-{NAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address used to sign in")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.USER.value,
        choices=[role.value for role in Role],
    )
    args = parser.parse_args(argv)

    name = args.name.strip()
    if not NAME_MIN_LEN <= len(name) <= NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1
    try:
        email = normalize_email(args.email)
    except ValueError:
        email = ""
    if not email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    role = Role(args.role)
    db = SessionLocal()
    try:
        if db.query(User.id).filter(User.email == email).first() is not None:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        if role == Role.MAIN_ADMIN and db.query(User.id).filter(User.role == Role.MAIN_ADMIN).first():
            print("A main admin already exists.", file=sys.stderr)
            return 1
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(args.password),
            role=role,
        )
        db.add(user)
        db.commit()
        print(f"Created user '{email}' with role '{role.value}'.")
        return 0
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to create user: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
