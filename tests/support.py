"""Shared test bases: in-memory SQLite wired into the app through dependency overrides."""

import unittest
from datetime import date, datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.requests import Request

from app.core.database import get_db
from app.core.security import hash_password
from app.main import app
from app.models import Base, FamilyMember, Role, User
from app.schemas.members import MemberCreate
from app.services.members import create_member
from app.services.tokens import issue_token

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "correct-horse-battery"
# bcrypt at cost 12 is slow; fixture users share one hash.
DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)

API = "/api/v1"


def make_request(headers: dict[str, str] | None = None, cookies: dict[str, str] | None = None) -> Request:
    """Build a bare Starlette request with the given headers and cookies."""
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    if cookies:
        cookie_header = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw.append((b"cookie", cookie_header.encode("latin-1")))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw, "query_string": b""})


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema per test; self.db is a session on the shared in-memory database."""

    def setUp(self) -> None:
        Base.metadata.create_all(bind=engine)
        self.db: Session = TestingSessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(bind=engine)

    def create_user(
        self,
        email: str,
        role: Role = Role.USER,
        name: str | None = None,
        created_at: datetime | None = None,
    ) -> User:
        user = User(
            name=name or email.split("@")[0].title(),
            email=email,
            password_hash=DEFAULT_PASSWORD_HASH,
            role=role,
        )
        if created_at is not None:
            user.created_at = created_at
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def token_for(self, user: User, expires_delta: timedelta = timedelta(hours=1)) -> str:
        return issue_token(self.db, user, expires_delta).token

    def create_member(self, first_name: str, last_name: str = "Doe", **kwargs: object) -> FamilyMember:
        fields = {
            "birth_date": date(1950, 1, 1),
            "gender": "other",
            "generation": 1,
        }
        fields.update(kwargs)
        return create_member(
            self.db,
            MemberCreate(first_name=first_name, last_name=last_name, **fields),
        )


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose requests use the same database."""

    def setUp(self) -> None:
        super().setUp()
        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    def auth_headers(self, user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token_for(user)}"}
