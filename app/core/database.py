"""Database engine and session management (one pooled engine per process)."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def engine_options(url: str, pooled: bool = True) -> dict[str, Any]:
    """Driver-specific create_engine options; SQLite connections are shared across the request thread pool."""
    if is_sqlite(url):
        return {"connect_args": {"check_same_thread": False}}
    if not pooled:
        return {}
    return {"pool_size": 5, "max_overflow": 10, "pool_recycle": 1800}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **overrides: Any) -> Engine:
    options: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.DEBUG}
    options.update(engine_options(url, pooled="poolclass" not in overrides))
    options.update(overrides)
    built = create_engine(url, **options)
    if is_sqlite(url):
        # SQLite leaves foreign keys unenforced unless asked per connection.
        event.listen(built, "connect", _enable_sqlite_foreign_keys)
    return built


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
