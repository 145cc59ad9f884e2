"""Test package. Point settings at SQLite before any app module is imported."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production-use-only-0123456789")
os.environ.setdefault("APP_ENV", "dev")
