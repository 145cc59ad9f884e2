"""Closed enumerations stored in ORM columns."""

import enum


class Role(str, enum.Enum):
    """Privilege level of a user account. Adding a member means updating every role decision table."""

    USER = "user"
    ADMIN = "admin"
    MAIN_ADMIN = "main_admin"


class TokenType(str, enum.Enum):
    """Purpose of a persisted token."""

    AUTH = "auth"
    REFRESH = "refresh"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum values (e.g. 'main_admin') rather than member names."""
    return [member.value for member in enum_cls]
