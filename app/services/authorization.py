"""Role-based authorization predicates. Pure functions; no database access."""

from typing import Protocol

from app.models.enums import Role

# Every Role member must appear here; a missing entry fails loudly in is_admin.
_ADMIN_BY_ROLE: dict[Role, bool] = {
    Role.USER: False,
    Role.ADMIN: True,
    Role.MAIN_ADMIN: True,
}

_MAIN_ADMIN_BY_ROLE: dict[Role, bool] = {
    Role.USER: False,
    Role.ADMIN: False,
    Role.MAIN_ADMIN: True,
}


class HasRole(Protocol):
    role: Role | str


class RoleChangeError(Exception):
    """Raised when an actor may not set the requested role on the target user."""

    def __init__(self, message: str, status_code: int = 403) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _coerce_role(user: HasRole | None) -> Role | None:
    if user is None:
        return None
    try:
        return Role(user.role)
    except ValueError:
        return None


def is_admin(user: HasRole | None) -> bool:
    """True iff the user holds an admin-level role. False for None or unknown roles."""
    role = _coerce_role(user)
    if role is None:
        return False
    return _ADMIN_BY_ROLE[role]


def is_main_admin(user: HasRole | None) -> bool:
    """True only for the main administrator."""
    role = _coerce_role(user)
    if role is None:
        return False
    return _MAIN_ADMIN_BY_ROLE[role]


def check_role_change(actor_id: int, actor: HasRole, target_id: int, target: HasRole, new_role: Role) -> None:
    """
    Enforce role-change rules. Raises RoleChangeError when the change is not allowed:
    nobody changes their own role, only the main admin promotes to admin, and the
    main admin cannot be demoted.
    """
    if not is_admin(actor):
        raise RoleChangeError("Admin access required")
    if actor_id == target_id:
        raise RoleChangeError("You cannot modify your own role", status_code=400)
    if new_role == Role.MAIN_ADMIN:
        raise RoleChangeError("Valid role (admin or user) is required", status_code=400)
    if new_role == Role.ADMIN and not is_main_admin(actor):
        raise RoleChangeError("Only the main administrator can promote users to admin role")
    if is_main_admin(target):
        raise RoleChangeError("The main administrator cannot be demoted")
