"""
Role predicates used by every gate check.

Each predicate handles every member of User.Role explicitly and raises on a
value it does not know, so adding a role forces a decision here.
"""
from .models import User


def _coerce(role) -> User.Role:
    try:
        return User.Role(role)
    except ValueError:
        raise ValueError(f"Unknown role: {role!r}")


def can_view_dashboard(role) -> bool:
    """Manager dashboard: live orders, menu management, demand predictions."""
    role = _coerce(role)
    if role == User.Role.STUDENT:
        return False
    if role == User.Role.MANAGER:
        return True
    if role == User.Role.MANAGEMENT:
        return True
    if role == User.Role.ADMIN:
        return True
    raise ValueError(f"Unhandled role: {role!r}")


def can_administer(role) -> bool:
    """Admin panel: manager requests and role assignment."""
    role = _coerce(role)
    if role == User.Role.STUDENT:
        return False
    if role == User.Role.MANAGER:
        return False
    if role == User.Role.MANAGEMENT:
        return False
    if role == User.Role.ADMIN:
        return True
    raise ValueError(f"Unhandled role: {role!r}")


def can_update_order_status(role) -> bool:
    # Kitchen staff share the dashboard surface
    return can_view_dashboard(role)
