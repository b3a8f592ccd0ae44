from rest_framework import permissions
import logging

from .roles import can_administer, can_view_dashboard

logger = logging.getLogger(__name__)


class IsDashboardUser(permissions.BasePermission):
    """Managers, management staff and admins."""

    message = "Manager access is required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and can_view_dashboard(user.role))


class IsAdminRole(permissions.BasePermission):
    message = "Admin access is required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and can_administer(user.role))


class ReadOnlyOrDashboardUser(permissions.BasePermission):
    """
    Anyone may read (the menu is public); only dashboard users may write.
    """

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True

        user = request.user
        allowed = bool(user and user.is_authenticated and can_view_dashboard(user.role))
        if not allowed:
            logger.warning(
                "Write denied: method=%s path=%s user=%s",
                request.method,
                request.get_full_path(),
                getattr(user, "email", None),
            )
        return allowed
