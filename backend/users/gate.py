"""
Route-level access gate for the management surfaces.

The web client asks the gate before rendering the manager dashboard or the
admin panel and follows the decision's redirect.
"""
from dataclasses import dataclass
import logging

from django.db import models

from .roles import can_administer, can_view_dashboard

logger = logging.getLogger(__name__)

MANAGEMENT_SIGN_IN_PATH = "/admin-login"
DASHBOARD_PATH = "/manager"
ADMIN_PATH = "/admin"
HOME_PATH = "/"


class Surface(models.TextChoices):
    DASHBOARD = "dashboard", "Manager dashboard"
    ADMIN = "admin", "Admin panel"


class Decision(models.TextChoices):
    ALLOW = "allow", "Allow"
    SIGN_IN = "sign_in", "Sign in required"
    PENDING = "pending", "Request pending"
    REJECTED = "rejected", "Request rejected"
    FORBIDDEN = "forbidden", "Forbidden"


@dataclass(frozen=True)
class GateDecision:
    surface: str
    decision: str
    redirect_to: str = ""
    message: str = ""

    @property
    def allowed(self):
        return self.decision == Decision.ALLOW

    def as_dict(self):
        return {
            "surface": self.surface,
            "decision": self.decision,
            "allowed": self.allowed,
            "redirect_to": self.redirect_to,
            "message": self.message,
        }


class AccessGate:
    """Decides what an identity sees when it navigates to a management surface."""

    @staticmethod
    def evaluate(user, surface) -> GateDecision:
        surface = Surface(surface)

        if user is None or not user.is_authenticated:
            return GateDecision(
                surface, Decision.SIGN_IN, MANAGEMENT_SIGN_IN_PATH,
                "Please sign in with a management account.",
            )

        if surface == Surface.ADMIN:
            if can_administer(user.role):
                return GateDecision(surface, Decision.ALLOW)
            if can_view_dashboard(user.role):
                return GateDecision(
                    surface, Decision.FORBIDDEN, DASHBOARD_PATH,
                    "Only administrators can open the admin panel.",
                )
            return AccessGate._request_state(user, surface)

        if can_view_dashboard(user.role):
            return GateDecision(surface, Decision.ALLOW)
        return AccessGate._request_state(user, surface)

    @staticmethod
    def _request_state(user, surface) -> GateDecision:
        # Local import: approvals depends on users
        from approvals.models import ManagerRequest, RequestStatus

        latest = ManagerRequest.objects.latest_for(user)
        if latest is None:
            return GateDecision(
                surface, Decision.FORBIDDEN, HOME_PATH,
                "This account does not have management access.",
            )

        if latest.status == RequestStatus.PENDING:
            return GateDecision(
                surface, Decision.PENDING, MANAGEMENT_SIGN_IN_PATH,
                "Your manager access request is pending approval.",
            )
        if latest.status == RequestStatus.REJECTED:
            return GateDecision(
                surface, Decision.REJECTED, MANAGEMENT_SIGN_IN_PATH,
                "Your manager access request was rejected.",
            )
        if latest.status == RequestStatus.APPROVED:
            # Approved but the role was changed back by an admin since.
            logger.info(f"User {user.email} has an approved request but role '{user.role}'")
            return GateDecision(
                surface, Decision.FORBIDDEN, HOME_PATH,
                "This account does not have management access.",
            )
        raise ValueError(f"Unhandled request status: {latest.status!r}")
