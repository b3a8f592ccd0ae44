"""
Access gate tests.

The gate decides what an identity sees on the manager dashboard and the
admin panel, including accounts with a pending or rejected manager request.
"""
from datetime import timedelta

import pytest
from django.contrib.auth.models import AnonymousUser
from django.utils import timezone

from approvals.models import ManagerRequest, RequestStatus
from users.gate import AccessGate, Decision, Surface
from users.models import User


def _request_for(user, status):
    return ManagerRequest.objects.create(
        requester=user, name=user.name, email=user.email, status=status,
    )


@pytest.mark.django_db
class TestDashboardSurface:
    """Dashboard surface decisions by role and request state"""

    def test_anonymous_must_sign_in(self):
        decision = AccessGate.evaluate(AnonymousUser(), Surface.DASHBOARD)
        assert decision.decision == Decision.SIGN_IN
        assert decision.redirect_to == "/admin-login"
        assert decision.allowed is False

    @pytest.mark.parametrize("role", [User.Role.MANAGER, User.Role.MANAGEMENT, User.Role.ADMIN])
    def test_dashboard_roles_are_allowed(self, role):
        user = User.objects.create_user(email=f"{role}@campus.edu", password="password123", role=role)
        decision = AccessGate.evaluate(user, Surface.DASHBOARD)
        assert decision.allowed is True

    def test_student_without_request_is_sent_home(self, student_user):
        decision = AccessGate.evaluate(student_user, Surface.DASHBOARD)
        assert decision.decision == Decision.FORBIDDEN
        assert decision.redirect_to == "/"

    def test_pending_request(self, student_user):
        _request_for(student_user, RequestStatus.PENDING)
        decision = AccessGate.evaluate(student_user, Surface.DASHBOARD)
        assert decision.decision == Decision.PENDING
        assert decision.redirect_to == "/admin-login"

    def test_rejected_request(self, student_user):
        _request_for(student_user, RequestStatus.REJECTED)
        decision = AccessGate.evaluate(student_user, Surface.DASHBOARD)
        assert decision.decision == Decision.REJECTED

    def test_approved_request_with_student_role_is_forbidden(self, student_user):
        # Role was changed back after approval
        _request_for(student_user, RequestStatus.APPROVED)
        decision = AccessGate.evaluate(student_user, Surface.DASHBOARD)
        assert decision.decision == Decision.FORBIDDEN

    def test_latest_request_wins(self, student_user):
        rejected = _request_for(student_user, RequestStatus.REJECTED)
        ManagerRequest.objects.filter(pk=rejected.pk).update(
            created_at=timezone.now() - timedelta(days=1)
        )
        _request_for(student_user, RequestStatus.PENDING)
        decision = AccessGate.evaluate(student_user, Surface.DASHBOARD)
        assert decision.decision == Decision.PENDING


@pytest.mark.django_db
class TestAdminSurface:
    """Only admins reach the admin panel"""

    def test_admin_is_allowed(self, admin_user):
        assert AccessGate.evaluate(admin_user, Surface.ADMIN).allowed is True

    def test_manager_is_sent_to_dashboard(self, manager_user):
        decision = AccessGate.evaluate(manager_user, Surface.ADMIN)
        assert decision.decision == Decision.FORBIDDEN
        assert decision.redirect_to == "/manager"

    def test_student_with_pending_request(self, student_user):
        _request_for(student_user, RequestStatus.PENDING)
        assert AccessGate.evaluate(student_user, Surface.ADMIN).decision == Decision.PENDING

    def test_unknown_surface_raises(self, admin_user):
        with pytest.raises(ValueError):
            AccessGate.evaluate(admin_user, "kitchen")


@pytest.mark.django_db
class TestAccessGateAPI:
    """GET /api/access/<surface>/"""

    def test_anonymous_gets_sign_in_decision(self, api_client):
        response = api_client.get("/api/access/dashboard/")
        assert response.status_code == 200
        assert response.data["decision"] == "sign_in"
        assert response.data["allowed"] is False

    def test_manager_allowed(self, manager_client):
        response = manager_client.get("/api/access/dashboard/")
        assert response.status_code == 200
        assert response.data["allowed"] is True

    def test_unknown_surface_is_404(self, manager_client):
        response = manager_client.get("/api/access/kitchen/")
        assert response.status_code == 404
        assert response.data["code"] == "not_found"
