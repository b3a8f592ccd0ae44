"""
Manager access requests: submission by a signed-up identity and review by an
admin.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from foodcourt.exceptions import (
    DuplicateRequest,
    Forbidden,
    InvalidTransition,
    NotFound,
    Unauthenticated,
)
from users.models import User
from users.roles import can_administer, can_view_dashboard
from .models import ManagerRequest, RequestStatus
from .signals import manager_request_resolved, manager_request_submitted

logger = logging.getLogger(__name__)


class ManagerRequestService:

    @staticmethod
    @transaction.atomic
    def submit(user: User, name: str, email: str) -> ManagerRequest:
        """
        File a manager access request for `user`.

        Raises:
            DuplicateRequest: a pending request already exists, or the user
                already has dashboard access.
        """
        if user is None or not user.is_authenticated:
            raise Unauthenticated()

        if can_view_dashboard(user.role):
            raise DuplicateRequest("You already have manager access.")

        if ManagerRequest.objects.for_user(user).pending().exists():
            raise DuplicateRequest()

        try:
            # Savepoint so a racing duplicate does not poison the outer transaction
            with transaction.atomic():
                manager_request = ManagerRequest.objects.create(
                    requester=user,
                    name=(name or user.name).strip(),
                    email=(email or user.email).strip().lower(),
                )
        except IntegrityError:
            logger.info(f"Concurrent duplicate manager request from {user.email}")
            raise DuplicateRequest()

        logger.info(f"Manager request {manager_request.id} submitted by {user.email}")
        manager_request_submitted.send(sender=ManagerRequest, instance=manager_request)
        return manager_request

    @staticmethod
    def _require_reviewer(reviewer: User):
        if reviewer is None or not reviewer.is_authenticated:
            raise Unauthenticated()
        if not can_administer(reviewer.role):
            raise Forbidden("Only admins can review manager requests.")

    @staticmethod
    def _locked(request_id) -> ManagerRequest:
        try:
            return ManagerRequest.objects.select_for_update().get(id=request_id)
        except (ManagerRequest.DoesNotExist, ValidationError):
            raise NotFound("Manager request not found.")

    @staticmethod
    @transaction.atomic
    def approve(request_id, reviewer: User) -> ManagerRequest:
        """
        Approve a request and elevate the requester to manager.

        Approving an approved request returns it unchanged; approving a
        rejected one raises InvalidTransition.
        """
        ManagerRequestService._require_reviewer(reviewer)
        manager_request = ManagerRequestService._locked(request_id)

        if manager_request.status == RequestStatus.APPROVED:
            return manager_request
        if manager_request.status == RequestStatus.REJECTED:
            raise InvalidTransition(
                manager_request.status,
                RequestStatus.APPROVED,
                "This request was already rejected.",
            )

        manager_request.status = RequestStatus.APPROVED
        manager_request.reviewed_by = reviewer
        manager_request.reviewed_at = timezone.now()
        manager_request.save(update_fields=['status', 'reviewed_by', 'reviewed_at', 'updated_at'])

        requester = User.objects.select_for_update().get(pk=manager_request.requester_id)
        if not can_view_dashboard(requester.role):
            requester.role = User.Role.MANAGER
            requester.save(update_fields=['role', 'updated_at'])

        logger.info(
            f"Manager request {manager_request.id} approved by {reviewer.email}; "
            f"{requester.email} is now {requester.role}"
        )
        manager_request_resolved.send(
            sender=ManagerRequest, instance=manager_request, outcome=RequestStatus.APPROVED
        )
        return manager_request

    @staticmethod
    @transaction.atomic
    def reject(request_id, reviewer: User) -> ManagerRequest:
        """
        Reject a request. The requester's role is left as it is.
        """
        ManagerRequestService._require_reviewer(reviewer)
        manager_request = ManagerRequestService._locked(request_id)

        if manager_request.status == RequestStatus.REJECTED:
            return manager_request
        if manager_request.status == RequestStatus.APPROVED:
            raise InvalidTransition(
                manager_request.status,
                RequestStatus.REJECTED,
                "This request was already approved.",
            )

        manager_request.status = RequestStatus.REJECTED
        manager_request.reviewed_by = reviewer
        manager_request.reviewed_at = timezone.now()
        manager_request.save(update_fields=['status', 'reviewed_by', 'reviewed_at', 'updated_at'])

        logger.info(f"Manager request {manager_request.id} rejected by {reviewer.email}")
        manager_request_resolved.send(
            sender=ManagerRequest, instance=manager_request, outcome=RequestStatus.REJECTED
        )
        return manager_request

    @staticmethod
    def pending_requests():
        return ManagerRequest.objects.pending().select_related('requester').order_by('created_at')

    @staticmethod
    def latest_for(user: User):
        return ManagerRequest.objects.latest_for(user)

    @staticmethod
    def list_requests(status=None):
        queryset = ManagerRequest.objects.select_related('requester', 'reviewed_by')
        if status:
            queryset = queryset.filter(status=status)
        return queryset
