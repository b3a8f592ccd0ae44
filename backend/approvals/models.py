from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _
import uuid


class RequestStatus(models.TextChoices):
    """Status of a manager access request"""
    PENDING = 'pending', _('Pending')
    APPROVED = 'approved', _('Approved')
    REJECTED = 'rejected', _('Rejected')


class ManagerRequestQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=RequestStatus.PENDING)

    def for_user(self, user):
        return self.filter(requester=user)

    def latest_for(self, user):
        """Most recent request filed by `user`, or None."""
        return self.for_user(user).order_by('-created_at').first()


class ManagerRequest(models.Model):
    """
    A signed-up identity asking for manager access to the dashboard.

    Reviewed by an admin; approval elevates the requester's role to manager.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='manager_requests',
    )
    name = models.CharField(max_length=150)
    email = models.EmailField()

    status = models.CharField(
        max_length=20,
        choices=RequestStatus.choices,
        default=RequestStatus.PENDING,
        db_index=True,
    )

    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='reviewed_manager_requests',
        null=True,
        blank=True,
        help_text=_("Admin who approved or rejected the request"),
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ManagerRequestQuerySet.as_manager()

    class Meta:
        verbose_name = _("Manager Request")
        verbose_name_plural = _("Manager Requests")
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['requester', 'status'], name='mgr_req_requester_status_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['requester'],
                condition=Q(status='pending'),
                name='unique_pending_manager_request',
            ),
        ]

    def __str__(self):
        return f"{self.email} - {self.get_status_display()}"

    @property
    def is_pending(self):
        return self.status == RequestStatus.PENDING
