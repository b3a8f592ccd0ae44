from django.dispatch import Signal, receiver
import logging

logger = logging.getLogger(__name__)


# Fired when a manager access request is filed
# Provides: sender=ManagerRequest, instance=request_instance
manager_request_submitted = Signal()

# Fired when an admin approves or rejects a request
# Provides: sender=ManagerRequest, instance=request_instance, outcome='approved'|'rejected'
manager_request_resolved = Signal()


@receiver(manager_request_submitted)
def log_manager_request_submitted(sender, instance, **kwargs):
    logger.info(f"Pending manager request from {instance.email} awaiting admin review")


@receiver(manager_request_resolved)
def log_manager_request_resolved(sender, instance, outcome, **kwargs):
    logger.info(f"Manager request {instance.id} for {instance.email} resolved: {outcome}")
