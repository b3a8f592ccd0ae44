"""
Error taxonomy shared by every food court app.

Services raise these; the DRF exception handler below turns them into
`{"error": ..., "code": ...}` responses so clients can show the message as-is.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class FoodCourtError(Exception):
    """Base exception for food court domain errors."""

    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Something went wrong."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {"error": self.message, "code": self.code}


class Unauthenticated(FoodCourtError):
    """Raised when an operation needs a signed-in identity and none is present."""

    code = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Please sign in to continue."


class EmptyCart(FoodCourtError):
    code = "empty_cart"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Your cart is empty."


class InvalidTransition(FoodCourtError):
    """Raised when a status change would not move strictly forward."""

    code = "invalid_transition"
    status_code = status.HTTP_409_CONFLICT
    default_message = "That status change is not allowed."

    def __init__(self, current=None, requested=None, message=None):
        self.current = current
        self.requested = requested
        if message is None and current is not None:
            message = f"Cannot move from '{current}' to '{requested}'."
        super().__init__(message)


class NotFound(FoodCourtError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class DuplicateRequest(FoodCourtError):
    code = "duplicate_request"
    status_code = status.HTTP_409_CONFLICT
    default_message = "You already have a pending request."


class Forbidden(FoodCourtError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to do that."


class CheckoutInProgress(FoodCourtError):
    """Raised when a second checkout starts while one is still running for the same session."""

    code = "checkout_in_progress"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Your order is already being placed."


class PartialWriteFailure(FoodCourtError):
    """
    Raised when an order header was stored but its line items were not.

    The header stays in the database flagged as unreconciled; callers must treat
    the order as failed.
    """

    code = "partial_write_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Your order could not be completed. Please try again."

    def __init__(self, order_id=None, message=None):
        self.order_id = order_id
        super().__init__(message)


class ExternalServiceFailure(FoodCourtError):
    """Raised when a database, auth or AI call fails for infrastructure reasons."""

    RATE_LIMITED = "rate_limited"
    QUOTA_EXHAUSTED = "quota_exhausted"
    FAILURE = "failure"

    MESSAGES = {
        RATE_LIMITED: "AI rate limit reached. Please try again later.",
        QUOTA_EXHAUSTED: "AI credits exhausted. Please add funds.",
        FAILURE: "Failed to generate AI predictions.",
    }

    STATUS_CODES = {
        RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
        QUOTA_EXHAUSTED: status.HTTP_402_PAYMENT_REQUIRED,
        FAILURE: status.HTTP_502_BAD_GATEWAY,
    }

    code = "external_service_failure"
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, reason=FAILURE, message=None, service=None):
        if reason not in self.MESSAGES:
            raise ValueError(f"Unknown external failure reason: {reason}")
        self.reason = reason
        self.service = service
        self.status_code = self.STATUS_CODES[reason]
        super().__init__(message or self.MESSAGES[reason])

    def as_dict(self):
        data = super().as_dict()
        data["reason"] = self.reason
        return data


VALIDATION_ERRORS = (EmptyCart, InvalidTransition, DuplicateRequest, Forbidden, CheckoutInProgress)


def foodcourt_exception_handler(exc, context):
    """
    DRF exception handler that renders FoodCourtError subclasses and falls back
    to the stock handler for everything else.
    """
    if not isinstance(exc, FoodCourtError):
        return exception_handler(exc, context)

    request = context.get("request")
    path = request.path if request is not None else "?"

    if isinstance(exc, (PartialWriteFailure, ExternalServiceFailure)):
        logger.error(f"{exc.__class__.__name__} on {path}: {exc.message}")
    elif isinstance(exc, VALIDATION_ERRORS):
        logger.warning(f"{exc.__class__.__name__} on {path}: {exc.message}")
    else:
        logger.info(f"{exc.__class__.__name__} on {path}: {exc.message}")

    return Response(exc.as_dict(), status=exc.status_code)
