"""
Shared error handling tests.

Domain errors render as {"error", "code"} bodies with their status code;
anything else falls through to DRF's stock handler.
"""
import pytest
from rest_framework.exceptions import NotAuthenticated

from foodcourt.exceptions import (
    CheckoutInProgress,
    ExternalServiceFailure,
    InvalidTransition,
    PartialWriteFailure,
    foodcourt_exception_handler,
)
from foodcourt.jwt_websocket_middleware import parse_cookie_header


class TestExceptionHandler:
    """foodcourt_exception_handler"""

    def test_domain_error_body(self):
        response = foodcourt_exception_handler(CheckoutInProgress(), {})
        assert response.status_code == 409
        assert response.data == {"error": "Your order is already being placed.", "code": "checkout_in_progress"}

    def test_invalid_transition_message(self):
        error = InvalidTransition("ordered", "ready")
        response = foodcourt_exception_handler(error, {})
        assert response.status_code == 409
        assert response.data["error"] == "Cannot move from 'ordered' to 'ready'."

    def test_partial_write_keeps_order_id(self):
        error = PartialWriteFailure(order_id="abc")
        assert error.order_id == "abc"
        assert foodcourt_exception_handler(error, {}).status_code == 500

    @pytest.mark.parametrize("reason,status_code", [
        (ExternalServiceFailure.RATE_LIMITED, 429),
        (ExternalServiceFailure.QUOTA_EXHAUSTED, 402),
        (ExternalServiceFailure.FAILURE, 502),
    ])
    def test_external_failure_status(self, reason, status_code):
        response = foodcourt_exception_handler(ExternalServiceFailure(reason), {})
        assert response.status_code == status_code
        assert response.data["reason"] == reason

    def test_unknown_external_reason(self):
        with pytest.raises(ValueError):
            ExternalServiceFailure("teapot")

    def test_other_exceptions_use_drf_handler(self):
        response = foodcourt_exception_handler(NotAuthenticated(), {})
        assert response.status_code == 401
        assert "detail" in response.data


class TestCookieParsing:
    def test_parses_cookie_header(self):
        cookies = parse_cookie_header("sessionid=abc; access_token=a.b=c; flag")
        assert cookies == {"sessionid": "abc", "access_token": "a.b=c"}


@pytest.mark.django_db
def test_health_check(client):
    response = client.get("/api/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
