import logging

from django.conf import settings
import requests

from foodcourt.exceptions import ExternalServiceFailure
from .serializers import PredictionResponseSerializer

logger = logging.getLogger(__name__)

SERVICE_NAME = "demand-prediction"


def classify_failure(status_code=None, message="") -> str:
    """
    Map an upstream failure onto a reason. Status codes win; otherwise the
    error text is checked the way the upstream phrases its limits.
    """
    if status_code == 429:
        return ExternalServiceFailure.RATE_LIMITED
    if status_code == 402:
        return ExternalServiceFailure.QUOTA_EXHAUSTED

    message = message or ""
    if "Rate limit" in message:
        return ExternalServiceFailure.RATE_LIMITED
    if "credits" in message:
        return ExternalServiceFailure.QUOTA_EXHAUSTED
    return ExternalServiceFailure.FAILURE


class DemandPredictionClient:
    """
    Talks to the external demand prediction service.

    The HTTP session, endpoint and key can be injected; by default they come
    from DEMAND_PREDICTION_* settings.
    """

    def __init__(self, session=None, url=None, api_key=None, timeout=None):
        self.session = session or requests.Session()
        self.url = url if url is not None else settings.DEMAND_PREDICTION_URL
        self.api_key = api_key if api_key is not None else settings.DEMAND_PREDICTION_API_KEY
        self.timeout = timeout if timeout is not None else settings.DEMAND_PREDICTION_TIMEOUT

    def _headers(self):
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _fail(self, status_code=None, message=""):
        reason = classify_failure(status_code, message)
        logger.error(
            f"Demand prediction call failed (status={status_code}, reason={reason}): {message}"
        )
        return ExternalServiceFailure(reason, service=SERVICE_NAME)

    def fetch(self, stats: dict) -> dict:
        """
        POST aggregate order stats and return the validated predictions.

        Raises:
            ExternalServiceFailure: transport error, error status, error body
                or a payload that does not validate in full
        """
        if not self.url:
            logger.warning("DEMAND_PREDICTION_URL is not configured.")
            raise ExternalServiceFailure(service=SERVICE_NAME)

        try:
            logger.info(f"Requesting demand predictions for {stats.get('totalOrders', 0)} orders")
            response = self.session.post(
                self.url, json=stats, headers=self._headers(), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise self._fail(message=str(e))

        if not response.ok:
            raise self._fail(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError:
            raise self._fail(response.status_code, "Response was not valid JSON")

        if isinstance(data, dict) and data.get("error"):
            raise self._fail(response.status_code, str(data["error"]))

        serializer = PredictionResponseSerializer(data=data)
        if not serializer.is_valid():
            raise self._fail(response.status_code, f"Malformed predictions: {serializer.errors}")

        return serializer.validated_data["predictions"]
