import logging

from .client import DemandPredictionClient
from .serializers import OrderStatsSerializer
from .stats import OrderStatsService

logger = logging.getLogger(__name__)


class DemandPredictionService:
    @staticmethod
    def generate(client=None) -> dict:
        """
        Collect order stats, ask the prediction service and return both.
        ExternalServiceFailure from the client propagates unchanged.
        """
        client = client or DemandPredictionClient()
        stats = dict(OrderStatsSerializer(OrderStatsService.collect()).data)
        predictions = client.fetch(stats)
        logger.info(
            f"Demand predictions generated: {len(predictions['highDemandItems'])} high, "
            f"{len(predictions['lowDemandItems'])} low demand items"
        )
        return {"predictions": predictions, "rawData": stats}
