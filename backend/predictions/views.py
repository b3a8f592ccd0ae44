from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.permissions import IsDashboardUser
from .services import DemandPredictionService


class DemandPredictionView(APIView):
    permission_classes = [IsAuthenticated, IsDashboardUser]

    def post(self, request):
        return Response(DemandPredictionService.generate())
