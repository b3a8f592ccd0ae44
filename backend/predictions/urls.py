from django.urls import path

from .views import DemandPredictionView

app_name = "predictions"

urlpatterns = [
    path("demand/", DemandPredictionView.as_view(), name="demand"),
]
