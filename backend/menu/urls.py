from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import FoodItemViewSet

app_name = "menu"

router = DefaultRouter()
router.register(r"items", FoodItemViewSet, basename="food-item")

urlpatterns = [
    path("", include(router.urls)),
]
