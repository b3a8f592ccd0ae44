"""
URL configuration for the food court backend.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path

from users.urls import auth_urlpatterns
from users.views import AccessGateView


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/auth/", include((auth_urlpatterns, "auth"))),
    path("api/access/<str:surface>/", AccessGateView.as_view(), name="access-gate"),
    path("api/users/", include("users.urls")),
    path("api/approvals/", include("approvals.urls")),
    path("api/menu/", include("menu.urls")),
    path("api/cart/", include("cart.urls")),
    path("api/orders/", include("orders.urls")),
    path("api/predictions/", include("predictions.urls")),
]
