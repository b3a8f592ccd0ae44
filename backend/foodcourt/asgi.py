import os

# Set the Django settings module first
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "foodcourt.settings")

from channels.routing import ProtocolTypeRouter, URLRouter
from django.core.asgi import get_asgi_application

# Initialize Django ASGI application early to ensure AppRegistry is populated
# before importing code that may import ORM models.
django_asgi_app = get_asgi_application()

from foodcourt.jwt_websocket_middleware import JWTAuthMiddleware  # noqa: E402
import orders.routing  # noqa: E402

websocket_urlpatterns = orders.routing.websocket_urlpatterns

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": JWTAuthMiddleware(URLRouter(websocket_urlpatterns)),
    }
)
