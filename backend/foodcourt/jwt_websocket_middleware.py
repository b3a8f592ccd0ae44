"""
JWT WebSocket authentication middleware for Django Channels.

Browsers cannot set headers on a websocket handshake, so the access token is
read from the same httpOnly cookie the REST API uses.
"""
import jwt
import logging
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.conf import settings
from django.contrib.auth.models import AnonymousUser

logger = logging.getLogger(__name__)


def parse_cookie_header(cookie_header: str) -> dict:
    cookies = {}
    for cookie in cookie_header.split(';'):
        if '=' in cookie:
            key, value = cookie.strip().split('=', 1)
            cookies[key] = value
    return cookies


@database_sync_to_async
def get_active_user(user_id):
    from users.models import User

    try:
        return User.objects.get(id=user_id, is_active=True)
    except User.DoesNotExist:
        logger.warning(f"User {user_id} from JWT not found")
        return AnonymousUser()


class JWTAuthMiddleware(BaseMiddleware):
    """
    Puts the user named by the JWT access cookie into ``scope['user']``;
    AnonymousUser when there is no valid token.
    """

    async def __call__(self, scope, receive, send):
        if scope['type'] != 'websocket':
            return await super().__call__(scope, receive, send)

        scope['user'] = await self.get_user_from_jwt(scope)
        return await super().__call__(scope, receive, send)

    async def get_user_from_jwt(self, scope):
        headers = dict(scope.get('headers', []))
        cookie_header = headers.get(b'cookie', b'').decode('utf-8')

        if not cookie_header:
            logger.debug("No cookie header found in WebSocket connection")
            return AnonymousUser()

        jwt_config = settings.SIMPLE_JWT
        access_token = parse_cookie_header(cookie_header).get(jwt_config.get('AUTH_COOKIE'))

        if not access_token:
            logger.debug("No JWT access token found in WebSocket cookies")
            return AnonymousUser()

        try:
            payload = jwt.decode(
                access_token,
                jwt_config.get('SIGNING_KEY', settings.SECRET_KEY),
                algorithms=[jwt_config.get('ALGORITHM', 'HS256')],
                options={
                    'verify_signature': True,
                    'verify_exp': True,
                }
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Expired JWT token in WebSocket connection")
            return AnonymousUser()
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid JWT token in WebSocket connection: {e}")
            return AnonymousUser()

        if payload.get('token_type') != 'access':
            logger.warning("Non-access JWT presented on WebSocket connection")
            return AnonymousUser()

        user_id = payload.get(jwt_config.get('USER_ID_CLAIM', 'user_id'))
        if not user_id:
            logger.warning("JWT payload missing user_id")
            return AnonymousUser()

        user = await get_active_user(user_id)
        if user.is_authenticated:
            logger.info(f"WebSocket authenticated: user={user.email}, user_id={user.id}")
        return user
