import logging

from django.conf import settings
from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from foodcourt.exceptions import Forbidden, NotFound, Unauthenticated
from .models import User
from .roles import can_administer

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def sign_up(email: str, password: str, name: str = "") -> User:
        return User.objects.create_user(email=email, password=password, name=name)

    @staticmethod
    def sign_in(email: str, password: str) -> User:
        user = authenticate(email=(email or "").strip().lower(), password=password)
        if user is None or not user.is_active:
            logger.info(f"Failed sign-in attempt for {email}")
            raise Unauthenticated("Invalid email or password.")
        return user

    @staticmethod
    def generate_tokens_for_user(user: User) -> dict:
        refresh = RefreshToken.for_user(user)
        return {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
        }

    @staticmethod
    def set_auth_cookies(response, access_token, refresh_token, cookie_path="/"):
        """
        Set the access/refresh cookies. The root path is used so the websocket
        handshake under /ws/ carries the access cookie as well.
        """
        jwt_settings = settings.SIMPLE_JWT
        secure = jwt_settings.get("AUTH_COOKIE_SECURE", not settings.DEBUG)
        samesite = jwt_settings.get("AUTH_COOKIE_SAMESITE", "Lax")

        response.set_cookie(
            key=jwt_settings["AUTH_COOKIE"],
            value=access_token,
            max_age=jwt_settings["ACCESS_TOKEN_LIFETIME"].total_seconds(),
            path=cookie_path,
            httponly=True,
            secure=secure,
            samesite=samesite,
        )
        response.set_cookie(
            key=jwt_settings["AUTH_COOKIE_REFRESH"],
            value=refresh_token,
            max_age=jwt_settings["REFRESH_TOKEN_LIFETIME"].total_seconds(),
            path=cookie_path,
            httponly=True,
            secure=secure,
            samesite=samesite,
        )
        return response

    @staticmethod
    def clear_auth_cookies(response, cookie_path="/"):
        response.delete_cookie(settings.SIMPLE_JWT["AUTH_COOKIE"], path=cookie_path)
        response.delete_cookie(settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"], path=cookie_path)
        return response

    @staticmethod
    def refresh_tokens(refresh_cookie: str) -> dict:
        """
        Rotate a refresh token. Raises Unauthenticated when the token is
        missing, expired or blacklisted.
        """
        from rest_framework_simplejwt.serializers import TokenRefreshSerializer

        if not refresh_cookie:
            raise Unauthenticated("Refresh token not found.")

        serializer = TokenRefreshSerializer(data={"refresh": refresh_cookie})
        try:
            serializer.is_valid(raise_exception=True)
        except (TokenError, AuthenticationFailed) as e:
            raise Unauthenticated(str(e))

        data = serializer.validated_data
        return {
            "access": data["access"],
            # present when ROTATE_REFRESH_TOKENS is on
            "refresh": data.get("refresh", refresh_cookie),
        }

    @staticmethod
    def logout(request, response):
        """Blacklist the refresh cookie (if any) and clear both cookies."""
        refresh_token = request.COOKIES.get(settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"])
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError:
                # Already expired or blacklisted
                logger.debug("Refresh token on logout was already invalid")
        return AuthService.clear_auth_cookies(response)


class RoleService:
    @staticmethod
    def list_users(role=None):
        queryset = User.objects.all().order_by("role", "email")
        if role:
            queryset = queryset.filter(role=role)
        return queryset

    @staticmethod
    @transaction.atomic
    def change_role(actor: User, target_id, new_role) -> User:
        """
        Assign `new_role` to the target user.

        Only admins may change roles, and an admin may not change their own
        role. The role is left untouched on any failure.
        """
        if actor is None or not actor.is_authenticated:
            raise Unauthenticated()
        if not can_administer(actor.role):
            raise Forbidden("Only admins can change user roles.")

        if new_role not in User.Role.values:
            raise ValueError(f"Unknown role: {new_role!r}")

        try:
            target = User.objects.select_for_update().get(pk=target_id)
        except User.DoesNotExist:
            raise NotFound("User not found.")

        if target.pk == actor.pk:
            logger.warning(f"Admin {actor.email} attempted to change their own role")
            raise Forbidden("You cannot change your own role.")

        if target.role == new_role:
            return target

        old_role = target.role
        target.role = new_role
        target.save(update_fields=["role", "updated_at"])
        logger.info(f"Role for {target.email} changed from {old_role} to {new_role} by {actor.email}")
        return target
