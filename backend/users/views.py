import logging

from django.conf import settings
from django.db import transaction
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .gate import AccessGate, Surface
from .models import User
from .permissions import IsAdminRole
from .serializers import (
    LoginSerializer,
    ManagementSignUpSerializer,
    RoleChangeSerializer,
    SignUpSerializer,
    UserSerializer,
)
from .services import AuthService, RoleService

logger = logging.getLogger(__name__)


def _signed_in_response(user, status_code=status.HTTP_200_OK, extra=None):
    tokens = AuthService.generate_tokens_for_user(user)
    data = {"user": UserSerializer(user).data}
    if extra:
        data.update(extra)
    response = Response(data, status=status_code)
    return AuthService.set_auth_cookies(response, tokens["access"], tokens["refresh"])


class SignUpView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = SignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = AuthService.sign_up(**serializer.validated_data)
        logger.info(f"New account created: {user.email}")
        return _signed_in_response(user, status.HTTP_201_CREATED)


class ManagementSignUpView(APIView):
    """Creates an account and files a manager access request in one step."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        from approvals.serializers import ManagerRequestSerializer
        from approvals.services import ManagerRequestService

        serializer = ManagementSignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            user = AuthService.sign_up(**serializer.validated_data)
            manager_request = ManagerRequestService.submit(user, user.name, user.email)

        return _signed_in_response(
            user,
            status.HTTP_201_CREATED,
            extra={"request": ManagerRequestSerializer(manager_request).data},
        )


class LoginView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = AuthService.sign_in(**serializer.validated_data)
        return _signed_in_response(user)


class TokenRefreshCookieView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        refresh_cookie = request.COOKIES.get(settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"])
        tokens = AuthService.refresh_tokens(refresh_cookie)
        response = Response({"message": "Token refreshed successfully"})
        return AuthService.set_auth_cookies(response, tokens["access"], tokens["refresh"])


class LogoutView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        response = Response({"detail": "Successfully logged out."}, status=status.HTTP_200_OK)
        return AuthService.logout(request, response)


class CurrentUserView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({"user": UserSerializer(request.user).data})


class AccessGateView(APIView):
    """
    Tells the client what to render for a management surface. Anonymous
    callers get a `sign_in` decision rather than a 401.
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request, surface):
        if surface not in Surface.values:
            return Response(
                {"error": f"Unknown surface: {surface}", "code": "not_found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        decision = AccessGate.evaluate(request.user, surface)
        return Response(decision.as_dict())


class UserListView(generics.ListAPIView):
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]
    search_fields = ["email", "name"]
    ordering_fields = ["email", "role", "date_joined"]

    def get_queryset(self):
        return RoleService.list_users(self.request.query_params.get("role"))


class UserRoleView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def post(self, request, pk):
        serializer = RoleChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = RoleService.change_role(request.user, pk, serializer.validated_data["role"])
        return Response(UserSerializer(user).data)
