from django.urls import path

from .views import (
    CurrentUserView,
    LoginView,
    LogoutView,
    ManagementSignUpView,
    SignUpView,
    TokenRefreshCookieView,
    UserListView,
    UserRoleView,
)

app_name = "users"

auth_urlpatterns = [
    path("signup/", SignUpView.as_view(), name="signup"),
    path("management/signup/", ManagementSignUpView.as_view(), name="management-signup"),
    path("login/", LoginView.as_view(), name="login"),
    path("refresh/", TokenRefreshCookieView.as_view(), name="token-refresh"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("me/", CurrentUserView.as_view(), name="me"),
]

urlpatterns = [
    path("", UserListView.as_view(), name="user-list"),
    path("<int:pk>/role/", UserRoleView.as_view(), name="user-role"),
]
