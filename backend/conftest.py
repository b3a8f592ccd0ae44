"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from django.core.cache import cache


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def clear_cache_around_test():
    """
    Clear cache before and after each test.

    The menu listing and checkout locks live in the cache; a leftover key
    would leak one test's state into the next.
    """
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def in_memory_channel_layer(settings):
    """Run websocket and publishing tests against the in-process channel layer."""
    settings.CHANNEL_LAYERS = {
        "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}
    }
    yield


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/menu/items/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


def _authenticate(client, user):
    from rest_framework_simplejwt.tokens import RefreshToken
    from django.conf import settings

    refresh = RefreshToken.for_user(user)
    # Cookie auth, the same way the browser client sends it
    client.cookies[settings.SIMPLE_JWT.get('AUTH_COOKIE', 'access_token')] = str(refresh.access_token)
    return client


@pytest.fixture
def student_client(api_client, student_user):
    """API client signed in as a student."""
    return _authenticate(api_client, student_user)


@pytest.fixture
def manager_client(api_client, manager_user):
    """API client signed in as a manager (dashboard access)."""
    return _authenticate(api_client, manager_user)


@pytest.fixture
def admin_client_api(api_client, admin_user):
    """API client signed in as an admin."""
    return _authenticate(api_client, admin_user)


@pytest.fixture
def client_for():
    """
    Build a separately authenticated client per user.

    Usage:
        def test_two_users(client_for, student_user, admin_user):
            student = client_for(student_user)
            admin = client_for(admin_user)
    """
    from rest_framework.test import APIClient

    def make(user):
        return _authenticate(APIClient(), user)

    return make


# ============================================================================
# IMPORT ALL FIXTURES FROM foodcourt/tests/fixtures.py
# ============================================================================
from foodcourt.tests.fixtures import *  # noqa
