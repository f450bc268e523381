"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest

from core_backend.tests.fixtures import *  # noqa: F401,F403


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide an unauthenticated DRF API client.

    Usage:
        def test_requires_login(api_client):
            response = api_client.get('/api/orders/')
            assert response.status_code == 401
    """
    from rest_framework.test import APIClient
    return APIClient()
