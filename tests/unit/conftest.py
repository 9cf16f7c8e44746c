"""Shared pytest fixtures for workspace provisioner unit tests."""

from unittest.mock import AsyncMock

import pytest

from workspace_provisioner.models.credentials import AdminCredentials
from workspace_provisioner.models.keycloak_api import AccessToken

from .helpers import KEYCLOAK_URL, MockResponse


@pytest.fixture
def credentials() -> AdminCredentials:
    return AdminCredentials(
        keycloak_url=KEYCLOAK_URL,
        admin_realm="master",
        admin_client_id="provisioner",
        admin_client_secret="provisioner-secret",
    )


@pytest.fixture
def admin_token() -> AccessToken:
    return AccessToken(value="admin-token")


@pytest.fixture
def mock_admin_client():
    """Create a mock KeycloakAdminClient for testing.

    Uses object.__new__ to create an uninitialized instance, then sets
    required attributes directly. _make_request is replaced per test.
    """
    from workspace_provisioner.utils.keycloak_admin import KeycloakAdminClient

    # Create instance without calling __init__
    client = object.__new__(KeycloakAdminClient)
    client.server_url = KEYCLOAK_URL
    client.verify_ssl = True
    client.timeout = 30.0
    client.transport = None
    client._client = None
    client._make_request = AsyncMock(return_value=MockResponse(204))
    return client
