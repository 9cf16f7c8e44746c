"""Tests for admin token acquisition."""

from unittest.mock import AsyncMock

import pytest

from workspace_provisioner.errors import AuthenticationFailure, KeycloakAdminError
from workspace_provisioner.models.keycloak_api import TokenSet
from workspace_provisioner.services import CredentialProvider


@pytest.mark.asyncio
async def test_acquire_token_uses_client_credentials_grant(mock_admin_client, credentials):
    mock_admin_client.request_token = AsyncMock(
        return_value=TokenSet(access_token="fresh-token", expires_in=60)
    )

    token = await CredentialProvider(mock_admin_client, credentials).acquire_token()

    assert token.value == "fresh-token"
    mock_admin_client.request_token.assert_called_once_with(
        "master",
        {
            "grant_type": "client_credentials",
            "client_id": "provisioner",
            "client_secret": "provisioner-secret",
        },
    )


@pytest.mark.asyncio
async def test_rejected_credentials_raise_authentication_failure(
    mock_admin_client, credentials
):
    mock_admin_client.request_token = AsyncMock(
        side_effect=KeycloakAdminError(
            "POST token failed",
            status_code=401,
            response_body='{"error":"unauthorized_client"}',
        )
    )

    with pytest.raises(AuthenticationFailure) as exc_info:
        await CredentialProvider(mock_admin_client, credentials).acquire_token()

    assert exc_info.value.status_code == 401
    assert "unauthorized_client" in exc_info.value.response_body
    assert "provisioner" in exc_info.value.message
