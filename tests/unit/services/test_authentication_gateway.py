"""Tests for end-user login and realm key retrieval."""

from unittest.mock import AsyncMock

import pytest

from workspace_provisioner.errors import (
    AuthenticationFailure,
    KeycloakAdminError,
    ResourceNotFoundError,
)
from workspace_provisioner.models.keycloak_api import JsonWebKeySet, TokenSet
from workspace_provisioner.services import AuthenticationGateway


class TestLoginUser:
    @pytest.mark.asyncio
    async def test_password_grant(self, mock_admin_client):
        mock_admin_client.request_token = AsyncMock(
            return_value=TokenSet(
                access_token="user-token", refresh_token="refresh", expires_in=300
            )
        )

        token_set = await AuthenticationGateway(mock_admin_client).login_user(
            "alice", "S3cret!pw", "acme", "acme-client", "client-secret"
        )

        assert token_set.access_token == "user-token"
        assert token_set.refresh_token == "refresh"
        mock_admin_client.request_token.assert_called_once_with(
            "acme",
            {
                "grant_type": "password",
                "client_id": "acme-client",
                "client_secret": "client-secret",
                "username": "alice",
                "password": "S3cret!pw",
            },
        )

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_admin_client):
        mock_admin_client.request_token = AsyncMock(
            side_effect=KeycloakAdminError(
                "POST token failed",
                status_code=401,
                response_body='{"error":"invalid_grant"}',
            )
        )

        with pytest.raises(AuthenticationFailure) as exc_info:
            await AuthenticationGateway(mock_admin_client).login_user(
                "alice", "wrong", "acme", "acme-client", "client-secret"
            )

        assert exc_info.value.status_code == 401
        assert "invalid_grant" in exc_info.value.response_body
        assert exc_info.value.retryable is False


class TestRealmCertificates:
    @pytest.mark.asyncio
    async def test_returns_keys(self, mock_admin_client):
        mock_admin_client.get_realm_certificates = AsyncMock(
            return_value=JsonWebKeySet(keys=[{"kid": "k1", "kty": "RSA"}])
        )

        keys = await AuthenticationGateway(mock_admin_client).get_realm_certificates(
            "acme"
        )

        assert keys.key_ids() == ["k1"]

    @pytest.mark.asyncio
    async def test_unknown_realm(self, mock_admin_client):
        mock_admin_client.get_realm_certificates = AsyncMock(
            side_effect=KeycloakAdminError("not found", status_code=404)
        )

        with pytest.raises(ResourceNotFoundError):
            await AuthenticationGateway(mock_admin_client).get_realm_certificates(
                "missing"
            )
