"""Tests for the command handlers."""

from unittest.mock import MagicMock

import pytest

from workspace_provisioner.errors import ConfigurationError, ValidationError
from workspace_provisioner.handlers import (
    handle_create_user,
    handle_create_workspace,
    handle_login_user,
)
from workspace_provisioner.handlers.user import build_user_credentials
from workspace_provisioner.models.commands import (
    CreateUserCommand,
    CreateWorkspaceCommand,
    LoginUserCommand,
)
from workspace_provisioner.models.keycloak_api import TokenSet
from workspace_provisioner.models.user import Email, Password
from workspace_provisioner.models.workspace import WorkspaceResult
from workspace_provisioner.services import WorkspaceProvisioner

from ..helpers import RecordingTransport, respond


@pytest.fixture
def provisioner():
    mock = MagicMock(spec=WorkspaceProvisioner)
    mock.client_id_for.return_value = "acme-client"
    mock.client_secret_for.return_value = "derived-secret"
    return mock


class TestBuildUserCredentials:
    def test_valid_values(self):
        email, password = build_user_credentials("Alice@Acme.io", "S3cret!pw")

        assert email == Email("alice@acme.io")
        assert password.value == "S3cret!pw"

    def test_reports_both_violations(self):
        with pytest.raises(ValidationError) as exc_info:
            build_user_credentials("not-an-email", "short")

        assert exc_info.value.fields == ["email", "password"]
        assert len(exc_info.value.violations) >= 2


class TestHandleCreateWorkspace:
    @pytest.mark.asyncio
    async def test_delegates_to_provisioner(self, provisioner):
        expected = WorkspaceResult(
            realm_name="acme",
            client_id="acme-client",
            client_uuid="1234",
            client_secret="secret",
            roles=["admin", "member"],
        )
        provisioner.create_workspace.return_value = expected

        result = await handle_create_workspace(
            CreateWorkspaceCommand(domain_name="acme"), provisioner
        )

        assert result is expected
        provisioner.create_workspace.assert_awaited_once_with(
            "acme", client_secret=None, initial_user=None
        )


class TestHandleCreateUser:
    @pytest.mark.asyncio
    async def test_invalid_email_and_password_make_no_calls(self, provisioner):
        command = CreateUserCommand(
            realm_name="acme",
            username="alice",
            first_name="Alice",
            last_name="Doe",
            email="alice-at-acme",
            password="password",
        )

        with pytest.raises(ValidationError) as exc_info:
            await handle_create_user(command, provisioner)

        assert "email" in exc_info.value.fields
        assert "password" in exc_info.value.fields
        provisioner.create_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_user(self, provisioner):
        provisioner.create_user.return_value = True
        command = CreateUserCommand(
            realm_name="acme",
            username="alice",
            first_name="Alice",
            last_name="Doe",
            email="alice@acme.io",
            password="S3cret!pw",
        )

        assert await handle_create_user(command, provisioner) is True

        args = provisioner.create_user.call_args.args
        assert args[:4] == ("acme", "alice", "Alice", "Doe")
        assert isinstance(args[4], Email)
        assert isinstance(args[5], Password)


class TestHandleLoginUser:
    @pytest.mark.asyncio
    async def test_uses_workspace_client(self, provisioner):
        provisioner.login_user.return_value = TokenSet(access_token="user-token")

        token_set = await handle_login_user(
            LoginUserCommand(username="alice", password="S3cret!pw", realm_name="acme"),
            provisioner,
        )

        assert token_set.access_token == "user-token"
        provisioner.login_user.assert_awaited_once_with(
            "alice", "S3cret!pw", "acme", "acme-client", "derived-secret"
        )

    @pytest.mark.asyncio
    async def test_blank_fields_rejected(self, provisioner):
        with pytest.raises(ValidationError) as exc_info:
            await handle_login_user(
                LoginUserCommand(username="", password="", realm_name="acme"),
                provisioner,
            )

        assert exc_info.value.fields == ["username", "password"]
        provisioner.login_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_seed(self, credentials):
        transport = RecordingTransport(
            {
                ("POST", "/realms/acme/protocol/openid-connect/token"): respond(
                    200, json={"access_token": "user-token"}
                )
            }
        )
        provisioner = WorkspaceProvisioner(
            credentials, client_secret_seed="", transport=transport.transport
        )

        with pytest.raises(ConfigurationError):
            await handle_login_user(
                LoginUserCommand(
                    username="alice", password="S3cret!pw", realm_name="acme"
                ),
                provisioner,
            )

        assert transport.requests == []
