"""Tests for the command-line entry point."""

import json
from unittest.mock import MagicMock, patch

import pytest

from workspace_provisioner import cli
from workspace_provisioner.errors import ResourceExistsError
from workspace_provisioner.models.keycloak_api import ClientSecret, JsonWebKeySet
from workspace_provisioner.models.workspace import WorkspaceResult
from workspace_provisioner.services import WorkspaceProvisioner


@pytest.fixture
def provisioner(credentials):
    mock = MagicMock(spec=WorkspaceProvisioner)
    mock.credentials = credentials
    with (
        patch("workspace_provisioner.cli.WorkspaceProvisioner", return_value=mock) as cls,
        patch("workspace_provisioner.handlers.workspace.WorkspaceProvisioner", cls),
        patch("workspace_provisioner.handlers.user.WorkspaceProvisioner", cls),
        patch("workspace_provisioner.cli.configure_logging"),
        patch("workspace_provisioner.cli.configure_tracing"),
    ):
        yield mock


class TestParser:
    def test_roles_are_repeatable(self):
        args = cli.build_parser().parse_args(
            ["create-workspace", "acme", "--role", "owner", "--role", "viewer"]
        )

        assert args.roles == ["owner", "viewer"]
        assert args.no_rollback is False

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    @pytest.mark.parametrize(
        "flags",
        [
            ["--user-email", "alice@acme.io"],
            ["--user-password", "S3cret!pw"],
        ],
    )
    def test_user_details_require_username(self, provisioner, flags, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["create-workspace", "acme", *flags])

        assert exc_info.value.code == 2
        assert "require --user-username" in capsys.readouterr().err
        provisioner.create_workspace.assert_not_called()


class TestMain:
    def test_create_workspace(self, provisioner, capsys):
        provisioner.create_workspace.return_value = WorkspaceResult(
            realm_name="acme",
            client_id="acme-client",
            client_uuid="1234",
            client_secret="secret",
            roles=["admin", "member"],
            completed_stages=["realm", "client", "roles", "mapper"],
        )

        assert cli.main(["create-workspace", "acme"]) == cli.EXIT_OK

        output = json.loads(capsys.readouterr().out)
        assert output["realmName"] == "acme"
        assert output["clientUuid"] == "1234"
        assert output["endpoints"]["issuer"] == "http://keycloak:8080/realms/acme"

    def test_create_workspace_with_user(self, provisioner):
        provisioner.create_workspace.return_value = WorkspaceResult(
            realm_name="acme",
            client_id="acme-client",
            client_uuid="1234",
            client_secret="secret",
            user_created=True,
        )

        cli.main(
            [
                "create-workspace",
                "acme",
                "--user-username",
                "alice",
                "--user-email",
                "alice@acme.io",
                "--user-password",
                "S3cret!pw",
            ]
        )

        initial_user = provisioner.create_workspace.call_args.kwargs["initial_user"]
        assert initial_user.username == "alice"
        assert initial_user.email.value == "alice@acme.io"

    def test_invalid_user_password_fails_before_provisioning(self, provisioner, capsys):
        exit_code = cli.main(
            [
                "create-workspace",
                "acme",
                "--user-username",
                "alice",
                "--user-email",
                "alice@acme.io",
                "--user-password",
                "weak",
            ]
        )

        assert exit_code == cli.EXIT_FAILURE
        assert "Validation failed" in capsys.readouterr().err
        provisioner.create_workspace.assert_not_called()

    def test_workspace_error_exit_code(self, provisioner, capsys):
        error = ResourceExistsError("Realm", "acme")
        error.record_progress("realm", [])
        provisioner.create_workspace.side_effect = error

        assert cli.main(["create-workspace", "acme"]) == cli.EXIT_FAILURE

        err = capsys.readouterr().err
        assert "Realm 'acme' already exists" in err
        assert "Failed stage: realm" in err

    def test_realm_exists(self, provisioner, capsys):
        provisioner.realm_exists.return_value = True

        assert cli.main(["realm-exists", "acme"]) == cli.EXIT_OK
        assert json.loads(capsys.readouterr().out) == {"realm": "acme", "exists": True}

    def test_realm_missing(self, provisioner):
        provisioner.realm_exists.return_value = False

        assert cli.main(["realm-exists", "acme"]) == cli.EXIT_NOT_FOUND

    def test_certs(self, provisioner, capsys):
        provisioner.get_realm_certificates.return_value = JsonWebKeySet(
            keys=[{"kid": "k1"}]
        )

        assert cli.main(["certs", "acme"]) == cli.EXIT_OK
        assert json.loads(capsys.readouterr().out)["keys"] == [{"kid": "k1"}]

    def test_set_client_secret(self, provisioner):
        provisioner.set_client_secret.return_value = ClientSecret(value="rotated")

        assert (
            cli.main(["set-client-secret", "acme", "1234", "--secret", "rotated"])
            == cli.EXIT_OK
        )
        provisioner.set_client_secret.assert_awaited_once_with("acme", "1234", "rotated")
