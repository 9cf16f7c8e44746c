"""Tests for environment-driven settings."""

import pytest

from workspace_provisioner.errors import ValidationError
from workspace_provisioner.settings import Settings


@pytest.fixture
def admin_env(monkeypatch):
    monkeypatch.setenv("KEYCLOAK_URL", "https://keycloak.example.com")
    monkeypatch.setenv("KEYCLOAK_ADMIN_CLIENT_ID", "provisioner")
    monkeypatch.setenv("KEYCLOAK_ADMIN_CLIENT_SECRET", "s3cret")
    return monkeypatch


def test_defaults(monkeypatch):
    monkeypatch.delenv("WORKSPACE_ROLES", raising=False)
    monkeypatch.delenv("WORKSPACE_ROLLBACK_ON_FAILURE", raising=False)

    config = Settings(_env_file=None)

    assert config.admin_realm == "master"
    assert config.workspace_roles == ["admin", "member"]
    assert config.rollback_on_failure is True
    assert config.client_suffix == "-client"


def test_roles_from_environment(monkeypatch):
    monkeypatch.setenv("WORKSPACE_ROLES", "owner, editor ,,viewer")

    assert Settings(_env_file=None).workspace_roles == ["owner", "editor", "viewer"]


def test_admin_credentials(admin_env):
    credentials = Settings(_env_file=None).admin_credentials()

    assert credentials.server_url == "https://keycloak.example.com"
    assert credentials.admin_realm == "master"
    assert credentials.admin_client_id == "provisioner"


def test_admin_credentials_missing(monkeypatch):
    for name in (
        "KEYCLOAK_URL",
        "KEYCLOAK_ADMIN_CLIENT_ID",
        "KEYCLOAK_ADMIN_CLIENT_SECRET",
    ):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None).admin_credentials()

    assert "keycloakUrl" in exc_info.value.fields
    assert "adminClientSecret" in exc_info.value.fields
