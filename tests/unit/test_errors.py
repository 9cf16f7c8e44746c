"""
Unit tests for the provisioning error hierarchy.
"""

import pytest

from workspace_provisioner.errors import (
    AuthenticationFailure,
    ClientUuidMissingError,
    KeycloakAdminError,
    NetworkFailure,
    ResourceExistsError,
    ResponseParsingError,
    RoleOrMapperFailure,
    UserCreationFailure,
    ValidationError,
    WorkspaceError,
)


class TestWorkspaceError:
    """Test the base error."""

    def test_str_includes_user_action(self):
        error = WorkspaceError("boom", "upstream", user_action="Do something")

        assert str(error) == "boom\nAction required: Do something"

    def test_str_without_user_action(self):
        assert str(WorkspaceError("boom", "upstream")) == "boom"

    def test_record_progress_copies_stages(self):
        stages = ["realm", "client"]
        error = WorkspaceError("boom", "upstream")

        error.record_progress("roles", stages)
        stages.append("mutated")

        assert error.failed_stage == "roles"
        assert error.completed_stages == ["realm", "client"]
        assert error.last_successful_stage == "client"

    def test_last_successful_stage_none_without_progress(self):
        assert WorkspaceError("boom", "upstream").last_successful_stage is None

    def test_to_dict(self):
        error = ResourceExistsError("Realm", "acme")
        error.record_progress("realm", [])

        data = error.to_dict()

        assert data["error_type"] == "ResourceExistsError"
        assert data["category"] == "conflict"
        assert data["failed_stage"] == "realm"
        assert data["completed_stages"] == []


class TestValidationError:
    """Test validation error aggregation."""

    def test_lists_every_violation(self):
        error = ValidationError(
            ["adminClientId is a required field", "adminClientSecret is a required field"],
            fields=["adminClientId", "adminClientSecret"],
        )

        assert error.violations == [
            "adminClientId is a required field",
            "adminClientSecret is a required field",
        ]
        assert error.fields == ["adminClientId", "adminClientSecret"]
        assert "adminClientSecret is a required field" in error.message
        assert error.retryable is False


class TestKeycloakAdminError:
    """Test upstream error details."""

    def test_message_includes_status(self):
        error = KeycloakAdminError("failed", status_code=500, response_body="oops")

        assert error.message == "HTTP 500: failed"
        assert error.retryable is True

    @pytest.mark.parametrize("status_code", [400, 401, 404, 409, 499])
    def test_client_errors_are_not_retryable(self, status_code):
        assert KeycloakAdminError("failed", status_code=status_code).retryable is False

    def test_body_preview_truncates(self):
        error = KeycloakAdminError("failed", status_code=500, response_body="x" * 50)

        assert error.body_preview(limit=10) == "x" * 10 + "...<truncated>"
        assert error.body_preview() == "x" * 50

    def test_body_preview_without_body(self):
        assert KeycloakAdminError("failed").body_preview() is None

    def test_wrap_keeps_status_and_body(self):
        original = KeycloakAdminError("POST /x failed", status_code=401, response_body="denied")

        wrapped = AuthenticationFailure.wrap(original, "Login failed")

        assert isinstance(wrapped, AuthenticationFailure)
        assert wrapped.status_code == 401
        assert wrapped.response_body == "denied"
        assert wrapped.message == "HTTP 401: Login failed"

    def test_wrap_passes_extra_arguments(self):
        original = KeycloakAdminError("failed", status_code=500, response_body="err")

        wrapped = RoleOrMapperFailure.wrap(
            original, "role failed", resource_kind="role", resource_name="member"
        )

        assert wrapped.resource_kind == "role"
        assert wrapped.resource_name == "member"
        assert wrapped.status_code == 500

    def test_subclasses_share_base(self):
        assert issubclass(UserCreationFailure, KeycloakAdminError)
        assert issubclass(KeycloakAdminError, WorkspaceError)


class TestDistinctErrors:
    """Test errors synthesized by the provisioner."""

    def test_resource_exists_message(self):
        error = ResourceExistsError("Realm", "acme", status_code=409)

        assert error.message == "Realm 'acme' already exists"
        assert error.status_code == 409

    def test_uuid_missing_is_parsing_error(self):
        error = ClientUuidMissingError("acme-client", "acme")

        assert isinstance(error, ResponseParsingError)
        assert error.field == "Location"
        assert "acme-client" in error.message

    def test_network_failure_keeps_cause(self):
        cause = ConnectionError("refused")

        error = NetworkFailure("unreachable", cause=cause)

        assert error.cause is cause
        assert error.retryable is True
