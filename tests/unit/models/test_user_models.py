"""
Unit tests for Email, Password and the user payload.
"""

import pytest

from workspace_provisioner.errors import ValidationError
from workspace_provisioner.models.user import (
    Email,
    InitialUser,
    Password,
    UserRepresentation,
)


class TestEmail:
    """Test the Email value type."""

    def test_normalised_to_lower_case(self):
        assert Email("Alice@Acme.IO").value == "alice@acme.io"

    def test_keyword_construction(self):
        assert str(Email(value="bob@acme.io")) == "bob@acme.io"

    def test_invalid_email_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            Email("not-an-email")

        assert exc_info.value.fields == ["email"]


class TestPassword:
    """Test the Password value type."""

    def test_valid_password(self):
        assert Password("S3cret!pass").value == "S3cret!pass"

    def test_all_violations_listed(self):
        with pytest.raises(ValidationError) as exc_info:
            Password("short")

        assert len(exc_info.value.violations) == 4

    def test_value_hidden(self):
        password = Password("S3cret!pass")

        assert "S3cret!pass" not in repr(password)
        assert str(password) == "********"


class TestUserRepresentation:
    """Test the user creation payload."""

    def test_with_password_payload(self):
        user = UserRepresentation.with_password(
            "alice", "Alice", "Doe", Email("alice@acme.io"), Password("S3cret!pass")
        )

        assert user.model_dump(by_alias=True, exclude_none=True) == {
            "username": "alice",
            "enabled": True,
            "firstName": "Alice",
            "lastName": "Doe",
            "email": "alice@acme.io",
            "credentials": [
                {"type": "password", "value": "S3cret!pass", "temporary": False}
            ],
        }


class TestInitialUser:
    """Test the optional first user of a workspace."""

    def test_plain_strings_are_validated(self):
        user = InitialUser(
            username="alice",
            firstName="Alice",
            lastName="Doe",
            email="Alice@acme.io",
            password="S3cret!pass",
        )

        assert user.email.value == "alice@acme.io"

    def test_invalid_password_rejected(self):
        with pytest.raises(ValidationError):
            InitialUser(
                username="alice",
                first_name="Alice",
                last_name="Doe",
                email=Email("alice@acme.io"),
                password="weak",
            )
