"""
Error handling module for the workspace provisioner.

This module provides the error hierarchy shared by every provisioning stage,
so callers can special-case failures by type instead of matching messages.
"""

from .provisioning_errors import (
    AuthenticationFailure,
    ClientCreationFailure,
    ClientSecretFailure,
    ClientUuidMissingError,
    ConfigurationError,
    KeycloakAdminError,
    NetworkFailure,
    RealmCreationFailure,
    ResourceExistsError,
    ResourceNotFoundError,
    ResponseParsingError,
    RoleOrMapperFailure,
    UserCreationFailure,
    ValidationError,
    WorkspaceError,
)

__all__ = [
    "WorkspaceError",
    "ValidationError",
    "ConfigurationError",
    "NetworkFailure",
    "ResponseParsingError",
    "ClientUuidMissingError",
    "ResourceExistsError",
    "KeycloakAdminError",
    "AuthenticationFailure",
    "ResourceNotFoundError",
    "RealmCreationFailure",
    "ClientCreationFailure",
    "RoleOrMapperFailure",
    "UserCreationFailure",
    "ClientSecretFailure",
]
