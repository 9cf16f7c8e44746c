"""
Models package - Pydantic models for type-safe provisioning.

Defines data models for:
- Admin credentials and validated user value types
- Keycloak Admin API payloads and token responses
- Command objects and workspace provisioning results
"""

from .commands import CreateUserCommand, CreateWorkspaceCommand, LoginUserCommand
from .credentials import AdminCredentials
from .keycloak_api import (
    AccessToken,
    ClientRepresentation,
    ClientSecret,
    JsonWebKeySet,
    ProtocolMapperRepresentation,
    RealmRepresentation,
    RoleRepresentation,
    TokenSet,
)
from .user import (
    CredentialRepresentation,
    Email,
    InitialUser,
    Password,
    UserRepresentation,
)
from .workspace import ProvisioningRun, ProvisioningState, WorkspaceResult

__all__ = [
    "AccessToken",
    "AdminCredentials",
    "ClientRepresentation",
    "ClientSecret",
    "CreateUserCommand",
    "CreateWorkspaceCommand",
    "CredentialRepresentation",
    "Email",
    "InitialUser",
    "JsonWebKeySet",
    "LoginUserCommand",
    "Password",
    "ProtocolMapperRepresentation",
    "ProvisioningRun",
    "ProvisioningState",
    "RealmRepresentation",
    "RoleRepresentation",
    "TokenSet",
    "UserRepresentation",
    "WorkspaceResult",
]
