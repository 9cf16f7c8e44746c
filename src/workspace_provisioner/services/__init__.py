"""
Service layer for the workspace provisioner.

This module provides the provisioning services that hold the business logic
for each stage, and the orchestrator that sequences them.
"""

from .authentication_gateway import AuthenticationGateway
from .authorization_provisioner import AuthorizationProvisioner
from .base_provisioner import BaseProvisioner
from .client_provisioner import ClientProvisioner
from .credential_provider import CredentialProvider
from .realm_provisioner import RealmProvisioner
from .user_provisioner import UserProvisioner
from .workspace_provisioner import WorkspaceProvisioner

__all__ = [
    "AuthenticationGateway",
    "AuthorizationProvisioner",
    "BaseProvisioner",
    "ClientProvisioner",
    "CredentialProvider",
    "RealmProvisioner",
    "UserProvisioner",
    "WorkspaceProvisioner",
]
