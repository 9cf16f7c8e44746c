"""
Confidential client provisioning.

Creates the per-workspace OIDC client, resolves the UUID Keycloak assigns
to it, and provides the secret maintenance operations that run outside the
provisioning pipeline.
"""

import hashlib
import hmac
import secrets

from ..constants import DEFAULT_CLIENT_SECRET_BYTES
from ..errors import (
    ClientCreationFailure,
    ClientSecretFailure,
    ClientUuidMissingError,
    KeycloakAdminError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from ..models.keycloak_api import AccessToken, ClientRepresentation, ClientSecret
from .base_provisioner import BaseProvisioner


class ClientProvisioner(BaseProvisioner):
    """Creates, re-keys and removes workspace clients."""

    async def create_client(
        self,
        token: AccessToken,
        realm_name: str,
        client_id: str,
        client_secret: str,
    ) -> str:
        """
        Create the confidential client of a workspace.

        Args:
            token: Admin access token
            realm_name: Realm that will own the client
            client_id: Human-readable client ID
            client_secret: Secret the client authenticates with

        Returns:
            The UUID Keycloak generated for the client

        Raises:
            ResourceExistsError: If a client with this ID already exists
            ClientCreationFailure: If Keycloak rejects the creation
            ClientUuidMissingError: If the creation succeeded but no UUID
                could be read from the Location header
        """
        client = ClientRepresentation(client_id=client_id, secret=client_secret)

        try:
            client_uuid = await self.admin_client.create_client(
                token, realm_name, client
            )
        except KeycloakAdminError as e:
            if e.status_code == 409:
                raise ResourceExistsError("Client", client_id, status_code=409) from e
            raise ClientCreationFailure.wrap(
                e, f"Failed to create client '{client_id}' in realm '{realm_name}'"
            ) from e

        if not client_uuid:
            raise ClientUuidMissingError(client_id, realm_name)

        self.logger.info(
            f"Created client {client_id} with UUID {client_uuid}",
            realm_name=realm_name,
            client_id=client_id,
        )
        return client_uuid

    async def set_client_secret(
        self,
        token: AccessToken,
        realm_name: str,
        client_uuid: str,
        secret: str,
    ) -> ClientSecret:
        """
        Replace a client's secret.

        Raises:
            ResourceNotFoundError: If the client does not exist
            ClientSecretFailure: If Keycloak rejects the new secret
        """
        payload = ClientSecret(type="client_secret", value=secret)

        try:
            result = await self.admin_client.set_client_secret(
                token, realm_name, client_uuid, payload
            )
        except KeycloakAdminError as e:
            if e.status_code == 404:
                raise ResourceNotFoundError.wrap(
                    e, f"Client '{client_uuid}' not found in realm '{realm_name}'"
                ) from e
            raise ClientSecretFailure.wrap(
                e, f"Failed to set secret of client '{client_uuid}'"
            ) from e

        self.logger.info(
            f"Set client secret for client {client_uuid}", realm_name=realm_name
        )
        return result

    async def delete_client(
        self, token: AccessToken, realm_name: str, client_uuid: str
    ) -> bool:
        """Delete a client by UUID. Returns False if it was already gone."""
        return await self.admin_client.delete_client(token, realm_name, client_uuid)

    @staticmethod
    def generate_client_secret(length: int = DEFAULT_CLIENT_SECRET_BYTES) -> str:
        """
        Generate a random URL-safe client secret.

        Args:
            length: Entropy in bytes (default: 32 bytes = 256 bits)
        """
        return secrets.token_urlsafe(length)

    @staticmethod
    def derive_client_secret(realm_name: str, seed: str) -> str:
        """
        Derive a stable client secret for a realm from a shared seed.

        The same seed and realm always give the same secret, so the login
        flow can recompute it instead of storing it.
        """
        return hmac.new(
            seed.encode(), realm_name.encode(), hashlib.sha256
        ).hexdigest()
