"""
Realm existence checks, creation and removal.
"""

from ..errors import KeycloakAdminError, RealmCreationFailure, ResourceExistsError
from ..models.keycloak_api import AccessToken, RealmRepresentation
from .base_provisioner import BaseProvisioner


class RealmProvisioner(BaseProvisioner):
    """Creates and removes workspace realms."""

    async def realm_exists(self, token: AccessToken, realm_name: str) -> bool:
        """
        Check whether a realm exists.

        Only a 404 means "absent". Any other failure propagates unchanged
        so that an outage is never mistaken for a free realm name.

        Raises:
            KeycloakAdminError: On any non-success status other than 404
            NetworkFailure: If Keycloak cannot be reached
        """
        return await self.admin_client.realm_exists(token, realm_name)

    async def create_realm(
        self, token: AccessToken, realm_name: str
    ) -> RealmRepresentation:
        """
        Create an enabled realm.

        The existence check runs first and no POST is sent for a taken name.
        A 409 from Keycloak covers the race where another caller creates
        the realm between the check and the POST.

        Raises:
            ResourceExistsError: If the realm already exists
            RealmCreationFailure: If Keycloak rejects the creation
        """
        if await self.realm_exists(token, realm_name):
            self.logger.warning(
                f"Realm {realm_name} already exists", realm_name=realm_name
            )
            raise ResourceExistsError("Realm", realm_name)

        realm = RealmRepresentation(realm=realm_name, enabled=True)

        try:
            await self.admin_client.create_realm(token, realm)
        except KeycloakAdminError as e:
            if e.status_code == 409:
                raise ResourceExistsError("Realm", realm_name, status_code=409) from e
            raise RealmCreationFailure.wrap(
                e, f"Failed to create realm '{realm_name}'"
            ) from e

        self.logger.info(f"Created realm {realm_name}", realm_name=realm_name)
        return realm

    async def delete_realm(self, token: AccessToken, realm_name: str) -> bool:
        """Delete a realm. Returns False if it was already gone."""
        return await self.admin_client.delete_realm(token, realm_name)
