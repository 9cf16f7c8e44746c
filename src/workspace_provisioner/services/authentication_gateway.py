"""
End-user authentication against workspace realms.
"""

from ..constants import GRANT_PASSWORD
from ..errors import AuthenticationFailure, KeycloakAdminError, ResourceNotFoundError
from ..models.keycloak_api import JsonWebKeySet, TokenSet
from .base_provisioner import BaseProvisioner


class AuthenticationGateway(BaseProvisioner):
    """Password-grant logins and public realm key retrieval."""

    async def login_user(
        self,
        username: str,
        password: str,
        realm_name: str,
        client_id: str,
        client_secret: str,
    ) -> TokenSet:
        """
        Exchange a user's password for a token set.

        The token set is returned as Keycloak sent it; its tokens are not
        decoded or verified here.

        Raises:
            AuthenticationFailure: With Keycloak's status (e.g. 401) and body
        """
        form = {
            "grant_type": GRANT_PASSWORD,
            "client_id": client_id,
            "client_secret": client_secret,
            "username": username,
            "password": password,
        }

        try:
            token_set = await self.admin_client.request_token(realm_name, form)
        except KeycloakAdminError as e:
            raise AuthenticationFailure.wrap(
                e, f"Login failed for user '{username}' in realm '{realm_name}'"
            ) from e

        self.logger.info(f"User {username} logged in", realm_name=realm_name)
        return token_set

    async def get_realm_certificates(self, realm_name: str) -> JsonWebKeySet:
        """
        Fetch the realm's public signing keys.

        Raises:
            ResourceNotFoundError: If the realm does not exist
        """
        try:
            return await self.admin_client.get_realm_certificates(realm_name)
        except KeycloakAdminError as e:
            if e.status_code == 404:
                raise ResourceNotFoundError.wrap(
                    e, f"Realm '{realm_name}' not found"
                ) from e
            raise
