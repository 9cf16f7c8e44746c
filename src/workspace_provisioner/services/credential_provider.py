"""
Admin token acquisition.

Exchanges the provisioning service account's client credentials for a
bearer token. Tokens are returned to the caller and never cached here;
every workflow asks for its own.
"""

from ..constants import GRANT_CLIENT_CREDENTIALS
from ..errors import AuthenticationFailure, KeycloakAdminError
from ..models.credentials import AdminCredentials
from ..models.keycloak_api import AccessToken
from ..utils.keycloak_admin import KeycloakAdminClient
from .base_provisioner import BaseProvisioner


class CredentialProvider(BaseProvisioner):
    """Obtains admin access tokens with the client-credentials grant."""

    def __init__(
        self,
        admin_client: KeycloakAdminClient,
        credentials: AdminCredentials,
    ):
        super().__init__(admin_client)
        self.credentials = credentials

    async def acquire_token(self) -> AccessToken:
        """
        Request a fresh admin token.

        Returns:
            AccessToken for the configured service account

        Raises:
            AuthenticationFailure: If the token endpoint rejects the credentials
            NetworkFailure: If the token endpoint cannot be reached
            ResponseParsingError: If the response carries no access_token
        """
        form = {
            "grant_type": GRANT_CLIENT_CREDENTIALS,
            "client_id": self.credentials.admin_client_id,
            "client_secret": self.credentials.admin_client_secret,
        }

        try:
            token_set = await self.admin_client.request_token(
                self.credentials.admin_realm, form
            )
        except KeycloakAdminError as e:
            raise AuthenticationFailure.wrap(
                e,
                f"Admin client '{self.credentials.admin_client_id}' could not "
                f"authenticate against realm '{self.credentials.admin_realm}'",
            ) from e

        self.logger.debug(
            f"Acquired admin token for client {self.credentials.admin_client_id}"
        )
        return AccessToken.from_token_set(token_set)
