"""
End-user account creation.
"""

from ..errors import KeycloakAdminError, ResourceExistsError, UserCreationFailure
from ..models.keycloak_api import AccessToken
from ..models.user import Email, Password, UserRepresentation
from .base_provisioner import BaseProvisioner


class UserProvisioner(BaseProvisioner):
    """Creates users with one initial password credential."""

    async def create_user(
        self,
        token: AccessToken,
        realm_name: str,
        username: str,
        first_name: str,
        last_name: str,
        email: Email,
        password: Password,
    ) -> bool:
        """
        Create an enabled user in a realm.

        Email and Password are already validated; the password becomes a
        single non-temporary credential.

        Raises:
            ResourceExistsError: If the username or email is taken
            UserCreationFailure: With Keycloak's status and body otherwise
        """
        user = UserRepresentation.with_password(
            username, first_name, last_name, email, password
        )

        try:
            await self.admin_client.create_user(token, realm_name, user)
        except KeycloakAdminError as e:
            if e.status_code == 409:
                raise ResourceExistsError("User", username, status_code=409) from e
            raise UserCreationFailure.wrap(
                e, f"Failed to create user '{username}' in realm '{realm_name}'"
            ) from e

        self.logger.info(f"Created user {username}", realm_name=realm_name)
        return True
