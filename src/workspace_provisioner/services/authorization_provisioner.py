"""
Client roles and the role claim mapper.
"""

from ..errors import KeycloakAdminError, RoleOrMapperFailure
from ..models.keycloak_api import (
    AccessToken,
    ProtocolMapperRepresentation,
    RoleRepresentation,
)
from .base_provisioner import BaseProvisioner


class AuthorizationProvisioner(BaseProvisioner):
    """Attaches the authorization model to a workspace client."""

    async def attach_roles(
        self,
        token: AccessToken,
        realm_name: str,
        client_uuid: str,
        role_names: list[str],
    ) -> list[str]:
        """
        Create client roles one by one, in the given order.

        Stops at the first failure. Roles created before the failure are
        kept; nothing checks for existing roles, so re-running after a
        partial failure will hit duplicates.

        Returns:
            Names of the roles created

        Raises:
            RoleOrMapperFailure: Naming the role that could not be created
        """
        created = []

        for role_name in role_names:
            try:
                await self.admin_client.create_client_role(
                    token, realm_name, client_uuid, RoleRepresentation(name=role_name)
                )
            except KeycloakAdminError as e:
                raise RoleOrMapperFailure.wrap(
                    e,
                    f"Failed to create role '{role_name}' on client '{client_uuid}' "
                    f"(created before failure: {created})",
                    resource_kind="role",
                    resource_name=role_name,
                ) from e
            created.append(role_name)

        self.logger.info(
            f"Attached roles {created} to client {client_uuid}", realm_name=realm_name
        )
        return created

    async def attach_mapper(
        self,
        token: AccessToken,
        realm_name: str,
        client_uuid: str,
    ) -> ProtocolMapperRepresentation:
        """
        Attach the realm-roles mapper that puts role assignments into tokens.

        Raises:
            RoleOrMapperFailure: If Keycloak rejects the mapper
        """
        mapper = ProtocolMapperRepresentation.role_mapper()

        try:
            await self.admin_client.create_client_protocol_mapper(
                token, realm_name, client_uuid, mapper
            )
        except KeycloakAdminError as e:
            raise RoleOrMapperFailure.wrap(
                e,
                f"Failed to attach mapper '{mapper.name}' to client '{client_uuid}'",
                resource_kind="mapper",
                resource_name=mapper.name,
            ) from e

        return mapper
