"""
Workspace provisioning orchestrator.

This module drives the ordered sequence of Keycloak calls that turns a domain
name into a ready-to-use workspace:

    authenticate -> realm -> client -> roles -> mapper -> [user]

One admin token is acquired per workflow and handed explicitly to every
stage. The first failing stage stops the workflow. Before the error reaches
the caller it is annotated with the failed stage and the stages that had
already committed; when rollback is enabled the committed stages are undone
in reverse order first.
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from ..constants import (
    STAGE_AUTHENTICATE,
    STAGE_CLIENT,
    STAGE_MAPPER,
    STAGE_REALM,
    STAGE_ROLES,
    STAGE_USER,
)
from ..errors import ConfigurationError, WorkspaceError
from ..models.credentials import AdminCredentials
from ..models.keycloak_api import AccessToken, ClientSecret, JsonWebKeySet, TokenSet
from ..models.user import Email, InitialUser, Password
from ..models.workspace import ProvisioningRun, WorkspaceResult
from ..observability.logging import ProvisioningLogger
from ..observability.metrics import metrics_collector
from ..observability.tracing import traced_stage
from ..settings import settings
from ..utils.keycloak_admin import KeycloakAdminClient
from ..utils.validation import (
    raise_for_violations,
    validate_client_id,
    validate_realm_name,
)
from .authentication_gateway import AuthenticationGateway
from .authorization_provisioner import AuthorizationProvisioner
from .client_provisioner import ClientProvisioner
from .credential_provider import CredentialProvider
from .realm_provisioner import RealmProvisioner
from .user_provisioner import UserProvisioner

logger = logging.getLogger(__name__)


class WorkspaceProvisioner:
    """
    Entry point for workspace provisioning and the standalone operations
    that go with it.

    Instances hold configuration only. Each public method opens its own
    admin client session, so independent workflows can run concurrently
    on the same instance.
    """

    def __init__(
        self,
        credentials: AdminCredentials | None = None,
        *,
        roles: list[str] | None = None,
        client_suffix: str | None = None,
        rollback_on_failure: bool | None = None,
        client_secret_seed: str | None = None,
        admin_client: KeycloakAdminClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            credentials: Admin credentials (default: built from settings)
            roles: Client roles created for every workspace
            client_suffix: Suffix appended to the domain to form the client ID
            rollback_on_failure: Undo committed stages when a later one fails
            client_secret_seed: Seed for deriving client secrets
            admin_client: Pre-built admin client, used as-is and not closed
            transport: httpx transport for admin clients created here
        """
        self.credentials = credentials or settings.admin_credentials()
        self.roles = list(roles) if roles is not None else settings.workspace_roles
        self.client_suffix = (
            client_suffix if client_suffix is not None else settings.client_suffix
        )
        self.rollback_on_failure = (
            rollback_on_failure
            if rollback_on_failure is not None
            else settings.rollback_on_failure
        )
        self.client_secret_seed = (
            client_secret_seed
            if client_secret_seed is not None
            else settings.client_secret_seed
        )
        self._admin_client = admin_client
        self._transport = transport
        self.logger = ProvisioningLogger(__name__)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[KeycloakAdminClient]:
        """Yield the admin client for one workflow."""
        if self._admin_client is not None:
            yield self._admin_client
            return

        async with KeycloakAdminClient.from_credentials(
            self.credentials, transport=self._transport
        ) as admin_client:
            yield admin_client

    @asynccontextmanager
    async def _stage(self, stage: str, realm_name: str) -> AsyncIterator[None]:
        """Log, time and trace one stage."""
        start_time = time.time()
        self.logger.log_stage_start(stage, realm_name)

        try:
            async with traced_stage(stage, realm_name), metrics_collector.track_stage(
                stage
            ):
                yield
        except Exception as e:
            self.logger.log_stage_error(stage, realm_name, e, time.time() - start_time)
            raise

        self.logger.log_stage_success(stage, realm_name, time.time() - start_time)

    async def _acquire_token(self, admin_client: KeycloakAdminClient) -> AccessToken:
        return await CredentialProvider(admin_client, self.credentials).acquire_token()

    def client_id_for(self, realm_name: str) -> str:
        """Client ID of the workspace client in a realm."""
        return f"{realm_name}{self.client_suffix}"

    def client_secret_for(self, realm_name: str) -> str:
        """
        Recompute the derived client secret of a workspace.

        Raises:
            ConfigurationError: If no client secret seed is configured
        """
        if not self.client_secret_seed:
            raise ConfigurationError(
                "Client secret cannot be derived without a seed",
                user_action="Set WORKSPACE_CLIENT_SECRET_SEED to the seed used at provisioning time",
            )
        return ClientProvisioner.derive_client_secret(
            realm_name, self.client_secret_seed
        )

    def _new_client_secret(self, realm_name: str) -> str:
        if self.client_secret_seed:
            return self.client_secret_for(realm_name)
        return ClientProvisioner.generate_client_secret()

    async def create_workspace(
        self,
        domain_name: str,
        *,
        client_secret: str | None = None,
        roles: list[str] | None = None,
        initial_user: InitialUser | None = None,
    ) -> WorkspaceResult:
        """
        Provision a complete workspace for a domain.

        Args:
            domain_name: Name of the new realm
            client_secret: Secret for the workspace client
                (default: derived from the seed, or random)
            roles: Client roles to create (default: configured roles)
            initial_user: Optional user created as the last stage

        Returns:
            WorkspaceResult describing what was provisioned

        Raises:
            ValidationError: If the domain name or derived client ID is invalid
            ResourceExistsError: If the realm already exists (nothing is created)
            WorkspaceError: The first stage failure, annotated with
                failed_stage, completed_stages and compensated_stages
        """
        raise_for_violations(
            validate_realm_name(domain_name, allow_master=False), ["domainName"]
        )
        realm_name = domain_name
        client_id = self.client_id_for(realm_name)
        raise_for_violations(validate_client_id(client_id), ["clientId"])

        role_names = list(roles) if roles is not None else list(self.roles)
        secret = client_secret or self._new_client_secret(realm_name)

        run = ProvisioningRun(realm_name)
        start_time = time.time()
        self.logger.log_workflow_start("create_workspace", realm_name)

        async with metrics_collector.track_workflow("create_workspace"):
            async with self._session() as admin_client:
                stage = STAGE_AUTHENTICATE
                token: AccessToken | None = None

                try:
                    async with self._stage(stage, realm_name):
                        token = await self._acquire_token(admin_client)

                    stage = STAGE_REALM
                    async with self._stage(stage, realm_name):
                        await RealmProvisioner(admin_client).create_realm(
                            token, realm_name
                        )
                    run.complete(stage)

                    stage = STAGE_CLIENT
                    async with self._stage(stage, realm_name):
                        run.client_uuid = await ClientProvisioner(
                            admin_client
                        ).create_client(token, realm_name, client_id, secret)
                    run.complete(stage)

                    authorization = AuthorizationProvisioner(admin_client)

                    stage = STAGE_ROLES
                    async with self._stage(stage, realm_name):
                        await authorization.attach_roles(
                            token, realm_name, run.client_uuid, role_names
                        )
                    run.complete(stage)

                    stage = STAGE_MAPPER
                    async with self._stage(stage, realm_name):
                        await authorization.attach_mapper(
                            token, realm_name, run.client_uuid
                        )
                    run.complete(stage)

                    if initial_user is not None:
                        stage = STAGE_USER
                        async with self._stage(stage, realm_name):
                            await UserProvisioner(admin_client).create_user(
                                token,
                                realm_name,
                                initial_user.username,
                                initial_user.first_name,
                                initial_user.last_name,
                                initial_user.email,
                                initial_user.password,
                            )
                        run.complete(stage)

                except WorkspaceError as e:
                    run.fail(stage, e)
                    e.record_progress(stage, run.completed_stages)

                    if self.rollback_on_failure and token is not None and run.realm_created:
                        await self._compensate(admin_client, token, run, e)

                    logger.warning(
                        f"Workspace provisioning for realm {realm_name} stopped at "
                        f"stage {stage} (last successful stage: {e.last_successful_stage})",
                        extra={
                            "realm_name": realm_name,
                            "stage": stage,
                            "error_type": type(e).__name__,
                            "completed_stages": e.completed_stages,
                            "compensated_stages": e.compensated_stages,
                        },
                    )
                    raise

        run.finish()
        self.logger.log_workflow_success(
            "create_workspace",
            realm_name,
            time.time() - start_time,
            completed_stages=run.completed_stages,
        )

        return WorkspaceResult(
            realm_name=realm_name,
            client_id=client_id,
            client_uuid=run.client_uuid,
            client_secret=secret,
            roles=role_names,
            user_created=initial_user is not None,
            completed_stages=run.completed_stages,
        )

    async def _compensate(
        self,
        admin_client: KeycloakAdminClient,
        token: AccessToken,
        run: ProvisioningRun,
        error: WorkspaceError,
    ) -> None:
        """
        Undo committed stages in reverse order.

        Compensation failures are recorded on the original error and never
        replace it.
        """
        clients = ClientProvisioner(admin_client)
        realms = RealmProvisioner(admin_client)

        actions = []
        if run.client_created and run.client_uuid:
            actions.append(
                (
                    STAGE_CLIENT,
                    lambda: clients.delete_client(
                        token, run.realm_name, run.client_uuid
                    ),
                )
            )
        if run.realm_created:
            actions.append(
                (STAGE_REALM, lambda: realms.delete_realm(token, run.realm_name))
            )

        for stage, action in actions:
            try:
                await action()
            except WorkspaceError as compensation_error:
                error.compensation_errors.append(compensation_error)
                metrics_collector.record_compensation(stage, success=False)
                logger.warning(
                    f"Rollback of stage {stage} for realm {run.realm_name} failed: "
                    f"{compensation_error.message}",
                    extra={"realm_name": run.realm_name, "stage": stage},
                )
                continue

            error.compensated_stages.append(stage)
            metrics_collector.record_compensation(stage, success=True)

        self.logger.log_compensation(
            run.realm_name, error.compensated_stages, error.compensation_errors
        )

    async def realm_exists(self, realm_name: str) -> bool:
        """Check whether a realm exists, using a fresh admin token."""
        async with self._session() as admin_client:
            token = await self._acquire_token(admin_client)
            return await RealmProvisioner(admin_client).realm_exists(token, realm_name)

    async def create_user(
        self,
        realm_name: str,
        username: str,
        first_name: str,
        last_name: str,
        email: Email,
        password: Password,
    ) -> bool:
        """Create a user in an existing workspace, using a fresh admin token."""
        async with metrics_collector.track_workflow("create_user"):
            async with self._session() as admin_client:
                token = await self._acquire_token(admin_client)
                return await UserProvisioner(admin_client).create_user(
                    token, realm_name, username, first_name, last_name, email, password
                )

    async def login_user(
        self,
        username: str,
        password: str,
        realm_name: str,
        client_id: str,
        client_secret: str,
    ) -> TokenSet:
        """Authenticate an end user. No admin token is involved."""
        async with metrics_collector.track_workflow("login_user"):
            async with self._session() as admin_client:
                return await AuthenticationGateway(admin_client).login_user(
                    username, password, realm_name, client_id, client_secret
                )

    async def get_realm_certificates(self, realm_name: str) -> JsonWebKeySet:
        """Fetch a realm's public signing keys."""
        async with self._session() as admin_client:
            return await AuthenticationGateway(admin_client).get_realm_certificates(
                realm_name
            )

    async def set_client_secret(
        self,
        realm_name: str,
        client_uuid: str,
        secret: str | None = None,
    ) -> ClientSecret:
        """
        Replace a workspace client's secret, using a fresh admin token.

        Args:
            realm_name: Realm owning the client
            client_uuid: Keycloak UUID of the client
            secret: New secret (default: a random one)
        """
        new_secret = secret or ClientProvisioner.generate_client_secret()
        async with metrics_collector.track_workflow("set_client_secret"):
            async with self._session() as admin_client:
                token = await self._acquire_token(admin_client)
                return await ClientProvisioner(admin_client).set_client_secret(
                    token, realm_name, client_uuid, new_secret
                )
