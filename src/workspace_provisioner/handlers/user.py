"""
User handlers - Creates and authenticates workspace users.

Email and Password value types are built here, before any network call, and
both are checked even when the first one fails so the caller sees every
violation at once.
"""

import logging

from ..errors import ValidationError
from ..models.commands import CreateUserCommand, LoginUserCommand
from ..models.keycloak_api import TokenSet
from ..models.user import Email, Password
from ..observability.tracing import traced_handler
from ..services import WorkspaceProvisioner
from ..utils.handler_logging import log_handler_entry
from ..utils.validation import (
    find_missing_fields,
    raise_for_violations,
    required_field_violations,
)

logger = logging.getLogger(__name__)


def build_user_credentials(email: str, password: str) -> tuple[Email, Password]:
    """
    Build validated Email and Password values.

    Raises:
        ValidationError: Listing the violations of both values
    """
    violations: list[str] = []
    fields: list[str] = []
    built_email: Email | None = None
    built_password: Password | None = None

    try:
        built_email = Email(email)
    except ValidationError as e:
        violations.extend(e.violations)
        fields.extend(e.fields)

    try:
        built_password = Password(password)
    except ValidationError as e:
        violations.extend(e.violations)
        fields.extend(e.fields)

    raise_for_violations(violations, fields)
    return built_email, built_password


@traced_handler("create_user")
async def handle_create_user(
    command: CreateUserCommand,
    provisioner: WorkspaceProvisioner | None = None,
) -> bool:
    """Create the user described by the command."""
    log_handler_entry("create_user", command.realm_name)

    email, password = build_user_credentials(command.email, command.password)

    provisioner = provisioner or WorkspaceProvisioner()
    return await provisioner.create_user(
        command.realm_name,
        command.username,
        command.first_name,
        command.last_name,
        email,
        password,
    )


@traced_handler("login_user")
async def handle_login_user(
    command: LoginUserCommand,
    provisioner: WorkspaceProvisioner | None = None,
) -> TokenSet:
    """
    Log a user in to their workspace.

    The workspace client ID and its secret are recomputed from the realm
    name and the configured seed; nothing is looked up in Keycloak.

    Raises:
        ValidationError: If username, password or realm name is blank
        ConfigurationError: If no client secret seed is configured
        AuthenticationFailure: If Keycloak rejects the login
    """
    log_handler_entry("login_user", command.realm_name)

    values = {
        "username": command.username,
        "password": command.password,
        "realmName": command.realm_name,
    }
    raise_for_violations(required_field_violations(values), find_missing_fields(values))

    provisioner = provisioner or WorkspaceProvisioner()
    return await provisioner.login_user(
        command.username,
        command.password,
        command.realm_name,
        provisioner.client_id_for(command.realm_name),
        provisioner.client_secret_for(command.realm_name),
    )
