"""
Workspace handlers - Provisions new workspaces from commands.
"""

import logging

from ..models.commands import CreateWorkspaceCommand
from ..models.user import InitialUser
from ..models.workspace import WorkspaceResult
from ..observability.tracing import traced_handler
from ..services import WorkspaceProvisioner
from ..utils.handler_logging import log_handler_entry

logger = logging.getLogger(__name__)


@traced_handler("create_workspace")
async def handle_create_workspace(
    command: CreateWorkspaceCommand,
    provisioner: WorkspaceProvisioner | None = None,
    initial_user: InitialUser | None = None,
    client_secret: str | None = None,
) -> WorkspaceResult:
    """
    Provision the workspace named in the command.

    Args:
        command: CreateWorkspace command
        provisioner: Orchestrator to use (default: configured from settings)
        initial_user: Optional first user of the workspace
        client_secret: Explicit client secret (default: derived or random)

    Returns:
        WorkspaceResult of the new workspace
    """
    log_handler_entry("create_workspace", command.domain_name)

    provisioner = provisioner or WorkspaceProvisioner()
    return await provisioner.create_workspace(
        command.domain_name,
        client_secret=client_secret,
        initial_user=initial_user,
    )
