"""
Workspace provisioning state and results.

A workflow moves strictly forward through the stages below and ends either
in DONE or in the absorbing FAILED state:

    STARTED -> REALM_CREATED -> CLIENT_CREATED -> ROLES_ATTACHED
            -> MAPPER_ATTACHED -> [USER_CREATED] -> DONE
"""

from enum import StrEnum

from pydantic import BaseModel, Field

from ..constants import (
    STAGE_CLIENT,
    STAGE_MAPPER,
    STAGE_REALM,
    STAGE_ROLES,
    STAGE_USER,
)


class ProvisioningState(StrEnum):
    STARTED = "started"
    REALM_CREATED = "realm_created"
    CLIENT_CREATED = "client_created"
    ROLES_ATTACHED = "roles_attached"
    MAPPER_ATTACHED = "mapper_attached"
    USER_CREATED = "user_created"
    DONE = "done"
    FAILED = "failed"


# Allowed forward transitions; FAILED is reachable from any non-terminal state
_TRANSITIONS: dict[ProvisioningState, set[ProvisioningState]] = {
    ProvisioningState.STARTED: {ProvisioningState.REALM_CREATED},
    ProvisioningState.REALM_CREATED: {ProvisioningState.CLIENT_CREATED},
    ProvisioningState.CLIENT_CREATED: {ProvisioningState.ROLES_ATTACHED},
    ProvisioningState.ROLES_ATTACHED: {ProvisioningState.MAPPER_ATTACHED},
    ProvisioningState.MAPPER_ATTACHED: {
        ProvisioningState.USER_CREATED,
        ProvisioningState.DONE,
    },
    ProvisioningState.USER_CREATED: {ProvisioningState.DONE},
    ProvisioningState.DONE: set(),
    ProvisioningState.FAILED: set(),
}

STATE_FOR_STAGE = {
    STAGE_REALM: ProvisioningState.REALM_CREATED,
    STAGE_CLIENT: ProvisioningState.CLIENT_CREATED,
    STAGE_ROLES: ProvisioningState.ROLES_ATTACHED,
    STAGE_MAPPER: ProvisioningState.MAPPER_ATTACHED,
    STAGE_USER: ProvisioningState.USER_CREATED,
}


class ProvisioningRun:
    """
    Tracks one workspace workflow.

    The orchestrator calls complete() after each stage commits and fail()
    when a stage raises. Out-of-order transitions raise RuntimeError, which
    indicates a bug in the caller rather than a provisioning failure.
    """

    def __init__(self, realm_name: str) -> None:
        self.realm_name = realm_name
        self.state = ProvisioningState.STARTED
        self.completed_stages: list[str] = []
        self.failed_stage: str | None = None
        self.cause: Exception | None = None
        self.client_uuid: str | None = None

    def _transition(self, new_state: ProvisioningState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid provisioning transition for '{self.realm_name}': "
                f"{self.state} -> {new_state}"
            )
        self.state = new_state

    def complete(self, stage: str) -> None:
        """Record that a stage committed."""
        self._transition(STATE_FOR_STAGE[stage])
        self.completed_stages.append(stage)

    def finish(self) -> None:
        self._transition(ProvisioningState.DONE)

    def fail(self, stage: str, cause: Exception) -> None:
        """Move to FAILED. Failing an already terminal run is an error."""
        if self.is_terminal:
            raise RuntimeError(
                f"Provisioning run for '{self.realm_name}' already ended in {self.state}"
            )
        self.state = ProvisioningState.FAILED
        self.failed_stage = stage
        self.cause = cause

    @property
    def is_terminal(self) -> bool:
        return self.state in (ProvisioningState.DONE, ProvisioningState.FAILED)

    @property
    def realm_created(self) -> bool:
        return STAGE_REALM in self.completed_stages

    @property
    def client_created(self) -> bool:
        return STAGE_CLIENT in self.completed_stages


class WorkspaceResult(BaseModel):
    """Outcome of a successful workspace provisioning workflow."""

    model_config = {"populate_by_name": True}

    realm_name: str = Field(..., alias="realmName")
    client_id: str = Field(..., alias="clientId")
    client_uuid: str = Field(..., alias="clientUuid")
    client_secret: str = Field(..., alias="clientSecret", repr=False)
    roles: list[str] = Field(default_factory=list)
    user_created: bool = Field(False, alias="userCreated")
    completed_stages: list[str] = Field(
        default_factory=list, alias="completedStages"
    )
