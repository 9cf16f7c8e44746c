"""
Error hierarchy for workspace provisioning.

Every failure raised by the provisioner derives from WorkspaceError, which
carries a category, retry guidance and the action an operator should take.
Errors coming back from the identity provider keep the upstream HTTP status
and response body so they can be diagnosed without re-running the workflow.
"""

from typing import Any


class WorkspaceError(Exception):
    """
    Base error class for all provisioning exceptions.

    Besides categorization, a WorkspaceError records how far a provisioning
    workflow got before it failed. The orchestrator fills in the progress
    attributes before re-raising, so callers can tell which stages were
    committed and which were rolled back.
    """

    def __init__(
        self,
        message: str,
        category: str,
        retryable: bool = False,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize workspace error.

        Args:
            message: Human-readable error description
            category: Error category (validation, network, upstream, conflict, ...)
            retryable: Whether repeating the operation may succeed
            user_action: What the operator should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.retryable = retryable
        self.user_action = user_action
        self.cause = cause

        # Workflow progress, populated by the orchestrator
        self.failed_stage: str | None = None
        self.completed_stages: list[str] = []
        self.compensated_stages: list[str] = []
        self.compensation_errors: list[Exception] = []

    @property
    def last_successful_stage(self) -> str | None:
        """Return the last stage committed before the failure, if any."""
        return self.completed_stages[-1] if self.completed_stages else None

    def record_progress(
        self,
        failed_stage: str,
        completed_stages: list[str],
    ) -> None:
        """Attach workflow progress to the error."""
        self.failed_stage = failed_stage
        self.completed_stages = list(completed_stages)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for structured logs and CLI output."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category,
            "retryable": self.retryable,
            "failed_stage": self.failed_stage,
            "completed_stages": self.completed_stages,
            "compensated_stages": self.compensated_stages,
        }

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class ValidationError(WorkspaceError):
    """Input was malformed; no network call was attempted."""

    def __init__(
        self,
        violations: list[str],
        fields: list[str] | None = None,
        user_action: str | None = None,
    ):
        self.violations = list(violations)
        self.fields = list(fields or [])
        message = "Validation failed: " + "; ".join(self.violations)
        super().__init__(
            message=message,
            category="validation",
            retryable=False,
            user_action=user_action or "Correct the listed fields and resubmit",
        )


class ConfigurationError(WorkspaceError):
    """Error in provisioner configuration."""

    def __init__(self, message: str, user_action: str | None = None):
        super().__init__(
            message=message,
            category="configuration",
            retryable=False,
            user_action=user_action or "Review and correct configuration",
        )


class NetworkFailure(WorkspaceError):
    """Transport-level failure talking to the identity provider."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            message=message,
            category="network",
            retryable=True,
            user_action="Check identity provider connectivity and retry",
            cause=cause,
        )


class ResponseParsingError(WorkspaceError):
    """A successful response lacked a field required downstream."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        endpoint: str | None = None,
        user_action: str | None = None,
    ):
        self.field = field
        self.endpoint = endpoint
        super().__init__(
            message=message,
            category="parsing",
            retryable=False,
            user_action=user_action
            or "Check identity provider version and API compatibility",
        )


class ClientUuidMissingError(ResponseParsingError):
    """Client creation succeeded but the generated UUID could not be resolved."""

    def __init__(self, client_id: str, realm_name: str):
        self.client_id = client_id
        self.realm_name = realm_name
        super().__init__(
            message=(
                f"Client '{client_id}' was created in realm '{realm_name}' "
                "but no client UUID was returned in the Location header"
            ),
            field="Location",
            user_action=(
                "Look up the client in the admin console and remove or finish "
                "provisioning it manually"
            ),
        )


class ResourceExistsError(WorkspaceError):
    """The resource being created is already provisioned."""

    def __init__(
        self,
        resource_type: str,
        name: str,
        status_code: int | None = None,
    ):
        self.resource_type = resource_type
        self.name = name
        self.status_code = status_code
        super().__init__(
            message=f"{resource_type} '{name}' already exists",
            category="conflict",
            retryable=False,
            user_action=f"Choose a different {resource_type} name or reuse the existing one",
        )


class KeycloakAdminError(WorkspaceError):
    """Non-success HTTP response from the identity provider."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        retryable: bool = True,
        user_action: str | None = None,
    ):
        self.status_code = status_code
        self.response_body = response_body

        if status_code:
            message = f"HTTP {status_code}: {message}"

        # 4xx errors are client errors, repeating the call will not help
        if status_code and 400 <= status_code < 500:
            retryable = False

        super().__init__(
            message=message,
            category="upstream",
            retryable=retryable,
            user_action=user_action
            or "Check identity provider status and admin credentials",
        )

    def body_preview(self, limit: int = 2048) -> str | None:
        """Return a truncated preview of the response body for logging."""

        if self.response_body is None:
            return None

        if len(self.response_body) <= limit:
            return self.response_body

        return f"{self.response_body[:limit]}...<truncated>"

    @classmethod
    def wrap(
        cls,
        error: "KeycloakAdminError",
        message: str,
        **kwargs: Any,
    ) -> "KeycloakAdminError":
        """Re-type a generic upstream error, keeping status and body."""
        return cls(
            message,
            status_code=error.status_code,
            response_body=error.response_body,
            **kwargs,
        )


class AuthenticationFailure(KeycloakAdminError):
    """Token exchange failed (admin client credentials or end-user password)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(
            message,
            status_code=status_code,
            response_body=response_body,
            user_action="Verify the credentials and the client configuration",
        )


class ResourceNotFoundError(KeycloakAdminError):
    """A lookup returned 404 where the resource was required."""


class RealmCreationFailure(KeycloakAdminError):
    """The realm could not be created."""


class ClientCreationFailure(KeycloakAdminError):
    """The confidential client could not be created."""


class RoleOrMapperFailure(KeycloakAdminError):
    """A client role or protocol mapper could not be attached."""

    def __init__(
        self,
        message: str,
        resource_kind: str,
        resource_name: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        self.resource_kind = resource_kind
        self.resource_name = resource_name
        super().__init__(
            message,
            status_code=status_code,
            response_body=response_body,
        )


class UserCreationFailure(KeycloakAdminError):
    """The end-user account could not be created."""


class ClientSecretFailure(KeycloakAdminError):
    """The client secret could not be set."""
