"""Centralized provisioner settings using pydantic-settings.

This module provides a single source of truth for all provisioner configuration
loaded from environment variables. Uses pydantic for automatic validation,
type coercion, and documentation.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_CLIENT_SUFFIX,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_WORKSPACE_ROLES,
    MASTER_REALM,
)
from .models.credentials import AdminCredentials


class Settings(BaseSettings):
    """Provisioner configuration loaded from environment variables.

    Admin credentials have no usable defaults; they are validated when
    admin_credentials() is called, not at import time.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Identity provider connection
    keycloak_url: str = Field(
        default="",
        validation_alias="KEYCLOAK_URL",
        description="Base URL of the Keycloak server",
    )
    admin_realm: str = Field(
        default=MASTER_REALM,
        validation_alias="KEYCLOAK_ADMIN_REALM",
        description="Realm holding the provisioning service account",
    )
    admin_client_id: str = Field(
        default="",
        validation_alias="KEYCLOAK_ADMIN_CLIENT_ID",
        description="Client ID of the provisioning service account",
    )
    admin_client_secret: str = Field(
        default="",
        validation_alias="KEYCLOAK_ADMIN_CLIENT_SECRET",
        description="Client secret of the provisioning service account",
    )
    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        validation_alias="KEYCLOAK_REQUEST_TIMEOUT",
        description="Timeout in seconds for a single HTTP request",
    )
    verify_ssl: bool = Field(
        default=True,
        validation_alias="KEYCLOAK_VERIFY_SSL",
        description="Verify TLS certificates of the Keycloak server",
    )

    # Workspace layout
    roles: str = Field(
        default=DEFAULT_WORKSPACE_ROLES,
        validation_alias="WORKSPACE_ROLES",
        description="Comma-separated client roles created for every workspace",
    )
    client_suffix: str = Field(
        default=DEFAULT_CLIENT_SUFFIX,
        validation_alias="WORKSPACE_CLIENT_SUFFIX",
        description="Suffix appended to the domain name to form the client ID",
    )
    rollback_on_failure: bool = Field(
        default=True,
        validation_alias="WORKSPACE_ROLLBACK_ON_FAILURE",
        description="Undo committed stages when a later stage fails",
    )
    client_secret_seed: str = Field(
        default="",
        validation_alias="WORKSPACE_CLIENT_SECRET_SEED",
        description=(
            "Key used to derive per-workspace client secrets; "
            "empty generates a random secret per workspace"
        ),
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for request tracing",
    )

    # Tracing
    tracing_enabled: bool = Field(
        default=False,
        validation_alias="TRACING_ENABLED",
        description="Enable OpenTelemetry tracing",
    )
    tracing_endpoint: str = Field(
        default="http://localhost:4317",
        validation_alias="OTEL_EXPORTER_OTLP_ENDPOINT",
        description="OTLP gRPC collector endpoint",
    )
    tracing_service_name: str = Field(
        default="workspace-provisioner",
        validation_alias="OTEL_SERVICE_NAME",
        description="Service name reported on spans",
    )
    tracing_sample_rate: float = Field(
        default=1.0,
        validation_alias="TRACING_SAMPLE_RATE",
        description="Fraction of root spans to sample (0.0-1.0)",
    )

    @property
    def workspace_roles(self) -> list[str]:
        """Parse workspace roles from comma-separated string, keeping order."""
        return [role.strip() for role in self.roles.split(",") if role.strip()]

    def admin_credentials(self) -> AdminCredentials:
        """Build validated admin credentials from the configured values.

        Raises:
            ValidationError: If any credential field is missing or malformed
        """
        return AdminCredentials(
            keycloak_url=self.keycloak_url,
            admin_realm=self.admin_realm,
            admin_client_id=self.admin_client_id,
            admin_client_secret=self.admin_client_secret,
        )


# Global settings instance - initialized once at module import
settings = Settings()
