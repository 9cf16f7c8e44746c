"""
Admin credentials used to obtain provisioning tokens.

AdminCredentials is immutable and validated exactly once, when it is built.
Every failing field is reported together in one ValidationError.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from ..utils.validation import raise_for_violations, validate_admin_credentials

# Python attribute name -> wire name
_CREDENTIAL_FIELDS = {
    "keycloak_url": "keycloakUrl",
    "admin_realm": "adminRealm",
    "admin_client_id": "adminClientId",
    "admin_client_secret": "adminClientSecret",
}


class AdminCredentials(BaseModel):
    """Service-account credentials for the Keycloak admin API."""

    model_config = {"populate_by_name": True, "frozen": True}

    keycloak_url: str = Field(
        ..., alias="keycloakUrl", description="Base URL of the Keycloak server"
    )
    admin_realm: str = Field(
        ..., alias="adminRealm", description="Realm holding the service account"
    )
    admin_client_id: str = Field(
        ..., alias="adminClientId", description="Service-account client ID"
    )
    admin_client_secret: str = Field(
        ...,
        alias="adminClientSecret",
        description="Service-account client secret",
        repr=False,
    )

    @model_validator(mode="before")
    @classmethod
    def validate_all_fields(cls, data: Any) -> Any:
        """Collect every violation before pydantic sees the data."""
        if not isinstance(data, dict):
            return data

        values = {
            wire: data.get(wire, data.get(attr))
            for attr, wire in _CREDENTIAL_FIELDS.items()
        }
        violations, fields = validate_admin_credentials(values)
        raise_for_violations(violations, fields)
        return data

    @property
    def server_url(self) -> str:
        """Keycloak base URL without a trailing slash."""
        return self.keycloak_url.rstrip("/")
