"""
Pydantic models for the parts of the Keycloak Admin REST API the provisioner uses.

Python attributes are snake_case; the wire names are Keycloak's camelCase
aliases. Request bodies are serialized with model_dump(by_alias=True,
exclude_none=True).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..constants import (
    ROLE_MAPPER_CONFIG,
    ROLE_MAPPER_NAME,
    ROLE_MAPPER_PROTOCOL,
    ROLE_MAPPER_TYPE,
)
from .types import KeycloakConfigMap


class RealmRepresentation(BaseModel):
    """Minimal realm payload: an enabled realm with the given name."""

    model_config = {"populate_by_name": True}

    realm: str
    enabled: bool = True
    id: str | None = None
    display_name: str | None = Field(None, alias="displayName")


class ClientRepresentation(BaseModel):
    """
    Confidential OIDC client.

    Defaults describe the client created for every workspace: confidential,
    service accounts and authorization services on, standard flow and direct
    access grants on, implicit flow off.
    """

    model_config = {"populate_by_name": True}

    client_id: str = Field(..., alias="clientId")
    secret: str | None = None
    id: str | None = None
    enabled: bool = True
    public_client: bool = Field(False, alias="publicClient")
    direct_access_grants_enabled: bool = Field(True, alias="directAccessGrantsEnabled")
    authorization_services_enabled: bool = Field(
        True, alias="authorizationServicesEnabled"
    )
    service_accounts_enabled: bool = Field(True, alias="serviceAccountsEnabled")
    standard_flow_enabled: bool = Field(True, alias="standardFlowEnabled")
    implicit_flow_enabled: bool = Field(False, alias="implicitFlowEnabled")
    bearer_only: bool = Field(False, alias="bearerOnly")
    consent_required: bool = Field(False, alias="consentRequired")
    full_scope_allowed: bool = Field(True, alias="fullScopeAllowed")
    surrogate_auth_required: bool = Field(False, alias="surrogateAuthRequired")
    client_authenticator_type: str = Field(
        "client-secret", alias="clientAuthenticatorType"
    )


class RoleRepresentation(BaseModel):
    """Client role."""

    model_config = {"populate_by_name": True}

    name: str
    description: str | None = None


class ProtocolMapperRepresentation(BaseModel):
    """Protocol mapper attached to a client."""

    model_config = {"populate_by_name": True}

    name: str
    protocol: str
    protocol_mapper: str = Field(..., alias="protocolMapper")
    consent_required: bool = Field(False, alias="consentRequired")
    config: KeycloakConfigMap = Field(default_factory=dict)

    @classmethod
    def role_mapper(cls) -> "ProtocolMapperRepresentation":
        """The mapper projecting role assignments into the 'role' claim."""
        return cls(
            name=ROLE_MAPPER_NAME,
            protocol=ROLE_MAPPER_PROTOCOL,
            protocol_mapper=ROLE_MAPPER_TYPE,
            consent_required=False,
            config=dict(ROLE_MAPPER_CONFIG),
        )


class TokenSet(BaseModel):
    """
    Token endpoint response.

    Only access_token is required. Fields Keycloak adds beyond the standard
    ones are kept so callers get the raw token set back.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    token_type: str | None = None
    expires_in: int | None = None
    refresh_token: str | None = None
    refresh_expires_in: int | None = None
    id_token: str | None = None
    scope: str | None = None
    session_state: str | None = None


class AccessToken(BaseModel):
    """Admin bearer token, valid for one workflow."""

    model_config = {"frozen": True}

    value: str = Field(..., repr=False)
    token_type: str = "Bearer"
    expires_in: int | None = None

    @classmethod
    def from_token_set(cls, token_set: TokenSet) -> "AccessToken":
        return cls(
            value=token_set.access_token,
            token_type=token_set.token_type or "Bearer",
            expires_in=token_set.expires_in,
        )

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.value}"


class ClientSecret(BaseModel):
    """Client secret as returned by the client-secret endpoint."""

    model_config = {"populate_by_name": True}

    type: str = "secret"
    value: str | None = Field(None, repr=False)


class JsonWebKeySet(BaseModel):
    """Public signing keys of a realm."""

    model_config = ConfigDict(extra="allow")

    keys: list[dict[str, Any]] = Field(default_factory=list)

    def key_ids(self) -> list[str]:
        return [key["kid"] for key in self.keys if "kid" in key]
