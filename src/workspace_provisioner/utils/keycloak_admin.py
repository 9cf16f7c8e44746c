"""
Keycloak Admin API client utilities.

This module provides the HTTP transport the provisioning services use to talk
to the Keycloak Admin REST API and to realm token endpoints.

The client handles:
- One httpx connection pool per `async with` block (one per workflow)
- Bearer authentication with a token passed in by the caller
- Uniform error reporting: every non-success status becomes a
  KeycloakAdminError carrying the status code and response body
- Type-safe request and response payloads

The client does not acquire, cache or refresh tokens and never retries.
Callers decide which token to use for which call.
"""

import logging
from typing import Any
from urllib.parse import urlsplit

import httpx
import pydantic

from ..constants import ERROR_DELETE_MASTER, LOCATION_HEADER, MASTER_REALM
from ..errors import KeycloakAdminError, NetworkFailure, ResponseParsingError
from ..models.credentials import AdminCredentials
from ..models.keycloak_api import (
    AccessToken,
    ClientRepresentation,
    ClientSecret,
    JsonWebKeySet,
    ProtocolMapperRepresentation,
    RealmRepresentation,
    RoleRepresentation,
    TokenSet,
)
from ..models.user import UserRepresentation
from ..settings import settings
from .oidc_endpoints import admin_client_path, admin_realm_path, certs_path, token_path

logger = logging.getLogger(__name__)

# Response bodies longer than this are truncated in log records
LOG_BODY_LIMIT = 1024


def _dump(model: pydantic.BaseModel) -> dict[str, Any]:
    return model.model_dump(by_alias=True, exclude_none=True)


def client_uuid_from_location(location: str) -> str | None:
    """
    Extract the client UUID from a client creation Location header.

    The UUID is the path segment directly after "/clients/". A header
    without one (absent, ending in a slash, or pointing elsewhere) yields None.
    """
    segments = urlsplit(location).path.split("/")
    if len(segments) < 2 or segments[-2] != "clients":
        return None
    return segments[-1] or None


class KeycloakAdminClient:
    """
    Low-level client for Keycloak Admin API and token endpoint calls.

    Use as an async context manager; the underlying httpx client is created
    lazily and closed when the block exits:

        async with KeycloakAdminClient.from_credentials(credentials) as admin:
            exists = await admin.realm_exists(token, "acme")
    """

    def __init__(
        self,
        server_url: str,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Keycloak Admin client.

        Args:
            server_url: Base URL of the Keycloak server
            verify_ssl: Whether to verify SSL certificates
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.server_url = server_url.rstrip("/")
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.debug(f"Initialized Keycloak Admin client for {self.server_url}")

    @classmethod
    def from_credentials(
        cls,
        credentials: AdminCredentials,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "KeycloakAdminClient":
        """Create a client for the server named in the credentials."""
        return cls(
            credentials.server_url,
            verify_ssl=settings.verify_ssl,
            timeout=settings.request_timeout,
            transport=transport,
        )

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx client owned by this instance."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.server_url,
                verify=self.verify_ssl,
                timeout=httpx.Timeout(self.timeout),
                transport=self.transport,
                follow_redirects=False,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "KeycloakAdminClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - ensures the connection pool is closed."""
        await self.close()

    async def _make_request(
        self,
        method: str,
        path: str,
        *,
        token: AccessToken | None = None,
        json: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Make a request to the Keycloak server.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: Path relative to the server URL
            token: Bearer token; omitted for public endpoints
            json: JSON request body
            data: Form-encoded request body
            params: Query parameters

        Returns:
            Response object (httpx.Response) with body already buffered

        Raises:
            KeycloakAdminError: On any HTTP status >= 400
            NetworkFailure: On connection errors and timeouts
        """
        headers = {}
        if token is not None:
            headers["Authorization"] = token.authorization_header

        client = self._get_client()

        try:
            response = await client.request(
                method=method,
                url=path,
                json=json,
                data=data,
                params=params,
                headers=headers,
            )
            response.raise_for_status()
            return response

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            response_body = e.response.text or "<no content>"

            body_preview = (
                response_body[:LOG_BODY_LIMIT] + "...<truncated>"
                if len(response_body) > LOG_BODY_LIMIT
                else response_body
            )

            # 404 on lookups is an expected outcome, callers decide how to log it
            log = logger.debug if status_code == 404 else logger.warning
            log(
                f"Request failed: {method} {path} - HTTP {status_code}",
                extra={
                    "http_status": status_code,
                    "response_body": body_preview,
                },
            )
            raise KeycloakAdminError(
                f"{method} {path} failed",
                status_code=status_code,
                response_body=response_body,
            ) from e

        except httpx.HTTPError as e:
            # Connection refused, DNS failure, timeout, ...
            logger.error(f"Request failed: {method} {path} - {e!r}")
            raise NetworkFailure(f"{method} {path} failed: {e!r}", cause=e) from e

    # Token endpoint

    async def request_token(self, realm_name: str, form: dict[str, str]) -> TokenSet:
        """
        Exchange a form-encoded grant for a token set.

        Raises:
            KeycloakAdminError: If the token endpoint rejects the grant
            ResponseParsingError: If the response has no access_token
        """
        path = token_path(realm_name)
        response = await self._make_request("POST", path, data=form)

        try:
            return TokenSet.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise ResponseParsingError(
                f"Token response from realm '{realm_name}' has no usable access_token",
                field="access_token",
                endpoint=path,
            ) from e

    async def get_realm_certificates(self, realm_name: str) -> JsonWebKeySet:
        """Fetch a realm's public signing keys. No token required."""
        path = certs_path(realm_name)
        response = await self._make_request("GET", path)

        try:
            return JsonWebKeySet.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise ResponseParsingError(
                f"Certificate response from realm '{realm_name}' is not a JWKS",
                field="keys",
                endpoint=path,
            ) from e

    # Realm Management Methods

    async def realm_exists(self, token: AccessToken, realm_name: str) -> bool:
        """
        Check whether a realm exists.

        Only the status is inspected; the realm body is not parsed.

        Returns:
            True on 2xx, False on 404

        Raises:
            KeycloakAdminError: If the request fails with any other status
        """
        try:
            await self._make_request("GET", admin_realm_path(realm_name), token=token)
        except KeycloakAdminError as e:
            if e.status_code == 404:
                return False
            raise

        return True

    async def create_realm(
        self, token: AccessToken, realm: RealmRepresentation
    ) -> None:
        """
        Create a new realm in Keycloak.

        Raises:
            KeycloakAdminError: If realm creation fails
        """
        logger.info(f"Creating realm: {realm.realm}")
        await self._make_request(
            "POST", admin_realm_path(), token=token, json=_dump(realm)
        )

    async def delete_realm(self, token: AccessToken, realm_name: str) -> bool:
        """
        Delete a realm from Keycloak.

        Returns:
            True if the realm was deleted, False if it was already gone
            or is the master realm

        Raises:
            KeycloakAdminError: If the deletion fails for another reason
        """
        if realm_name == MASTER_REALM:
            logger.error(ERROR_DELETE_MASTER)
            return False

        logger.info(f"Deleting realm '{realm_name}'")

        try:
            await self._make_request("DELETE", admin_realm_path(realm_name), token=token)
        except KeycloakAdminError as e:
            if e.status_code == 404:
                logger.info(f"Realm '{realm_name}' already deleted")
                return False
            raise

        return True

    # Client Management Methods

    async def create_client(
        self,
        token: AccessToken,
        realm_name: str,
        client: ClientRepresentation,
    ) -> str | None:
        """
        Create a new client in the specified realm.

        Returns:
            Client UUID taken from the Location header, None when the
            header is absent or names no client UUID

        Raises:
            KeycloakAdminError: If client creation fails
        """
        logger.info(f"Creating client '{client.client_id}' in realm '{realm_name}'")

        response = await self._make_request(
            "POST", admin_client_path(realm_name), token=token, json=_dump(client)
        )

        return client_uuid_from_location(response.headers.get(LOCATION_HEADER, ""))

    async def delete_client(
        self, token: AccessToken, realm_name: str, client_uuid: str
    ) -> bool:
        """
        Delete a client by UUID.

        Returns:
            True if the client was deleted, False if it was already gone
        """
        try:
            await self._make_request(
                "DELETE", admin_client_path(realm_name, client_uuid), token=token
            )
        except KeycloakAdminError as e:
            if e.status_code == 404:
                return False
            raise

        return True

    async def set_client_secret(
        self,
        token: AccessToken,
        realm_name: str,
        client_uuid: str,
        secret: ClientSecret,
    ) -> ClientSecret:
        """Set a client's secret and return the secret Keycloak reports back."""
        response = await self._make_request(
            "POST",
            f"{admin_client_path(realm_name, client_uuid)}/client-secret",
            token=token,
            json=_dump(secret),
        )

        # Older Keycloak versions answer 204 without a body
        if not response.content:
            return secret

        try:
            return ClientSecret.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise ResponseParsingError(
                f"Client secret response for client '{client_uuid}' is not a secret",
                field="value",
                endpoint=f"{admin_client_path(realm_name, client_uuid)}/client-secret",
            ) from e

    async def create_client_role(
        self,
        token: AccessToken,
        realm_name: str,
        client_uuid: str,
        role: RoleRepresentation,
    ) -> None:
        """Create a role on a client."""
        await self._make_request(
            "POST",
            f"{admin_client_path(realm_name, client_uuid)}/roles",
            token=token,
            json=_dump(role),
        )

    async def create_client_protocol_mapper(
        self,
        token: AccessToken,
        realm_name: str,
        client_uuid: str,
        mapper: ProtocolMapperRepresentation,
    ) -> None:
        """Attach a protocol mapper to a client."""
        await self._make_request(
            "POST",
            f"{admin_client_path(realm_name, client_uuid)}/protocol-mappers/models",
            token=token,
            json=_dump(mapper),
        )

    # User Management Methods

    async def create_user(
        self,
        token: AccessToken,
        realm_name: str,
        user: UserRepresentation,
    ) -> None:
        """Create a user in the specified realm."""
        await self._make_request(
            "POST",
            f"{admin_realm_path(realm_name)}/users",
            token=token,
            json=_dump(user),
        )
