"""
OIDC endpoint utilities.

This module provides utilities for constructing standard OIDC/OAuth2 endpoints
and admin API paths for Keycloak realms based on the Keycloak base URL.
"""

from urllib.parse import quote


def realm_path(realm_name: str) -> str:
    """Path of a realm's public endpoints, relative to the server URL."""
    return f"/realms/{quote(realm_name, safe='')}"


def token_path(realm_name: str) -> str:
    """Path of a realm's token endpoint, relative to the server URL."""
    return f"{realm_path(realm_name)}/protocol/openid-connect/token"


def certs_path(realm_name: str) -> str:
    """Path of a realm's JWKS endpoint, relative to the server URL."""
    return f"{realm_path(realm_name)}/protocol/openid-connect/certs"


def admin_realm_path(realm_name: str | None = None) -> str:
    """
    Path of the admin realms collection, or of one realm within it.

    Example:
        >>> admin_realm_path("acme")
        '/admin/realms/acme'
    """
    if realm_name is None:
        return "/admin/realms"
    return f"/admin/realms/{quote(realm_name, safe='')}"


def admin_client_path(realm_name: str, client_uuid: str | None = None) -> str:
    """Path of a realm's clients collection, or of one client by UUID."""
    base = f"{admin_realm_path(realm_name)}/clients"
    if client_uuid is None:
        return base
    return f"{base}/{quote(client_uuid, safe='')}"


def construct_oidc_endpoints(base_url: str, realm_name: str) -> dict[str, str]:
    """
    Construct OIDC endpoint URLs for a Keycloak realm.

    Args:
        base_url: Base URL of the Keycloak instance (e.g., "https://keycloak.example.com")
        realm_name: Name of the realm

    Returns:
        Dictionary with OIDC endpoint URLs:
        - issuer: OpenID Connect issuer identifier
        - auth: Authorization endpoint
        - token: Token endpoint
        - userinfo: UserInfo endpoint
        - jwks: JSON Web Key Set (JWKS) endpoint
        - endSession: End session (logout) endpoint
    """
    # Remove trailing slash from base URL if present
    base_url = base_url.rstrip("/")

    realm_base = f"{base_url}{realm_path(realm_name)}"
    oidc_base = f"{realm_base}/protocol/openid-connect"

    return {
        "issuer": realm_base,
        "auth": f"{oidc_base}/auth",
        "token": f"{oidc_base}/token",
        "userinfo": f"{oidc_base}/userinfo",
        "jwks": f"{oidc_base}/certs",
        "endSession": f"{oidc_base}/logout",
    }
