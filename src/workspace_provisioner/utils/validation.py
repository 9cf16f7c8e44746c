"""
Validation utilities for the workspace provisioner.

Every check in this module is a pure function: it takes the candidate value
and returns the list of violated rules, empty when the value is acceptable.
Nothing is raised here; callers collect the violations of all fields first
and raise a single ValidationError through raise_for_violations(), so the
caller sees every problem at once instead of just the first.
"""

import logging
import re
from collections.abc import Mapping
from urllib.parse import urlparse

from ..constants import ERROR_REQUIRED_FIELD, MASTER_REALM
from ..errors import ValidationError

logger = logging.getLogger(__name__)

MAX_EMAIL_LENGTH = 254
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
MAX_NAME_LENGTH = 255

# Characters Keycloak rejects or that break admin API paths
INVALID_REALM_CHARS = ["/", "\\", "?", "#", "%", "&", "=", "+", " "]

RESERVED_CLIENT_IDS = {
    "admin-cli",
    "account",
    "account-console",
    "broker",
    "realm-management",
    "security-admin-console",
}

_EMAIL_LOCAL_PATTERN = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+$")
_EMAIL_DOMAIN_PATTERN = re.compile(
    r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)+$"
)


def find_missing_fields(values: Mapping[str, str | None]) -> list[str]:
    """
    Return the names of all fields whose value is missing or blank.

    Args:
        values: Mapping of field name to candidate value

    Returns:
        Field names in the order they appear in the mapping
    """
    return [name for name, value in values.items() if not value or not value.strip()]


def required_field_violations(values: Mapping[str, str | None]) -> list[str]:
    """Return one 'is a required field' message per missing field."""
    return [ERROR_REQUIRED_FIELD.format(name) for name in find_missing_fields(values)]


def validate_url(url: str, url_type: str = "URL") -> list[str]:
    """
    Validate URL format and scheme.

    Args:
        url: URL to validate
        url_type: Type of URL for error messages

    Returns:
        List of violations
    """
    if not url:
        return [f"{url_type} cannot be empty"]

    parsed = urlparse(url)
    violations = []

    if parsed.scheme not in ["http", "https"]:
        violations.append(
            f"{url_type} must use http or https scheme, got: {parsed.scheme or '<none>'}"
        )

    if not parsed.hostname:
        violations.append(f"{url_type} must have a valid hostname")

    if not violations and parsed.scheme == "http" and parsed.hostname != "localhost":
        logger.warning(
            f"{url_type} uses unencrypted HTTP - consider using HTTPS for security"
        )

    return violations


def validate_realm_name(realm_name: str, allow_master: bool = True) -> list[str]:
    """
    Validate Keycloak realm name format.

    Args:
        realm_name: Realm name to validate
        allow_master: Whether the master realm is acceptable (false for workspaces)

    Returns:
        List of violations
    """
    if not realm_name or not realm_name.strip():
        return ["Realm name cannot be empty"]

    violations = []

    if len(realm_name) > MAX_NAME_LENGTH:
        violations.append(
            f"Realm name '{realm_name}' is too long (max {MAX_NAME_LENGTH} characters)"
        )

    for char in INVALID_REALM_CHARS:
        if char in realm_name:
            violations.append(
                f"Realm name '{realm_name}' contains invalid character: '{char}'"
            )

    if not allow_master and realm_name.lower() == MASTER_REALM:
        violations.append(f"Realm name '{realm_name}' is reserved by Keycloak")

    return violations


def validate_client_id(client_id: str) -> list[str]:
    """Validate Keycloak client ID format."""
    if not client_id:
        return ["Client ID cannot be empty"]

    violations = []

    if len(client_id) > MAX_NAME_LENGTH:
        violations.append(
            f"Client ID '{client_id}' is too long (max {MAX_NAME_LENGTH} characters)"
        )

    if any(char.isspace() for char in client_id):
        violations.append(f"Client ID '{client_id}' contains invalid whitespace")

    if client_id in RESERVED_CLIENT_IDS:
        violations.append(f"Client ID '{client_id}' is reserved by Keycloak")

    return violations


def validate_email(email: str) -> list[str]:
    """
    Validate an email address.

    Rules: non-empty, at most 254 characters, no whitespace, exactly one '@',
    a non-empty local part and a dotted domain.
    """
    if not email:
        return ["Email cannot be empty"]

    violations = []

    if len(email) > MAX_EMAIL_LENGTH:
        violations.append(f"Email is too long (max {MAX_EMAIL_LENGTH} characters)")

    if any(char.isspace() for char in email):
        violations.append("Email must not contain whitespace")

    if email.count("@") != 1:
        violations.append("Email must contain exactly one '@'")
        return violations

    local, domain = email.split("@")
    if not local:
        violations.append("Email local part cannot be empty")
    elif not _EMAIL_LOCAL_PATTERN.match(local):
        violations.append("Email local part contains invalid characters")

    if not _EMAIL_DOMAIN_PATTERN.match(domain):
        violations.append(f"Email domain '{domain}' is not a valid domain name")

    return violations


def validate_password(password: str) -> list[str]:
    """
    Validate password strength.

    Every rule is checked so the caller can fix all problems in one go.
    """
    violations = []

    if len(password) < MIN_PASSWORD_LENGTH:
        violations.append(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if len(password) > MAX_PASSWORD_LENGTH:
        violations.append(
            f"Password must be at most {MAX_PASSWORD_LENGTH} characters long"
        )
    if not any(char.islower() for char in password):
        violations.append("Password must contain a lower-case letter")
    if not any(char.isupper() for char in password):
        violations.append("Password must contain an upper-case letter")
    if not any(char.isdigit() for char in password):
        violations.append("Password must contain a digit")
    if not any(not char.isalnum() and not char.isspace() for char in password):
        violations.append("Password must contain a special character")
    if any(char.isspace() for char in password):
        violations.append("Password must not contain whitespace")

    return violations


def validate_admin_credentials(
    values: Mapping[str, str | None],
) -> tuple[list[str], list[str]]:
    """
    Validate admin credential fields keyed by their wire names.

    Args:
        values: keycloakUrl, adminRealm, adminClientId and adminClientSecret

    Returns:
        Tuple of (violations, failing field names)
    """
    missing = find_missing_fields(values)
    violations = [ERROR_REQUIRED_FIELD.format(name) for name in missing]
    fields = list(missing)

    url = values.get("keycloakUrl")
    if url and "keycloakUrl" not in missing:
        url_violations = validate_url(url, "keycloakUrl")
        if url_violations:
            violations.extend(url_violations)
            fields.append("keycloakUrl")

    realm = values.get("adminRealm")
    if realm and "adminRealm" not in missing:
        realm_violations = validate_realm_name(realm)
        if realm_violations:
            violations.extend(realm_violations)
            fields.append("adminRealm")

    return violations, fields


def raise_for_violations(
    violations: list[str],
    fields: list[str] | None = None,
) -> None:
    """
    Raise a single ValidationError carrying every violation, if there are any.

    Raises:
        ValidationError: If violations is non-empty
    """
    if violations:
        logger.debug(f"Validation failed with {len(violations)} violation(s)")
        raise ValidationError(violations, fields=fields)
