"""
Constants used throughout the workspace provisioner.

This module defines all constant values used by the provisioner including:
- Keycloak endpoint paths and grant types
- The fixed shape of the client and role mapper created per workspace
- Provisioning stage names
- Default configuration values
"""

import logging

# Keycloak admin realm that cannot be deleted or provisioned as a workspace
MASTER_REALM = "master"

# OAuth2 grant types used against the token endpoint
GRANT_CLIENT_CREDENTIALS = "client_credentials"
GRANT_PASSWORD = "password"

# Header carrying the URL of a newly created admin resource
LOCATION_HEADER = "Location"

# Default workspace layout
DEFAULT_WORKSPACE_ROLES = "admin,member"
DEFAULT_CLIENT_SUFFIX = "-client"
DEFAULT_CLIENT_SECRET_BYTES = 32

# Protocol mapper projecting role assignments into token claims
ROLE_MAPPER_NAME = "realm-roles-mapper"
ROLE_MAPPER_PROTOCOL = "openid-connect"
ROLE_MAPPER_TYPE = "oidc-usermodel-realm-role-mapper"
ROLE_MAPPER_CONFIG = {
    "multivalued": "true",
    "user.attribute": "roles",
    "id.token.claim": "true",
    "access.token.claim": "true",
    "claim.name": "role",
    "jsonType.label": "String",
}

# Provisioning stages, in pipeline order
STAGE_AUTHENTICATE = "authenticate"
STAGE_REALM = "realm"
STAGE_CLIENT = "client"
STAGE_ROLES = "roles"
STAGE_MAPPER = "mapper"
STAGE_USER = "user"

# Timeout constants (in seconds)
DEFAULT_REQUEST_TIMEOUT = 30

# Error message templates
ERROR_REQUIRED_FIELD = "{} is a required field"
ERROR_DELETE_MASTER = "Refusing to delete the master realm"

# Level at which handler invocations are logged
HANDLER_ENTRY_LOG_LEVEL = logging.INFO
