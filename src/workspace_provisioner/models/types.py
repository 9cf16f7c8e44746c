"""
Type aliases for structural typing in provisioner models.

This module defines type aliases that provide semantic clarity about the
expected structure of dynamic fields, without being overly restrictive.
"""

from typing import TypeAlias

# =============================================================================
# Keycloak API Types
# =============================================================================
# Keycloak's REST API uses flat string-to-string mappings for all config blocks.
# Even boolean and numeric values are represented as strings:
#   - "multivalued": "true" (not True)
#   - "claim.name": "role"

KeycloakConfigMap: TypeAlias = dict[str, str]
"""
Flat string-to-string configuration map used by Keycloak REST API.

Used for protocol mapper configurations.
"""