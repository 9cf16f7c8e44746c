"""
Utils package - Utility modules for workspace provisioner functionality.

Contains helper modules for:
- Keycloak Admin API transport
- Input validation returning violation lists
- OIDC endpoint construction
"""
