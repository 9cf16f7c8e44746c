"""
Workspace Provisioner - Multi-tenant workspaces on top of Keycloak.

Provisions one isolated workspace per domain:
- A dedicated realm
- A confidential client with service accounts and authorization services
- Client roles and a mapper exposing them as a token claim
- Optional initial user accounts and password logins
"""

__version__ = "0.1.0"
