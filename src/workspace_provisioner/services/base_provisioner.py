"""
Base class shared by the provisioning services.

Each service wraps one slice of the Keycloak Admin API. Services receive the
admin client and the admin token from their caller; none of them acquires a
token or keeps state between calls.
"""

from ..observability.logging import ProvisioningLogger
from ..utils.keycloak_admin import KeycloakAdminClient


class BaseProvisioner:
    """
    Base class for all provisioning services.

    Provides the admin client and a structured logger named after the
    concrete service.
    """

    def __init__(self, admin_client: KeycloakAdminClient):
        """
        Initialize base provisioner.

        Args:
            admin_client: Transport for Keycloak Admin API calls
        """
        self.admin_client = admin_client
        self.logger = ProvisioningLogger(self.__class__.__name__)
