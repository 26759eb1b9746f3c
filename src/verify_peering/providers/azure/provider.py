"""
Azure provider for the peering workflow.

This module owns SDK client initialization, resource naming and the
credential preflight.

SDK Clients Initialized:
    - ResourceManagementClient: For Resource Group management
    - NetworkManagementClient: For VNets, NICs, peerings and Network Watcher
    - ComputeManagementClient: For Virtual Machines and VM extensions
    - SubscriptionClient: For the credential preflight

Usage:
    from verify_peering.providers.azure.provider import AzureProvider

    provider = AzureProvider()
    provider.initialize_clients(credentials, config)
    provider.check_credentials()
    # Access clients: provider.clients["network"], etc.
"""

import logging
from typing import Any, Dict, Optional

from azure.core.exceptions import ClientAuthenticationError, HttpResponseError

from verify_peering.core.context import AzureCredentials, WorkflowConfig
from verify_peering.core.exceptions import AuthenticationError
from verify_peering.providers.azure.naming import AzureNaming

logger = logging.getLogger(__name__)


class AzureProvider:
    """
    Manages Azure SDK clients and resource naming for one workflow run.

    Attributes:
        naming: AzureNaming instance for consistent resource names
        clients: Dictionary of initialized Azure SDK clients
        location: Azure region for deployments
        config: The WorkflowConfig the provider was initialized with
    """

    def __init__(self):
        self._subscription_id: str = ""
        self._location: str = ""
        self._naming: Optional[AzureNaming] = None
        self._config: Optional[WorkflowConfig] = None
        self._clients: Dict[str, Any] = {}
        self._initialized: bool = False

    @property
    def subscription_id(self) -> str:
        """Get the Azure subscription ID."""
        return self._subscription_id

    @property
    def location(self) -> str:
        """Get the Azure region for all resources."""
        return self._location

    @property
    def naming(self) -> AzureNaming:
        """Get the Azure naming instance."""
        if not self._naming:
            raise RuntimeError("Provider not initialized. Call initialize_clients first.")
        return self._naming

    @property
    def config(self) -> WorkflowConfig:
        if not self._config:
            raise RuntimeError("Provider not initialized. Call initialize_clients first.")
        return self._config

    @property
    def clients(self) -> Dict[str, Any]:
        """Get the dictionary of Azure SDK clients."""
        if not self._initialized:
            raise RuntimeError("Provider not initialized. Call initialize_clients first.")
        return self._clients

    def initialize_clients(
        self,
        credentials: AzureCredentials,
        config: WorkflowConfig,
        naming: Optional[AzureNaming] = None
    ) -> None:
        """
        Initialize Azure SDK clients.

        Args:
            credentials: Service principal credentials and subscription ID
            config: Workflow configuration (region, name prefix, ...)
            naming: Optional pre-built naming (a random suffix is used otherwise)

        Raises:
            ValueError: If the subscription ID or region is empty
        """
        if not credentials.subscription_id:
            raise ValueError("Missing required credential 'subscription_id'.")
        if not config.region:
            raise ValueError("Missing required setting 'region'.")

        self._subscription_id = credentials.subscription_id
        self._location = config.region
        self._config = config
        self._naming = naming or AzureNaming(config.name_prefix)

        credential = self._get_credential(credentials)
        self._initialize_sdk_clients(credential)

        self._initialized = True
        logger.debug(
            f"Azure clients initialized for subscription {self._subscription_id} "
            f"in {self._location}"
        )

    def _get_credential(self, credentials: AzureCredentials) -> Any:
        """Get Azure credential for SDK clients."""
        from azure.identity import ClientSecretCredential

        return ClientSecretCredential(
            tenant_id=credentials.tenant_id,
            client_id=credentials.client_id,
            client_secret=credentials.client_secret
        )

    def _initialize_sdk_clients(self, credential: Any) -> None:
        """Initialize all required Azure SDK clients."""
        from azure.mgmt.compute import ComputeManagementClient
        from azure.mgmt.network import NetworkManagementClient
        from azure.mgmt.resource import ResourceManagementClient, SubscriptionClient

        subscription_id = self._subscription_id

        self._clients["resource"] = ResourceManagementClient(credential=credential, subscription_id=subscription_id)
        self._clients["network"] = NetworkManagementClient(credential=credential, subscription_id=subscription_id)
        self._clients["compute"] = ComputeManagementClient(credential=credential, subscription_id=subscription_id)
        self._clients["subscription"] = SubscriptionClient(credential=credential)

    def check_credentials(self) -> dict:
        """
        Validate credentials by resolving the target subscription.

        Runs before any resource is created so a bad service principal
        aborts the workflow with nothing to clean up.

        Returns:
            Dict with subscription_id, display_name and state

        Raises:
            AuthenticationError: If authentication fails or access is denied
        """
        try:
            subscription = self.clients["subscription"].subscriptions.get(self._subscription_id)
        except ClientAuthenticationError as e:
            raise AuthenticationError(f"Authentication failed: {e.message}", original_error=e) from e
        except HttpResponseError as e:
            if e.status_code in (401, 403, 404):
                raise AuthenticationError(
                    f"Service principal cannot access subscription {self._subscription_id}: "
                    f"{e.status_code} - {e.message}",
                    original_error=e
                ) from e
            raise

        logger.info(f"Using subscription: {subscription.display_name} ({subscription.subscription_id})")
        return {
            "subscription_id": subscription.subscription_id,
            "display_name": subscription.display_name,
            "state": str(subscription.state),
        }
