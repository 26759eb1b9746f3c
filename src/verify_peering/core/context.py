"""
Workflow context and data model classes.

This module holds every value the peering workflow passes between steps.
Nothing is kept in module-level state: provisioning returns a
WorkflowOutcome, and teardown consumes it directly.

Design Pattern: Explicit Result Passing
    - Configuration is loaded into WorkflowConfig at startup
    - WorkflowContext wraps config + credentials
    - ProvisionedGroup exists only once the resource group was created;
      an outcome without one means there is nothing to clean up
"""

import secrets
import string
from dataclasses import dataclass, field
from typing import Dict, Optional

DEFAULT_REGION = "eastus"

PASSWORD_SYMBOLS = "!@#$%*-_"

# Ubuntu 22.04 LTS; SSH (port 22) is enabled by default on the image.
DEFAULT_IMAGE: Dict[str, str] = {
    "publisher": "Canonical",
    "offer": "0001-com-ubuntu-server-jammy",
    "sku": "22_04-lts-gen2",
    "version": "latest",
}


def generate_admin_password(length: int = 20) -> str:
    """
    Generate a VM admin password that satisfies Azure complexity rules.

    Azure requires 12-123 characters containing at least three of: lowercase,
    uppercase, digit, symbol. One of each is always included.
    """
    alphabet = string.ascii_letters + string.digits
    chars = [secrets.choice(alphabet) for _ in range(max(length, 12) - 4)]
    chars += [
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.digits),
        secrets.choice(PASSWORD_SYMBOLS),
    ]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


@dataclass
class AzureCredentials:
    """
    Service principal credentials and target subscription.

    Attributes:
        client_id: Service principal application (client) ID
        client_secret: Service principal secret
        tenant_id: Entra ID tenant ID
        subscription_id: Subscription the workflow deploys into
    """

    client_id: str
    client_secret: str
    tenant_id: str
    subscription_id: str

    def __repr__(self) -> str:
        return (
            f"AzureCredentials(client_id={self.client_id!r}, client_secret='***', "
            f"tenant_id={self.tenant_id!r}, subscription_id={self.subscription_id!r})"
        )


@dataclass
class NetworkDefinition:
    """One virtual network with its single subnet and the VM's private IP."""

    label: str
    address_prefix: str
    subnet_name: str
    subnet_prefix: str
    private_ip: str


DEFAULT_NETWORKS = (
    NetworkDefinition("A", "10.0.0.0/27", "subnetA", "10.0.0.0/27", "10.0.0.8"),
    NetworkDefinition("B", "10.1.0.0/27", "subnetB", "10.1.0.0/27", "10.1.0.8"),
)


@dataclass(frozen=True)
class PeeringFlags:
    """Access/transit flags of a virtual network peering."""

    allow_virtual_network_access: bool
    allow_forwarded_traffic: bool
    allow_gateway_transit: bool
    use_remote_gateways: bool


DEFAULT_PEERING_FLAGS = PeeringFlags(
    allow_virtual_network_access=True,
    allow_forwarded_traffic=True,
    allow_gateway_transit=False,
    use_remote_gateways=False,
)


@dataclass
class WorkflowConfig:
    """
    Parsed workflow configuration.

    Every field has a working default, so the workflow runs with
    credentials alone. A config JSON file may override any field.

    Attributes:
        region: Azure region for all resources
        name_prefix: Prefix for the randomised resource names
        mode: Logging mode ("DEBUG" enables debug output)
        admin_username: VM administrator user name
        admin_password: VM administrator password (generated when not given)
        vm_size: VM size for both machines
        image: Marketplace image reference for both machines
        probe_port: TCP port used by the connectivity checks
        network_watcher_resource_group: Resource group holding the regional watcher
        network_watcher_name: Watcher name (defaults to NetworkWatcher_<region>)
        networks: The two virtual networks to create and peer
    """

    region: str = DEFAULT_REGION
    name_prefix: str = "peering"
    mode: str = "INFO"
    admin_username: str = "azureuser"
    admin_password: str = field(default_factory=generate_admin_password, repr=False)
    vm_size: str = "Standard_B1s"
    image: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_IMAGE))
    probe_port: int = 22
    network_watcher_resource_group: str = "NetworkWatcherRG"
    network_watcher_name: Optional[str] = None
    networks: tuple = DEFAULT_NETWORKS

    @property
    def watcher_name(self) -> str:
        """Name of the regional Network Watcher to look up."""
        return self.network_watcher_name or f"NetworkWatcher_{self.region}"

    @property
    def is_debug(self) -> bool:
        return self.mode.upper() == "DEBUG"


@dataclass
class ProvisionedGroup:
    """A resource group this run created and therefore owns."""

    name: str
    id: str
    location: str


@dataclass
class WatcherRef:
    """Location of the Network Watcher used for connectivity checks."""

    resource_group: str
    name: str
    location: str


@dataclass(frozen=True)
class ConnectivityResult:
    """
    Snapshot of one Network Watcher connectivity check.

    Attributes:
        source_id: Resource ID of the source VM
        destination_id: Resource ID of the destination VM
        port: Destination TCP port
        status: "Reachable", "Unreachable", "Degraded" or "Unknown"
    """

    source_id: str
    destination_id: str
    port: int
    status: str
    avg_latency_ms: Optional[int] = None
    probes_sent: Optional[int] = None
    probes_failed: Optional[int] = None

    @property
    def is_reachable(self) -> bool:
        return self.status == "Reachable"


@dataclass
class WorkflowOutcome:
    """
    Result of the provisioning and probing phase.

    resource_group is None when the group was never created; teardown
    treats that as "nothing to clean up". error holds the exception that
    stopped the workflow, if any.
    """

    resource_group: Optional[ProvisionedGroup] = None
    error: Optional[BaseException] = None
    initial_results: list[ConnectivityResult] = field(default_factory=list)
    final_results: list[ConnectivityResult] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class WorkflowContext:
    """
    Encapsulates all state needed for one workflow run.

    Passed explicitly to the workflow functions in place of globals.
    """

    config: WorkflowConfig
    credentials: AzureCredentials
