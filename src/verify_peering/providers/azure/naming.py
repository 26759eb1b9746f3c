"""
Azure resource naming conventions.

This module generates the randomised, run-scoped names for every Azure
resource the peering workflow creates.

Naming Convention:
    - Resource Group: {prefix}-rg-{suffix}
    - Virtual Network: {prefix}-net{label}-{suffix}   (e.g. peering-netA-1a2b3c)
    - Network Interface: {vm_name}-nic
    - Virtual Machine: {prefix}-vm{index}-{suffix}
    - OS Disk: {vm_name}-osdisk
    - Peering: {prefix}-peer-{suffix}

    A fresh random suffix per run lets repeated runs coexist in the same
    subscription. All names stay within the 64-character limit shared by
    virtual machines, networks and peerings.

Usage:
    from verify_peering.providers.azure.naming import AzureNaming

    naming = AzureNaming("peering")
    rg_name = naming.resource_group()  # "peering-rg-1a2b3c"
"""

import re
import secrets
from typing import Optional

NETWORK_WATCHER_EXTENSION_NAME = "AzureNetworkWatcherExtension"

_MAX_PREFIX_LENGTH = 40


class AzureNaming:
    """
    Generates consistent Azure resource names for one workflow run.

    Attributes:
        prefix: Sanitised name prefix
        suffix: Random hex suffix shared by all names of the run
    """

    def __init__(self, prefix: str, suffix: Optional[str] = None):
        """
        Initialize naming with a prefix and an optional fixed suffix.

        Args:
            prefix: Name prefix (e.g., "peering")
            suffix: Fixed suffix; a random 6-hex-digit suffix when omitted
        """
        sanitized = re.sub(r"[^A-Za-z0-9-]", "", prefix).strip("-")
        self._prefix = (sanitized or "peering")[:_MAX_PREFIX_LENGTH]
        self._suffix = suffix or secrets.token_hex(3)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def suffix(self) -> str:
        return self._suffix

    def resource_group(self) -> str:
        """Resource Group name holding every resource of the run."""
        return f"{self._prefix}-rg-{self._suffix}"

    def virtual_network(self, label: str) -> str:
        """Virtual Network name for network A or B."""
        return f"{self._prefix}-net{label}-{self._suffix}"

    def virtual_machine(self, index: int) -> str:
        """Virtual Machine name; index is 1-based."""
        return f"{self._prefix}-vm{index}-{self._suffix}"

    def network_interface(self, vm_name: str) -> str:
        return f"{vm_name}-nic"

    def os_disk(self, vm_name: str) -> str:
        return f"{vm_name}-osdisk"

    def peering(self) -> str:
        """
        Peering name shared by both directions.

        The A-side record lives on network A and the B-side record on
        network B, so the shared name does not collide.
        """
        return f"{self._prefix}-peer-{self._suffix}"

    def network_watcher(self, region: str) -> str:
        """Default Azure name of the regional Network Watcher."""
        return f"NetworkWatcher_{region}"
