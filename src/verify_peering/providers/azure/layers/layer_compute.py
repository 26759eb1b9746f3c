"""
Azure Compute Layer - Virtual Machines.

Components Managed:
    - Network Interface: bound to the network's subnet, static private IP
    - Virtual Machine: Linux VM from the configured marketplace image
    - Network Watcher agent extension: required by connectivity checks

Note:
    A VM without the Network Watcher agent cannot be the source of a
    connectivity check, so provision_virtual_machine() always installs it
    before returning.
"""

from typing import TYPE_CHECKING, Any
import logging

from azure.core.exceptions import (
    HttpResponseError,
    ClientAuthenticationError,
)

from verify_peering.core.context import NetworkDefinition
from verify_peering.core.exceptions import ResourceCreationError
from verify_peering.providers.azure.naming import NETWORK_WATCHER_EXTENSION_NAME

if TYPE_CHECKING:
    from verify_peering.providers.azure.provider import AzureProvider

logger = logging.getLogger(__name__)

NETWORK_WATCHER_EXTENSION_PUBLISHER = "Microsoft.Azure.NetworkWatcher"
NETWORK_WATCHER_EXTENSION_TYPE = "NetworkWatcherAgentLinux"
NETWORK_WATCHER_EXTENSION_VERSION = "1.4"


def create_network_interface(
    provider: 'AzureProvider',
    vm_name: str,
    subnet_id: str,
    private_ip: str
) -> Any:
    """
    Create the VM's Network Interface in the given subnet.

    Args:
        provider: Initialized AzureProvider with clients and naming
        vm_name: Name of the VM the NIC belongs to
        subnet_id: Resource ID of the subnet
        private_ip: Static private IP address within the subnet

    Returns:
        The created NetworkInterface model

    Raises:
        ClientAuthenticationError: If permission denied
        ResourceCreationError: If creation fails
    """
    rg_name = provider.naming.resource_group()
    nic_name = provider.naming.network_interface(vm_name)

    logger.info(f"Creating Network Interface: {nic_name} ({private_ip})")

    params = {
        "location": provider.location,
        "ip_configurations": [
            {
                "name": "ipconfig1",
                "subnet": {"id": subnet_id},
                "private_ip_allocation_method": "Static",
                "private_ip_address": private_ip,
            }
        ],
    }

    try:
        poller = provider.clients["network"].network_interfaces.begin_create_or_update(
            resource_group_name=rg_name,
            network_interface_name=nic_name,
            parameters=params
        )
        nic = poller.result()
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED creating Network Interface: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to create Network Interface: {e.status_code} - {e.message}")
        raise ResourceCreationError("network_interface", nic_name, original_error=e) from e

    logger.debug(f"Network Interface created: {nic.id}")
    return nic


def create_virtual_machine(provider: 'AzureProvider', vm_name: str, nic_id: str) -> Any:
    """
    Create a Linux Virtual Machine attached to an existing NIC.

    Args:
        provider: Initialized AzureProvider with clients and naming
        vm_name: Name of the VM
        nic_id: Resource ID of its primary Network Interface

    Returns:
        The created VirtualMachine model

    Raises:
        ClientAuthenticationError: If permission denied
        ResourceCreationError: If creation fails
    """
    rg_name = provider.naming.resource_group()
    config = provider.config

    logger.info(f"Creating Virtual Machine: {vm_name} ({config.vm_size})")

    # REST wire shape: camelCase keys nested under "properties".
    params = {
        "location": provider.location,
        "properties": {
            "hardwareProfile": {"vmSize": config.vm_size},
            "storageProfile": {
                "imageReference": dict(config.image),
                "osDisk": {
                    "name": provider.naming.os_disk(vm_name),
                    "createOption": "FromImage",
                    "caching": "ReadWrite",
                    "managedDisk": {"storageAccountType": "Standard_LRS"},
                },
            },
            "osProfile": {
                "computerName": vm_name,
                "adminUsername": config.admin_username,
                "adminPassword": config.admin_password,
                "linuxConfiguration": {"disablePasswordAuthentication": False},
            },
            "networkProfile": {
                "networkInterfaces": [{"id": nic_id, "properties": {"primary": True}}]
            },
        },
    }

    try:
        poller = provider.clients["compute"].virtual_machines.begin_create_or_update(
            resource_group_name=rg_name,
            vm_name=vm_name,
            parameters=params
        )
        vm = poller.result()
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED creating Virtual Machine: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to create Virtual Machine: {e.status_code} - {e.message}")
        raise ResourceCreationError("virtual_machine", vm_name, original_error=e) from e

    return vm


def install_network_watcher_extension(provider: 'AzureProvider', vm_name: str) -> Any:
    """
    Install the Network Watcher agent extension on a VM.

    Raises:
        ClientAuthenticationError: If permission denied
        ResourceCreationError: If installation fails
    """
    rg_name = provider.naming.resource_group()

    logger.info(f"Installing {NETWORK_WATCHER_EXTENSION_NAME} on {vm_name}")

    extension_params = {
        "location": provider.location,
        "properties": {
            "publisher": NETWORK_WATCHER_EXTENSION_PUBLISHER,
            "type": NETWORK_WATCHER_EXTENSION_TYPE,
            "typeHandlerVersion": NETWORK_WATCHER_EXTENSION_VERSION,
            "autoUpgradeMinorVersion": True,
        },
    }

    try:
        poller = provider.clients["compute"].virtual_machine_extensions.begin_create_or_update(
            resource_group_name=rg_name,
            vm_name=vm_name,
            vm_extension_name=NETWORK_WATCHER_EXTENSION_NAME,
            extension_parameters=extension_params
        )
        extension = poller.result()
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED installing VM extension: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to install VM extension on {vm_name}: {e.status_code} - {e.message}")
        raise ResourceCreationError(
            "vm_extension", f"{vm_name}/{NETWORK_WATCHER_EXTENSION_NAME}", original_error=e
        ) from e

    return extension


def provision_virtual_machine(
    provider: 'AzureProvider',
    index: int,
    network: NetworkDefinition,
    subnet_id: str
) -> Any:
    """
    Create NIC, VM and Network Watcher agent for one network, in order.

    Args:
        provider: Initialized AzureProvider with clients and naming
        index: 1-based VM number (used for its name)
        network: The network the VM is placed in
        subnet_id: Resource ID of that network's subnet

    Returns:
        The created VirtualMachine model, agent installed
    """
    vm_name = provider.naming.virtual_machine(index)

    nic = create_network_interface(provider, vm_name, subnet_id, network.private_ip)
    vm = create_virtual_machine(provider, vm_name, nic.id)
    install_network_watcher_extension(provider, vm_name)

    logger.info(f"✓ Virtual Machine created: {vm.name}")
    return vm
