"""
Azure Network Layer - Virtual Networks and Peering.

Components Managed:
    - Virtual Network A and B: one subnet each, disjoint address spaces
    - Peering A->B (on network A) and B->A (on network B), same name

Peering lifecycle:
    establish_peering() creates both directions with the default flags:
        - Network access enabled
        - Forwarded traffic allowed
        - Gateway transit disabled
        - Remote gateways not used
    narrow_peering() later re-reads the A-side record and updates it in
    place with only allow_virtual_network_access switched off.
"""

from typing import TYPE_CHECKING, Any
import logging

from azure.core.exceptions import (
    HttpResponseError,
    ClientAuthenticationError,
)

from verify_peering.core.context import (
    DEFAULT_PEERING_FLAGS,
    NetworkDefinition,
    PeeringFlags,
)
from verify_peering.core.exceptions import ResourceCreationError

if TYPE_CHECKING:
    from verify_peering.providers.azure.provider import AzureProvider

logger = logging.getLogger(__name__)


# ==========================================
# Virtual Networks
# ==========================================

def create_virtual_network(provider: 'AzureProvider', network: NetworkDefinition) -> Any:
    """
    Create a Virtual Network with a single subnet and wait for it.

    Args:
        provider: Initialized AzureProvider with clients and naming
        network: Address plan of the network

    Returns:
        The created VirtualNetwork model (id, name, subnets, ...)

    Raises:
        ClientAuthenticationError: If permission denied
        ResourceCreationError: If creation fails
    """
    rg_name = provider.naming.resource_group()
    vnet_name = provider.naming.virtual_network(network.label)

    logger.info(f"Creating Virtual Network: {vnet_name} ({network.address_prefix})")

    params = {
        "location": provider.location,
        "address_space": {
            "address_prefixes": [network.address_prefix]
        },
        "subnets": [
            {
                "name": network.subnet_name,
                "address_prefix": network.subnet_prefix,
            }
        ],
    }

    try:
        poller = provider.clients["network"].virtual_networks.begin_create_or_update(
            resource_group_name=rg_name,
            virtual_network_name=vnet_name,
            parameters=params
        )
        vnet = poller.result()
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED creating Virtual Network: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to create Virtual Network: {e.status_code} - {e.message}")
        raise ResourceCreationError("virtual_network", vnet_name, original_error=e) from e

    logger.info(f"✓ Virtual Network created: {vnet.name}")
    return vnet


def get_subnet_id(vnet: Any, subnet_name: str) -> str:
    """
    Return the resource ID of a named subnet of a created network.

    Raises:
        KeyError: If the network has no subnet with that name
    """
    for subnet in vnet.subnets or []:
        if subnet.name == subnet_name:
            return subnet.id
    raise KeyError(f"Subnet '{subnet_name}' not found in Virtual Network '{vnet.name}'")


# ==========================================
# Peering
# ==========================================

def _create_peering_record(
    provider: 'AzureProvider',
    local_vnet: Any,
    remote_vnet: Any,
    peering_name: str,
    flags: PeeringFlags
) -> Any:
    """Create one direction of a peering: a record on local_vnet pointing at remote_vnet."""
    from azure.mgmt.network.models import SubResource, VirtualNetworkPeering

    rg_name = provider.naming.resource_group()

    peering_params = VirtualNetworkPeering(
        allow_virtual_network_access=flags.allow_virtual_network_access,
        allow_forwarded_traffic=flags.allow_forwarded_traffic,
        allow_gateway_transit=flags.allow_gateway_transit,
        use_remote_gateways=flags.use_remote_gateways,
        remote_virtual_network=SubResource(id=remote_vnet.id),
    )

    logger.debug(f"Creating peering {peering_name}: {local_vnet.name} -> {remote_vnet.name}")

    try:
        poller = provider.clients["network"].virtual_network_peerings.begin_create_or_update(
            resource_group_name=rg_name,
            virtual_network_name=local_vnet.name,
            virtual_network_peering_name=peering_name,
            virtual_network_peering_parameters=peering_params
        )
        return poller.result()
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED creating peering on {local_vnet.name}: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to create peering on {local_vnet.name}: {e.status_code} - {e.message}")
        raise ResourceCreationError(
            "virtual_network_peering", f"{local_vnet.name}/{peering_name}", original_error=e
        ) from e


def establish_peering(
    provider: 'AzureProvider',
    vnet_a: Any,
    vnet_b: Any,
    flags: PeeringFlags = DEFAULT_PEERING_FLAGS
) -> Any:
    """
    Peer two virtual networks in both directions.

    Creates a record on A targeting B, then an independent record on B
    targeting A, both under the same peering name, and reads the A-side
    record back.

    Args:
        provider: Initialized AzureProvider with clients and naming
        vnet_a: Created VirtualNetwork A
        vnet_b: Created VirtualNetwork B
        flags: Access/transit flags applied to both directions

    Returns:
        The A-side VirtualNetworkPeering as stored by Azure

    Raises:
        ResourceCreationError: If either direction fails
    """
    peering_name = provider.naming.peering()

    logger.info(
        "Peering the networks using default settings...\n"
        f"- Network access {'enabled' if flags.allow_virtual_network_access else 'disabled'}\n"
        f"- Traffic forwarding {'enabled' if flags.allow_forwarded_traffic else 'disabled'}\n"
        f"- Gateway use (transit) by the remote network {'enabled' if flags.allow_gateway_transit else 'disabled'}"
    )
    logger.info(f"Creating peering between {vnet_a.name} and {vnet_b.name}...")

    _create_peering_record(provider, vnet_a, vnet_b, peering_name, flags)
    _create_peering_record(provider, vnet_b, vnet_a, peering_name, flags)

    peering = get_peering(provider, vnet_a.name, peering_name)
    logger.info(f"✓ Peering created: {peering.name}")
    return peering


def get_peering(provider: 'AzureProvider', vnet_name: str, peering_name: str) -> Any:
    """
    Read a peering record by name.

    Raises:
        azure.core.exceptions.ResourceNotFoundError: If the peering does not exist
    """
    rg_name = provider.naming.resource_group()
    return provider.clients["network"].virtual_network_peerings.get(
        resource_group_name=rg_name,
        virtual_network_name=vnet_name,
        virtual_network_peering_name=peering_name
    )


def narrow_peering(provider: 'AzureProvider', vnet_name: str, peering_name: str) -> Any:
    """
    Revoke network access on an existing peering, in place.

    Only allow_virtual_network_access changes; every other field of the
    stored record is submitted back unchanged. Blocks until the update is
    committed, so probes issued afterwards observe the new state.

    Args:
        provider: Initialized AzureProvider with clients and naming
        vnet_name: Network holding the peering record
        peering_name: Name of the peering record

    Returns:
        The updated VirtualNetworkPeering

    Raises:
        ResourceCreationError: If the update fails
    """
    rg_name = provider.naming.resource_group()

    logger.info(f"Changing the peering to disable access between the networks: {peering_name}")

    peering = get_peering(provider, vnet_name, peering_name)
    peering.allow_virtual_network_access = False

    try:
        poller = provider.clients["network"].virtual_network_peerings.begin_create_or_update(
            resource_group_name=rg_name,
            virtual_network_name=vnet_name,
            virtual_network_peering_name=peering_name,
            virtual_network_peering_parameters=peering
        )
        updated = poller.result()
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED updating peering: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to update peering: {e.status_code} - {e.message}")
        raise ResourceCreationError(
            "virtual_network_peering", f"{vnet_name}/{peering_name}", original_error=e
        ) from e

    logger.info(f"✓ Peering updated: {updated.name}")
    return updated
