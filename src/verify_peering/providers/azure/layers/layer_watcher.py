"""
Azure Network Watcher Layer - Connectivity Checks.

A subscription has at most one Network Watcher per region. Azure usually
creates it automatically as NetworkWatcher_<region> in NetworkWatcherRG.

Watcher resolution order:
    1. The configured name in the configured resource group
    2. Any existing watcher in the same region (subscription-wide list)
    3. A new watcher in the run's resource group (removed by teardown)
"""

from typing import TYPE_CHECKING, Optional
import logging

from azure.core.exceptions import (
    ResourceNotFoundError,
    HttpResponseError,
    ClientAuthenticationError,
)

from verify_peering.core.context import ConnectivityResult, WatcherRef
from verify_peering.core.exceptions import ConnectivityCheckError, ResourceCreationError

if TYPE_CHECKING:
    from verify_peering.providers.azure.provider import AzureProvider

logger = logging.getLogger(__name__)


def _status_value(status) -> str:
    """Plain string of an SDK enum value (e.g. "Reachable")."""
    return str(getattr(status, "value", status))


def _normalize_location(location: Optional[str]) -> str:
    return (location or "").replace(" ", "").lower()


def _find_watcher_in_region(provider: 'AzureProvider') -> Optional[WatcherRef]:
    """Return any existing watcher in the provider's region, or None."""
    region = _normalize_location(provider.location)
    for watcher in provider.clients["network"].network_watchers.list_all():
        if _normalize_location(watcher.location) == region:
            rg_name = watcher.id.split('/')[4]
            return WatcherRef(resource_group=rg_name, name=watcher.name, location=watcher.location)
    return None


def get_network_watcher(provider: 'AzureProvider') -> WatcherRef:
    """
    Look up the regional Network Watcher, creating one only if none exists.

    Args:
        provider: Initialized AzureProvider with clients, naming and config

    Returns:
        WatcherRef locating the watcher

    Raises:
        ResourceCreationError: If a watcher has to be created and creation fails
    """
    config = provider.config
    watcher_rg = config.network_watcher_resource_group
    watcher_name = config.watcher_name

    logger.info(f"Looking up Network Watcher in {provider.location}...")
    logger.info("To note: one subscription only has a Network Watcher in the same region")

    try:
        watcher = provider.clients["network"].network_watchers.get(
            resource_group_name=watcher_rg,
            network_watcher_name=watcher_name
        )
        logger.info(f"✓ Network Watcher found: {watcher.name}")
        return WatcherRef(resource_group=watcher_rg, name=watcher.name, location=watcher.location)
    except ResourceNotFoundError:
        logger.info(f"Network Watcher {watcher_rg}/{watcher_name} not found, searching region...")

    existing = _find_watcher_in_region(provider)
    if existing:
        logger.info(f"✓ Network Watcher found: {existing.resource_group}/{existing.name}")
        return existing

    rg_name = provider.naming.resource_group()
    new_name = provider.naming.network_watcher(provider.location)
    logger.info(f"Creating Network Watcher: {new_name}")

    try:
        watcher = provider.clients["network"].network_watchers.create_or_update(
            resource_group_name=rg_name,
            network_watcher_name=new_name,
            parameters={"location": provider.location}
        )
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED creating Network Watcher: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to create Network Watcher: {e.status_code} - {e.message}")
        raise ResourceCreationError("network_watcher", new_name, original_error=e) from e

    logger.info(f"✓ Network Watcher created: {watcher.name}")
    return WatcherRef(resource_group=rg_name, name=watcher.name, location=watcher.location)


def check_connectivity(
    provider: 'AzureProvider',
    watcher: WatcherRef,
    source_id: str,
    destination_id: str,
    port: int
) -> ConnectivityResult:
    """
    Run a TCP connectivity check from one VM to another and wait for the verdict.

    Every call issues a new check; results are never reused.

    Args:
        provider: Initialized AzureProvider with clients
        watcher: The regional Network Watcher
        source_id: Resource ID of the source VM (agent installed)
        destination_id: Resource ID of the destination VM
        port: Destination TCP port

    Returns:
        ConnectivityResult snapshot

    Raises:
        ClientAuthenticationError: If permission denied
        ConnectivityCheckError: If the check request fails
    """
    from azure.mgmt.network.models import (
        ConnectivityDestination,
        ConnectivityParameters,
        ConnectivitySource,
    )

    params = ConnectivityParameters(
        source=ConnectivitySource(resource_id=source_id),
        destination=ConnectivityDestination(resource_id=destination_id, port=port),
    )

    logger.debug(f"Checking connectivity {source_id} -> {destination_id}:{port}")

    try:
        poller = provider.clients["network"].network_watchers.begin_check_connectivity(
            resource_group_name=watcher.resource_group,
            network_watcher_name=watcher.name,
            parameters=params
        )
        info = poller.result()
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED running connectivity check: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Connectivity check failed: {e.status_code} - {e.message}")
        raise ConnectivityCheckError(source_id, destination_id, original_error=e) from e

    return ConnectivityResult(
        source_id=source_id,
        destination_id=destination_id,
        port=port,
        status=_status_value(info.connection_status),
        avg_latency_ms=info.avg_latency_in_ms,
        probes_sent=info.probes_sent,
        probes_failed=info.probes_failed,
    )
