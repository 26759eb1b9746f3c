"""
Azure Setup Layer - Resource Group Management.

The Resource Group is the container for every resource of a run. It is
created first and deleted last; deleting it cascades to everything inside.

Teardown contract:
    destroy_resource_group() never raises. It receives the ProvisionedGroup
    returned by create_resource_group(), or None when the group was never
    created, in which case there is nothing to clean up.
"""

from typing import TYPE_CHECKING, Optional
import logging

from azure.core.exceptions import (
    ResourceNotFoundError,
    HttpResponseError,
    ClientAuthenticationError,
    AzureError
)

from verify_peering.core.context import ProvisionedGroup
from verify_peering.core.exceptions import ResourceCreationError

if TYPE_CHECKING:
    from verify_peering.providers.azure.provider import AzureProvider

logger = logging.getLogger(__name__)


def create_resource_group(provider: 'AzureProvider') -> ProvisionedGroup:
    """
    Create the Resource Group for the run.

    Resource Groups are idempotent: create_or_update on an existing group
    returns it unchanged.

    Args:
        provider: Azure Provider instance with initialized clients

    Returns:
        ProvisionedGroup with the group's name, ID and location

    Raises:
        ClientAuthenticationError: If permission denied
        ResourceCreationError: If creation fails
    """
    rg_name = provider.naming.resource_group()
    location = provider.location

    logger.info(f"Creating Resource Group: {rg_name} in {location}")

    try:
        group = provider.clients["resource"].resource_groups.create_or_update(
            resource_group_name=rg_name,
            parameters={"location": location}
        )
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED creating Resource Group: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to create Resource Group: {e.status_code} - {e.message}")
        raise ResourceCreationError("resource_group", rg_name, original_error=e) from e

    logger.info(f"✓ Resource Group created: {group.name}")
    return ProvisionedGroup(name=group.name, id=group.id, location=group.location)


def destroy_resource_group(provider: 'AzureProvider', group: Optional[ProvisionedGroup]) -> bool:
    """
    Delete the Resource Group and ALL resources within it.

    Errors are logged, never raised, so a failed cleanup cannot hide the
    failure that ended the workflow.

    Args:
        provider: Azure Provider instance
        group: The group created by this run, or None if none was created

    Returns:
        True if the group is gone (deleted now or already), False otherwise
    """
    if group is None:
        logger.info("Did not create any resources in Azure. No clean up is necessary")
        return True

    logger.info(f"Deleting Resource Group: {group.name}")

    try:
        # begin_delete returns a poller for async operation
        poller = provider.clients["resource"].resource_groups.begin_delete(group.name)
        # Wait for completion
        poller.result()
        logger.info(f"✓ Resource Group deleted: {group.name}")
        return True
    except ResourceNotFoundError:
        logger.info(f"Resource Group already deleted: {group.name}")
        return True
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED deleting Resource Group {group.name}: {e.message}")
    except HttpResponseError as e:
        logger.error(f"Failed to delete Resource Group {group.name}: {e.status_code} - {e.message}")
    except AzureError as e:
        logger.error(f"Azure error deleting Resource Group {group.name}: {type(e).__name__}: {e}")
    except Exception as e:
        logger.error(f"Unexpected error deleting Resource Group {group.name}: {type(e).__name__}: {e}")

    logger.warning(f"Resource Group {group.name} may still exist; delete it manually (id: {group.id})")
    return False
