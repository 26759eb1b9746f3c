"""
Peering Verification Workflow - Orchestration Logic.

Sequences the Azure layers and passes every intermediate result
explicitly. The provisioning phase returns a WorkflowOutcome; the teardown
phase consumes it.

Workflow Order:
    1. Resource Group
    2. Virtual Networks A and B
    3. Virtual Machines 1 (in A) and 2 (in B), Network Watcher agent on each
    4. Peering A<->B (access enabled)
    5. Connectivity checks A->B, B->A
    6. Narrow peering (access disabled)
    7. Connectivity checks A->B, B->A (fresh requests)
    8. Teardown: delete the Resource Group (always)

Failure Handling:
    Any error in steps 1-7 stops provisioning and is stored in the outcome.
    Teardown then runs unconditionally and never raises; run_workflow()
    re-raises the stored error afterwards.
"""

from typing import TYPE_CHECKING, Any
import logging

from verify_peering.core.context import ConnectivityResult, WatcherRef, WorkflowOutcome
from verify_peering.logger import print_stack_trace
from verify_peering.providers.azure.layers.layer_compute import provision_virtual_machine
from verify_peering.providers.azure.layers.layer_network import (
    create_virtual_network,
    establish_peering,
    get_subnet_id,
    narrow_peering,
)
from verify_peering.providers.azure.layers.layer_setup_azure import (
    create_resource_group,
    destroy_resource_group,
)
from verify_peering.providers.azure.layers.layer_watcher import (
    check_connectivity,
    get_network_watcher,
)

if TYPE_CHECKING:
    from verify_peering.core.context import WorkflowContext
    from verify_peering.providers.azure.provider import AzureProvider

logger = logging.getLogger(__name__)


def probe_both_directions(
    provider: 'AzureProvider',
    watcher: WatcherRef,
    vm_a: Any,
    vm_b: Any,
    port: int,
    labels: tuple = ("A", "B")
) -> list[ConnectivityResult]:
    """
    Check connectivity A->B then B->A and log each verdict.

    Returns:
        [A->B result, B->A result]
    """
    label_a, label_b = labels
    results = []
    for source, destination, src_label, dst_label in (
        (vm_a, vm_b, label_a, label_b),
        (vm_b, vm_a, label_b, label_a),
    ):
        result = check_connectivity(provider, watcher, source.id, destination.id, port)
        logger.info(f"Connectivity from {src_label} to {dst_label}: {result.status}")
        results.append(result)
    return results


def provision_and_probe(context: 'WorkflowContext', provider: 'AzureProvider') -> WorkflowOutcome:
    """
    Run steps 1-7 and return what was created and observed.

    Never raises for errors inside the steps: the error is logged and
    returned in the outcome so teardown can still run.

    Args:
        context: Workflow context with configuration
        provider: Azure Provider instance with initialized clients

    Returns:
        WorkflowOutcome; resource_group is None if the group was never created
    """
    config = context.config
    outcome = WorkflowOutcome()
    net_a, net_b = config.networks
    labels = (net_a.label, net_b.label)

    logger.info(f"========== Peering Verification: {provider.naming.resource_group()} ==========")

    try:
        # 1. Resource Group (must be first)
        logger.info("Step 1/7: Creating Resource Group...")
        outcome.resource_group = create_resource_group(provider)

        # 2. Virtual Networks
        logger.info("Step 2/7: Creating Virtual Networks...")
        vnet_a = create_virtual_network(provider, net_a)
        vnet_b = create_virtual_network(provider, net_b)

        # 3. Virtual Machines, one per network
        logger.info("Step 3/7: Creating Virtual Machines...")
        vm_a = provision_virtual_machine(provider, 1, net_a, get_subnet_id(vnet_a, net_a.subnet_name))
        vm_b = provision_virtual_machine(provider, 2, net_b, get_subnet_id(vnet_b, net_b.subnet_name))

        # 4. Peering
        logger.info("Step 4/7: Peering the Virtual Networks...")
        peering = establish_peering(provider, vnet_a, vnet_b)

        # 5. Connectivity with access enabled
        logger.info("Step 5/7: Checking connectivity through the peering...")
        watcher = get_network_watcher(provider)
        outcome.initial_results = probe_both_directions(
            provider, watcher, vm_a, vm_b, config.probe_port, labels
        )

        # 6. Narrow the peering
        logger.info("Step 6/7: Disabling access on the peering...")
        narrow_peering(provider, vnet_a.name, peering.name)

        # 7. Connectivity with access disabled
        logger.info(
            "Step 7/7: Peering configuration changed.\n"
            f"Now, {net_a.label} should be unreachable from {net_b.label}, "
            f"and {net_b.label} should be unreachable from {net_a.label}..."
        )
        outcome.final_results = probe_both_directions(
            provider, watcher, vm_a, vm_b, config.probe_port, labels
        )
    except (Exception, KeyboardInterrupt) as e:
        logger.error(f"Workflow failed: {type(e).__name__}: {e}")
        print_stack_trace()
        outcome.error = e
        return outcome

    logger.info(f"========== Peering Verification Complete: {outcome.resource_group.name} ==========")
    return outcome


def teardown(provider: 'AzureProvider', outcome: WorkflowOutcome) -> bool:
    """
    Delete everything the run created.

    Args:
        provider: Azure Provider instance
        outcome: Result of provision_and_probe()

    Returns:
        True if nothing is left behind
    """
    logger.info("========== Cleaning up ==========")
    return destroy_resource_group(provider, outcome.resource_group)


def run_workflow(context: 'WorkflowContext', provider: 'AzureProvider') -> WorkflowOutcome:
    """
    Provision, probe, and always tear down.

    Returns:
        The WorkflowOutcome of a successful run

    Raises:
        The error that stopped provisioning, after teardown has run
    """
    outcome = provision_and_probe(context, provider)
    teardown(provider, outcome)

    if outcome.error is not None:
        raise outcome.error
    return outcome
