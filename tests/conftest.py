import logging
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from verify_peering.core.context import AzureCredentials, WorkflowConfig, WorkflowContext
from verify_peering.providers.azure.naming import AzureNaming

SUBSCRIPTION = "/subscriptions/test-subscription-123"


@pytest.fixture(scope="function", autouse=True)
def mock_env_vars(monkeypatch):
    """Set fake credentials to prevent accidental cloud calls."""
    monkeypatch.setenv("CLIENT_ID", "testing-client")
    monkeypatch.setenv("CLIENT_SECRET", "testing-secret")
    monkeypatch.setenv("TENANT_ID", "testing-tenant")
    monkeypatch.setenv("SUBSCRIPTION_ID", "test-subscription-123")
    monkeypatch.delenv("VM_ADMIN_PASSWORD", raising=False)


@pytest.fixture(autouse=True)
def capture_workflow_logs(caplog):
    """Make package INFO records visible to caplog."""
    caplog.set_level(logging.INFO, logger="verify_peering")
    return caplog


@pytest.fixture
def workflow_config():
    return WorkflowConfig(admin_password="Test-Passw0rd!")


@pytest.fixture
def workflow_context(workflow_config):
    credentials = AzureCredentials(
        client_id="testing-client",
        client_secret="testing-secret",
        tenant_id="testing-tenant",
        subscription_id="test-subscription-123",
    )
    return WorkflowContext(config=workflow_config, credentials=credentials)


@pytest.fixture
def mock_provider(workflow_config):
    """Create a mock AzureProvider with real naming and mocked SDK clients."""
    provider = MagicMock()
    provider.subscription_id = "test-subscription-123"
    provider.location = "eastus"
    provider.config = workflow_config
    provider.naming = AzureNaming("test", suffix="abc123")
    provider.clients = {
        "resource": MagicMock(),
        "network": MagicMock(),
        "compute": MagicMock(),
        "subscription": MagicMock(),
    }
    return provider


def make_poller(result):
    """LROPoller stand-in whose result() returns the given value."""
    poller = MagicMock()
    poller.result.return_value = result
    return poller


def resource_id(rg_name, provider_type, name):
    return f"{SUBSCRIPTION}/resourceGroups/{rg_name}/providers/{provider_type}/{name}"


@pytest.fixture
def fake_azure(mock_provider):
    """
    Wire the mocked SDK clients so every operation succeeds.

    Returned objects carry name/id like the SDK models. Connectivity checks
    return "Reachable" until fake_azure.statuses is changed.
    """
    clients = mock_provider.clients
    state = SimpleNamespace(statuses=["Reachable", "Reachable", "Unreachable", "Unreachable"])

    def create_group(resource_group_name, parameters):
        return SimpleNamespace(
            name=resource_group_name,
            id=f"{SUBSCRIPTION}/resourceGroups/{resource_group_name}",
            location=parameters["location"],
        )

    def create_vnet(resource_group_name, virtual_network_name, parameters):
        vnet_id = resource_id(resource_group_name, "Microsoft.Network/virtualNetworks", virtual_network_name)
        subnets = [
            SimpleNamespace(name=s["name"], id=f"{vnet_id}/subnets/{s['name']}")
            for s in parameters["subnets"]
        ]
        return make_poller(SimpleNamespace(name=virtual_network_name, id=vnet_id, subnets=subnets))

    def create_nic(resource_group_name, network_interface_name, parameters):
        nic_id = resource_id(resource_group_name, "Microsoft.Network/networkInterfaces", network_interface_name)
        return make_poller(SimpleNamespace(name=network_interface_name, id=nic_id))

    def create_vm(resource_group_name, vm_name, parameters):
        vm_id = resource_id(resource_group_name, "Microsoft.Compute/virtualMachines", vm_name)
        return make_poller(SimpleNamespace(name=vm_name, id=vm_id))

    def create_peering(resource_group_name, virtual_network_name,
                       virtual_network_peering_name, virtual_network_peering_parameters):
        return make_poller(SimpleNamespace(name=virtual_network_peering_name))

    def get_peering(resource_group_name, virtual_network_name, virtual_network_peering_name):
        from azure.mgmt.network.models import SubResource, VirtualNetworkPeering

        peering = VirtualNetworkPeering(
            allow_virtual_network_access=True,
            allow_forwarded_traffic=True,
            allow_gateway_transit=False,
            use_remote_gateways=False,
            remote_virtual_network=SubResource(id="remote-vnet-id"),
        )
        peering.name = virtual_network_peering_name
        return peering

    def check(resource_group_name, network_watcher_name, parameters):
        status = state.statuses.pop(0)
        return make_poller(SimpleNamespace(
            connection_status=status,
            avg_latency_in_ms=1 if status == "Reachable" else None,
            probes_sent=30,
            probes_failed=0 if status == "Reachable" else 30,
        ))

    clients["resource"].resource_groups.create_or_update.side_effect = create_group
    clients["resource"].resource_groups.begin_delete.return_value = make_poller(None)
    clients["network"].virtual_networks.begin_create_or_update.side_effect = create_vnet
    clients["network"].network_interfaces.begin_create_or_update.side_effect = create_nic
    clients["compute"].virtual_machines.begin_create_or_update.side_effect = create_vm
    clients["compute"].virtual_machine_extensions.begin_create_or_update.return_value = make_poller(
        SimpleNamespace(name="AzureNetworkWatcherExtension")
    )
    clients["network"].virtual_network_peerings.begin_create_or_update.side_effect = create_peering
    clients["network"].virtual_network_peerings.get.side_effect = get_peering
    clients["network"].network_watchers.get.return_value = SimpleNamespace(
        name="NetworkWatcher_eastus", location="eastus"
    )
    clients["network"].network_watchers.begin_check_connectivity.side_effect = check

    state.provider = mock_provider
    state.clients = clients
    return state
