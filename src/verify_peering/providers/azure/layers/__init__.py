"""
Azure workflow steps.

Modules:
    layer_setup_azure: Resource Group create/destroy
    layer_network: Virtual networks and peering
    layer_compute: NICs, virtual machines and the Network Watcher agent
    layer_watcher: Network Watcher lookup and connectivity checks
"""
