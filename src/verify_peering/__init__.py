"""
Verify virtual network peering with Azure Network Watcher.

Provisions two peered virtual networks with one VM each, checks TCP
connectivity between the VMs before and after revoking peering access,
and deletes everything it created.
"""

__version__ = "0.1.0"
