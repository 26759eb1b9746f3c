"""
Unit tests for Azure naming conventions.

Tests the AzureNaming class to ensure resource names are run-scoped and
follow Azure naming rules.
"""

import re

from verify_peering.providers.azure.naming import AzureNaming


class TestAzureNaming:
    """Tests for AzureNaming class."""

    def test_resource_group_name_format(self):
        """resource_group() should return {prefix}-rg-{suffix}."""
        naming = AzureNaming("peering", suffix="abc123")
        assert naming.resource_group() == "peering-rg-abc123"

    def test_virtual_network_names_differ_per_label(self):
        naming = AzureNaming("peering", suffix="abc123")
        assert naming.virtual_network("A") == "peering-netA-abc123"
        assert naming.virtual_network("B") == "peering-netB-abc123"

    def test_virtual_machine_and_dependents(self):
        naming = AzureNaming("peering", suffix="abc123")
        vm_name = naming.virtual_machine(2)
        assert vm_name == "peering-vm2-abc123"
        assert naming.network_interface(vm_name) == "peering-vm2-abc123-nic"
        assert naming.os_disk(vm_name) == "peering-vm2-abc123-osdisk"

    def test_peering_name_shared_by_both_directions(self):
        naming = AzureNaming("peering", suffix="abc123")
        assert naming.peering() == "peering-peer-abc123"

    def test_network_watcher_default_name(self):
        naming = AzureNaming("peering")
        assert naming.network_watcher("eastus") == "NetworkWatcher_eastus"

    def test_random_suffix_is_six_hex_digits(self):
        """Without a fixed suffix, names should end in a random hex suffix."""
        naming = AzureNaming("peering")
        assert re.fullmatch(r"[0-9a-f]{6}", naming.suffix)
        assert naming.resource_group().endswith(naming.suffix)

    def test_prefix_is_sanitized(self):
        """Characters Azure rejects in resource names should be dropped."""
        naming = AzureNaming("my peering!/demo", suffix="abc123")
        assert naming.prefix == "mypeeringdemo"

    def test_empty_prefix_falls_back_to_default(self):
        naming = AzureNaming("***", suffix="abc123")
        assert naming.prefix == "peering"

    def test_names_stay_within_64_characters(self):
        naming = AzureNaming("x" * 100)
        assert len(naming.virtual_network("A")) <= 64
        assert len(naming.virtual_machine(1)) <= 64
        assert len(naming.peering()) <= 64
