"""
Azure Setup Layer Tests.

Resource Group creation and the teardown contract:
- Creation returns a ProvisionedGroup and propagates failures
- Teardown with no group is a logged no-op
- Teardown failures are logged, never raised
"""

import logging

import pytest
from unittest.mock import MagicMock
from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)

from verify_peering.core.context import ProvisionedGroup
from verify_peering.core.exceptions import ResourceCreationError
from verify_peering.providers.azure.layers.layer_setup_azure import (
    create_resource_group,
    destroy_resource_group,
)


@pytest.fixture
def group():
    return ProvisionedGroup(
        name="test-rg-abc123",
        id="/subscriptions/test-subscription-123/resourceGroups/test-rg-abc123",
        location="eastus",
    )


class TestCreateResourceGroup:

    def test_create_resource_group_success(self, mock_provider):
        """create_resource_group() should create RG with correct name and location."""
        created = MagicMock()
        created.name = "test-rg-abc123"
        created.id = "/subscriptions/test-subscription-123/resourceGroups/test-rg-abc123"
        created.location = "eastus"
        mock_provider.clients["resource"].resource_groups.create_or_update.return_value = created

        result = create_resource_group(mock_provider)

        assert result == ProvisionedGroup(name=created.name, id=created.id, location="eastus")
        call_args = mock_provider.clients["resource"].resource_groups.create_or_update.call_args
        assert call_args.kwargs["resource_group_name"] == "test-rg-abc123"
        assert call_args.kwargs["parameters"]["location"] == "eastus"

    def test_create_resource_group_http_error_wrapped(self, mock_provider):
        mock_provider.clients["resource"].resource_groups.create_or_update.side_effect = \
            HttpResponseError(message="quota exceeded")

        with pytest.raises(ResourceCreationError) as exc_info:
            create_resource_group(mock_provider)

        assert exc_info.value.resource_name == "test-rg-abc123"
        assert isinstance(exc_info.value.original_error, HttpResponseError)

    def test_create_resource_group_permission_denied_reraised(self, mock_provider):
        mock_provider.clients["resource"].resource_groups.create_or_update.side_effect = \
            ClientAuthenticationError(message="denied")

        with pytest.raises(ClientAuthenticationError):
            create_resource_group(mock_provider)


class TestDestroyResourceGroup:

    def test_destroy_resource_group_success(self, mock_provider, group, caplog):
        """destroy_resource_group() should delete RG and wait for the poller."""
        mock_poller = MagicMock()
        mock_provider.clients["resource"].resource_groups.begin_delete.return_value = mock_poller

        assert destroy_resource_group(mock_provider, group) is True

        mock_provider.clients["resource"].resource_groups.begin_delete.assert_called_once_with("test-rg-abc123")
        mock_poller.result.assert_called_once()
        assert "✓ Resource Group deleted: test-rg-abc123" in caplog.messages

    def test_destroy_without_group_is_noop(self, mock_provider, caplog):
        """No group created means nothing to delete and no error logged."""
        assert destroy_resource_group(mock_provider, None) is True

        mock_provider.clients["resource"].resource_groups.begin_delete.assert_not_called()
        assert "Did not create any resources in Azure. No clean up is necessary" in caplog.messages
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_destroy_not_found_handles_gracefully(self, mock_provider, group, caplog):
        mock_provider.clients["resource"].resource_groups.begin_delete.side_effect = \
            ResourceNotFoundError("Not found")

        assert destroy_resource_group(mock_provider, group) is True
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_destroy_permission_denied_logged_not_raised(self, mock_provider, group, caplog):
        mock_provider.clients["resource"].resource_groups.begin_delete.side_effect = \
            ClientAuthenticationError(message="denied")

        assert destroy_resource_group(mock_provider, group) is False
        assert any("PERMISSION DENIED" in r.message for r in caplog.records if r.levelno == logging.ERROR)

    def test_destroy_poller_failure_logged_not_raised(self, mock_provider, group, caplog):
        """A locked group fails during polling; the error must not propagate."""
        mock_poller = MagicMock()
        mock_poller.result.side_effect = HttpResponseError(message="ScopeLocked")
        mock_provider.clients["resource"].resource_groups.begin_delete.return_value = mock_poller

        assert destroy_resource_group(mock_provider, group) is False
        assert any("ScopeLocked" in r.message for r in caplog.records if r.levelno == logging.ERROR)

    def test_destroy_unexpected_error_logged_not_raised(self, mock_provider, group):
        mock_provider.clients["resource"].resource_groups.begin_delete.side_effect = RuntimeError("boom")

        assert destroy_resource_group(mock_provider, group) is False
