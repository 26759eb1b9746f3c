"""
Core abstractions for the peering verification workflow.

Modules:
    context: Data model and WorkflowContext for explicit result passing
    config_loader: Credential and configuration loading
    exceptions: Custom exception types for workflow operations
"""

from .context import (
    AzureCredentials,
    ConnectivityResult,
    NetworkDefinition,
    PeeringFlags,
    ProvisionedGroup,
    WatcherRef,
    WorkflowConfig,
    WorkflowContext,
    WorkflowOutcome,
)
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConnectivityCheckError,
    ResourceCreationError,
    WorkflowError,
)

__all__ = [
    # Context
    "AzureCredentials",
    "ConnectivityResult",
    "NetworkDefinition",
    "PeeringFlags",
    "ProvisionedGroup",
    "WatcherRef",
    "WorkflowConfig",
    "WorkflowContext",
    "WorkflowOutcome",
    # Exceptions
    "AuthenticationError",
    "ConfigurationError",
    "ConnectivityCheckError",
    "ResourceCreationError",
    "WorkflowError",
]
