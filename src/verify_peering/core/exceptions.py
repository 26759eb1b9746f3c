"""
Custom exceptions for the peering verification workflow.

This module defines a hierarchy of exceptions used throughout the workflow
to provide clear, actionable error messages.

Exception Hierarchy:
    WorkflowError (base)
    ├── ConfigurationError - Invalid or missing configuration/credentials
    ├── AuthenticationError - Credentials rejected by Azure
    ├── ResourceCreationError - Failed to create or update a cloud resource
    └── ConnectivityCheckError - Network Watcher connectivity check failed
"""

from typing import Optional


class WorkflowError(Exception):
    """
    Base exception for all workflow-related errors.

    Attributes:
        message: Human-readable error description
        step: Optional workflow step where the error occurred
    """

    def __init__(self, message: str, step: Optional[str] = None):
        self.message = message
        self.step = step

        if step:
            full_message = f"{message} [step={step}]"
        else:
            full_message = message

        super().__init__(full_message)


class ConfigurationError(WorkflowError):
    """
    Raised when configuration is invalid or missing required fields.

    This typically occurs when:
    - A credential environment variable is unset
    - A config file is missing or has invalid JSON
    - The two virtual networks have overlapping address spaces

    Example:
        >>> load_credentials(environ={})
        ConfigurationError: Missing required credentials: CLIENT_ID, CLIENT_SECRET, ...
    """

    def __init__(self, message: str, config_file: Optional[str] = None):
        self.config_file = config_file
        if config_file:
            message = f"{message} (file: {config_file})"
        super().__init__(message, step="configuration")


class AuthenticationError(WorkflowError):
    """
    Raised when the service principal cannot access the target subscription.

    Raised by the credential preflight, before any resource is created.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(message, step="authentication")


class ResourceCreationError(WorkflowError):
    """
    Raised when a cloud resource fails to create or update.

    This wraps Azure SDK errors with additional context about
    what resource was being created.

    Attributes:
        resource_type: Type of resource (e.g., "virtual_network", "virtual_machine")
        resource_name: Name of the resource that failed
        original_error: The underlying SDK exception
    """

    def __init__(
        self,
        resource_type: str,
        resource_name: str,
        original_error: Optional[Exception] = None
    ):
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.original_error = original_error

        message = f"Failed to create {resource_type} '{resource_name}'"
        if original_error:
            message += f": {str(original_error)}"

        super().__init__(message, step=resource_type)


class ConnectivityCheckError(WorkflowError):
    """
    Raised when Network Watcher cannot run a connectivity check.

    A verdict of "Unreachable" is a result, not an error; this is raised
    only when the check request itself fails.
    """

    def __init__(
        self,
        source_id: str,
        destination_id: str,
        original_error: Optional[Exception] = None
    ):
        self.source_id = source_id
        self.destination_id = destination_id
        self.original_error = original_error

        message = f"Connectivity check failed from '{source_id}' to '{destination_id}'"
        if original_error:
            message += f": {str(original_error)}"

        super().__init__(message, step="connectivity_check")
