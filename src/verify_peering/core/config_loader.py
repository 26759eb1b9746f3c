"""
Configuration loading utilities.

This module provides functions to load the service principal credentials
and the optional workflow configuration file.

Sources:
    1. Environment: CLIENT_ID, CLIENT_SECRET, TENANT_ID, SUBSCRIPTION_ID
       (or a config_credentials_azure.json file when given explicitly)
    2. config.json - Optional overrides for any WorkflowConfig field
    3. Environment: VM_ADMIN_PASSWORD - Optional fixed VM admin password

Usage:
    from verify_peering.core.config_loader import load_credentials, load_workflow_config

    credentials = load_credentials()
    config = load_workflow_config(Path("config.json"))
"""

import ipaddress
import json
import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .context import AzureCredentials, NetworkDefinition, WorkflowConfig
from .exceptions import ConfigurationError

# Environment variable -> AzureCredentials field
CREDENTIAL_ENV_VARS = {
    "CLIENT_ID": "client_id",
    "CLIENT_SECRET": "client_secret",
    "TENANT_ID": "tenant_id",
    "SUBSCRIPTION_ID": "subscription_id",
}

# Credentials file key -> AzureCredentials field
CREDENTIAL_FILE_KEYS = {
    "azure_client_id": "client_id",
    "azure_client_secret": "client_secret",
    "azure_tenant_id": "tenant_id",
    "azure_subscription_id": "subscription_id",
}

ADMIN_PASSWORD_ENV_VAR = "VM_ADMIN_PASSWORD"

_REQUIRED_TEXT_FIELDS = (
    "region",
    "name_prefix",
    "mode",
    "admin_username",
    "admin_password",
    "vm_size",
    "network_watcher_resource_group",
)


def _load_json_file(file_path: Path) -> Dict[str, Any]:
    """
    Load a JSON file and return its contents as a dictionary.

    Raises:
        ConfigurationError: If file is missing or has invalid JSON
    """
    if not file_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {file_path.name}",
            config_file=str(file_path)
        )

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in configuration file: {e}",
            config_file=str(file_path)
        )

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Configuration file must contain a JSON object",
            config_file=str(file_path)
        )
    return data


def load_credentials(
    credentials_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None
) -> AzureCredentials:
    """
    Load the service principal credentials.

    Args:
        credentials_path: Optional JSON file with azure_* keys. When given,
            the environment is not consulted.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        AzureCredentials with all four values

    Raises:
        ConfigurationError: If any value is missing or empty
    """
    if credentials_path is not None:
        raw = _load_json_file(credentials_path)
        mapping = CREDENTIAL_FILE_KEYS
        source = str(credentials_path)
    else:
        raw = os.environ if environ is None else environ
        mapping = CREDENTIAL_ENV_VARS
        source = None

    values = {}
    missing = []
    for key, attr in mapping.items():
        value = raw.get(key)
        if not value:
            missing.append(key)
        else:
            values[attr] = str(value).strip()

    if missing:
        raise ConfigurationError(
            f"Missing required credentials: {', '.join(missing)}",
            config_file=source
        )

    return AzureCredentials(**values)


def _parse_network(raw: Any, index: int, config_file: Optional[str]) -> NetworkDefinition:
    required = ["label", "address_prefix", "subnet_name", "subnet_prefix", "private_ip"]
    if not isinstance(raw, dict):
        raise ConfigurationError(f"networks[{index}] must be an object", config_file)
    missing = [key for key in required if key not in raw]
    if missing:
        raise ConfigurationError(
            f"networks[{index}] is missing: {', '.join(missing)}", config_file
        )
    return NetworkDefinition(**{key: str(raw[key]) for key in required})


def validate_networks(networks, config_file: Optional[str] = None) -> None:
    """
    Check the address plan of the two virtual networks.

    Each subnet must lie inside its network, each private IP inside its
    subnet, and the two networks must not overlap, or peering them is
    meaningless.

    Raises:
        ConfigurationError: On any malformed or overlapping range
    """
    if len(networks) != 2:
        raise ConfigurationError(
            f"Exactly two networks are required, got {len(networks)}", config_file
        )

    parsed = []
    for net in networks:
        try:
            address_space = ipaddress.ip_network(net.address_prefix)
            subnet = ipaddress.ip_network(net.subnet_prefix)
            private_ip = ipaddress.ip_address(net.private_ip)
        except ValueError as e:
            raise ConfigurationError(f"Network {net.label}: {e}", config_file)

        if not subnet.subnet_of(address_space):
            raise ConfigurationError(
                f"Network {net.label}: subnet {subnet} is not within {address_space}",
                config_file
            )
        if private_ip not in subnet:
            raise ConfigurationError(
                f"Network {net.label}: private IP {private_ip} is not within {subnet}",
                config_file
            )
        parsed.append(address_space)

    if parsed[0].overlaps(parsed[1]):
        raise ConfigurationError(
            f"Address spaces {parsed[0]} and {parsed[1]} overlap", config_file
        )

    if networks[0].label == networks[1].label:
        raise ConfigurationError("Network labels must be distinct", config_file)


def load_workflow_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None
) -> WorkflowConfig:
    """
    Build the WorkflowConfig from defaults, an optional file and the environment.

    Args:
        config_path: Optional JSON file overriding WorkflowConfig fields
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated WorkflowConfig

    Raises:
        ConfigurationError: If the file is invalid, contains unknown keys or
            holds a value of the wrong type

    Example:
        config = load_workflow_config(Path("config.json"))
        print(config.region)  # "eastus"
    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    config_file = str(config_path) if config_path is not None else None

    if config_path is not None:
        overrides = _load_json_file(config_path)
        known = {f.name for f in fields(WorkflowConfig)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}", config_file
            )
        if "networks" in overrides:
            raw_networks = overrides["networks"]
            if not isinstance(raw_networks, list):
                raise ConfigurationError("networks must be a list", config_file)
            overrides["networks"] = tuple(
                _parse_network(raw, i, config_file) for i, raw in enumerate(raw_networks)
            )

    if environ.get(ADMIN_PASSWORD_ENV_VAR):
        overrides["admin_password"] = environ[ADMIN_PASSWORD_ENV_VAR]

    config = WorkflowConfig(**overrides)

    for name in _REQUIRED_TEXT_FIELDS:
        value = getattr(config, name)
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(
                f"{name} must be a non-empty string, got {value!r}", config_file
            )
    if config.network_watcher_name is not None and not isinstance(config.network_watcher_name, str):
        raise ConfigurationError(
            f"network_watcher_name must be a string, got {config.network_watcher_name!r}",
            config_file
        )
    if not isinstance(config.image, dict):
        raise ConfigurationError(f"image must be an object, got {config.image!r}", config_file)

    port = config.probe_port
    if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
        raise ConfigurationError(
            f"probe_port must be between 1 and 65535, got {config.probe_port!r}",
            config_file
        )
    validate_networks(config.networks, config_file)

    return config
