"""
Peering Verification - CLI Entry Point.

Usage:
    verify-peering [--config config.json] [--credentials creds.json] [--region eastus] [--debug]
    python -m verify_peering ...

Credentials are read from CLIENT_ID, CLIENT_SECRET, TENANT_ID and
SUBSCRIPTION_ID unless --credentials is given.
"""

import argparse
import sys
from pathlib import Path

from azure.core.exceptions import AzureError

from verify_peering.core.config_loader import load_credentials, load_workflow_config
from verify_peering.core.context import WorkflowContext
from verify_peering.core.exceptions import AuthenticationError, ConfigurationError
from verify_peering.logger import configure_logger, logger, print_stack_trace
from verify_peering.providers.azure.provider import AzureProvider
from verify_peering.workflow import run_workflow


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="verify-peering",
        description="Verify VNet peering connectivity with Azure Network Watcher",
    )
    parser.add_argument("--config", type=Path, help="Workflow config JSON file")
    parser.add_argument("--credentials", type=Path, help="Azure credentials JSON file (default: environment)")
    parser.add_argument("--region", help="Azure region (overrides the config file)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    """Main entry point; returns the process exit status."""
    args = build_parser().parse_args(argv)
    configure_logger(debug=args.debug)

    try:
        config = load_workflow_config(args.config)
        if args.region:
            config.region = args.region
        configure_logger(mode=config.mode, debug=args.debug)
        credentials = load_credentials(args.credentials)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    context = WorkflowContext(config=config, credentials=credentials)

    provider = AzureProvider()
    try:
        provider.initialize_clients(context.credentials, context.config)
        provider.check_credentials()
    except (AuthenticationError, AzureError, ValueError) as e:
        logger.error(f"Authentication error: {e}")
        print_stack_trace()
        return 1

    try:
        outcome = run_workflow(context, provider)
    except (Exception, KeyboardInterrupt):
        # Already logged by the workflow before teardown.
        return 1

    for label, results in (("Before", outcome.initial_results), ("After", outcome.final_results)):
        summary = ", ".join(r.status for r in results)
        logger.info(f"{label} narrowing the peering: {summary}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
