"""
Cloud provider implementations for the peering workflow.

Package Structure:
    providers/
    ├── __init__.py
    └── azure/
        ├── provider.py     # AzureProvider: SDK clients + credential preflight
        ├── naming.py       # Resource naming
        └── layers/         # Step implementations (setup, network, compute, watcher)
"""
