"""
Azure Provider package.
"""

from .naming import AzureNaming
from .provider import AzureProvider

__all__ = ["AzureNaming", "AzureProvider"]
