"""Resource providers for weestack."""

from weestack.providers.base import BaseProvider, ProviderStatus
from weestack.providers.registry import ProviderRegistry

__all__ = [
    "BaseProvider",
    "ProviderStatus",
    "ProviderRegistry",
]
