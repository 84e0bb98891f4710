"""Provider contract, package source records and the provider registry."""

from .base import PROVIDER_OPERATIONS, PackageProvider, supports, wait_for_completion
from .models import PackageSource
from .registry import ProviderRegistry

__all__ = [
    "PROVIDER_OPERATIONS",
    "PackageProvider",
    "PackageSource",
    "ProviderRegistry",
    "supports",
    "wait_for_completion",
]
