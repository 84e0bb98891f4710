"""Coordination layer between a command surface and package providers."""

from .capabilities import CapabilityComposer, HostRequest, SourceRequest, compose
from .config import SourcesConfig, load_sources_config
from .errors import (
    CapabilityConfigurationError,
    OperationCancelled,
    PackageSourceError,
    PpmError,
    ProviderRegistrationError,
    SourceErrorKind,
)
from .providers import PackageProvider, PackageSource, ProviderRegistry
from .sequences import MemoizingSequence, memoize
from .sources import SourceMutator, SourceResolver

__all__ = [
    "CapabilityComposer",
    "CapabilityConfigurationError",
    "HostRequest",
    "MemoizingSequence",
    "OperationCancelled",
    "PackageProvider",
    "PackageSource",
    "PackageSourceError",
    "PpmError",
    "ProviderRegistrationError",
    "ProviderRegistry",
    "SourceErrorKind",
    "SourceMutator",
    "SourceRequest",
    "SourceResolver",
    "SourcesConfig",
    "compose",
    "load_sources_config",
    "memoize",
]
