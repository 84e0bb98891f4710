"""Registry of the package providers known to this process."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ppm_core.config import SourcesConfig
from ppm_core.errors import ProviderRegistrationError

from .base import PackageProvider, supports

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Append-only, name-keyed collection of providers.

    Names are unique case-insensitively and keep their registration order.
    The registry is passed explicitly to resolvers and mutators.
    """

    def __init__(self, providers: Iterable[PackageProvider] = ()) -> None:
        self._providers: dict[str, PackageProvider] = {}
        for provider in providers:
            self.register(provider)

    @classmethod
    def from_config(cls, providers: Iterable[PackageProvider], config: SourcesConfig) -> "ProviderRegistry":
        allowed = {name.casefold() for name in config.providers}
        if not allowed:
            return cls(providers)
        selected = []
        for provider in providers:
            if str(provider.name).casefold() in allowed:
                selected.append(provider)
            else:
                logger.debug("provider %s disabled by configuration", provider.name)
        return cls(selected)

    def register(self, provider: PackageProvider) -> None:
        name = str(getattr(provider, "name", "") or "").strip()
        if not name:
            raise ProviderRegistrationError("provider has no name")
        if name.casefold() in self._providers:
            raise ProviderRegistrationError(f"provider '{name}' is already registered")
        self._providers[name.casefold()] = provider
        logger.debug("registered provider %s", name)

    @property
    def names(self) -> list[str]:
        return [str(provider.name) for provider in self._providers.values()]

    def get(self, name: str) -> PackageProvider | None:
        if not name:
            return None
        return self._providers.get(name.strip().casefold())

    def select(
        self,
        provider_names: Iterable[str] | None = None,
        *,
        operation: str | None = None,
    ) -> list[PackageProvider]:
        """Return the providers named in ``provider_names`` (all when empty) that support ``operation``."""
        requested = [name for name in (provider_names or ()) if name and name.strip()]
        if requested:
            candidates: list[PackageProvider] = []
            for name in requested:
                provider = self.get(name)
                if provider is not None and provider not in candidates:
                    candidates.append(provider)
        else:
            candidates = list(self._providers.values())
        if operation is None:
            return candidates
        return [provider for provider in candidates if supports(provider, operation)]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[PackageProvider]:
        return iter(list(self._providers.values()))

    def __len__(self) -> int:
        return len(self._providers)
