"""Resolve which provider owns a source named by name and/or location."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ppm_core.capabilities.request import HostRequest
from ppm_core.errors import OperationCancelled, PackageSourceError, SourceErrorKind
from ppm_core.providers.base import PackageProvider
from ppm_core.providers.models import PackageSource
from ppm_core.providers.registry import ProviderRegistry
from ppm_core.sequences import MemoizingSequence

logger = logging.getLogger(__name__)

RESOLVE_OPERATION = "resolve_package_sources"


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def source_matches(
    source: PackageSource,
    name: str | None,
    location: str | None,
    *,
    match_all: bool = False,
) -> bool:
    """Return True when a registered ``source`` satisfies the name/location filters.

    By default either set filter is enough: a source whose location matches is
    kept even when its name does not. ``match_all`` requires every set filter
    to match.
    """
    if not source.is_registered:
        return False
    checks: list[bool] = []
    if not _blank(name):
        checks.append(source.matches_name(name))
    if not _blank(location):
        checks.append(source.matches_location(location))
    if not checks:
        return False
    return all(checks) if match_all else any(checks)


class SourceResolver:
    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        suppress_errors_and_warnings: bool = False,
        match_all: bool = False,
    ) -> None:
        self.registry = registry
        self.suppress_errors_and_warnings = suppress_errors_and_warnings
        self.match_all = match_all

    def candidate_providers(
        self,
        name: str | None,
        location: str | None,
        provider_names: Sequence[str] | None = None,
    ) -> list[PackageProvider]:
        requested = [item for item in (provider_names or ()) if item and item.strip()]
        providers = self.registry.select(requested, operation=RESOLVE_OPERATION)
        if providers:
            return providers
        if requested:
            raise PackageSourceError(SourceErrorKind.UNKNOWN_PROVIDER, requested[0])
        raise PackageSourceError(SourceErrorKind.UNABLE_TO_FIND_PROVIDER_FOR_SOURCE, name or location)

    def provider_sources(
        self,
        provider: PackageProvider,
        cache: dict[str, MemoizingSequence[PackageSource]] | None = None,
    ) -> MemoizingSequence[PackageSource]:
        """Memoized ``resolve_package_sources`` output, reused through ``cache`` when given."""
        key = str(provider.name).casefold()
        if cache is not None and key in cache:
            return cache[key]
        sources = MemoizingSequence(provider.resolve_package_sources(self.suppress_errors_and_warnings))
        if cache is not None:
            cache[key] = sources
        return sources

    def find_sources(
        self,
        name: str | None = None,
        location: str | None = None,
        provider_names: Sequence[str] | None = None,
        request: HostRequest | None = None,
    ) -> list[PackageSource]:
        """Every registered source matching the filters, across the candidate providers."""
        if _blank(name) and _blank(location):
            raise PackageSourceError(SourceErrorKind.NAME_OR_LOCATION_REQUIRED)
        providers = self.candidate_providers(name, location, provider_names)
        cache: dict[str, MemoizingSequence[PackageSource]] = {}
        matches: list[PackageSource] = []
        for provider in providers:
            if request is not None and request.is_cancelled():
                raise OperationCancelled("source resolution cancelled")
            sources = self.provider_sources(provider, cache)
            found = [
                source
                for source in sources
                if source_matches(source, name, location, match_all=self.match_all)
            ]
            logger.debug("provider %s: %d matching source(s)", provider.name, len(found))
            matches.extend(found)
        return matches

    def resolve(
        self,
        name: str | None = None,
        location: str | None = None,
        provider_names: Sequence[str] | None = None,
        request: HostRequest | None = None,
    ) -> PackageSource:
        """Return the single source matching the filters, or raise ``PackageSourceError``."""
        matches = self.find_sources(name, location, provider_names, request)
        label = name if not _blank(name) else location
        if not matches:
            raise PackageSourceError(SourceErrorKind.SOURCE_NOT_FOUND, label)
        if len(matches) > 1:
            raise PackageSourceError(
                SourceErrorKind.SOURCE_FOUND_IN_MULTIPLE_PROVIDERS,
                label,
                ", ".join(_distinct_provider_names(matches)),
            )
        return matches[0]


def _distinct_provider_names(sources: Iterable[PackageSource]) -> list[str]:
    names: list[str] = []
    for source in sources:
        if source.provider_name not in names:
            names.append(source.provider_name)
    return names
