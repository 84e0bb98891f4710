"""Update and rename package sources through their owning provider."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ppm_core.capabilities.composer import CapabilityComposer, CompositeCapability
from ppm_core.capabilities.request import UPDATE_PACKAGE_SOURCE_OPTION, HostRequest, SourceRequest
from ppm_core.config import SourcesConfig
from ppm_core.errors import OperationCancelled
from ppm_core.providers.base import wait_for_completion
from ppm_core.providers.models import PackageSource

from .resolver import SourceResolver

logger = logging.getLogger(__name__)

_REQUEST_COMPOSER = CapabilityComposer(HostRequest)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def with_update_marker(request: HostRequest) -> CompositeCapability:
    """Compose ``request`` with an override that reports ``IsUpdatePackageSource=true``."""

    def get_option_keys() -> list[str]:
        return [*request.get_option_keys(), UPDATE_PACKAGE_SOURCE_OPTION]

    def get_option_values(key: str) -> list[str]:
        if key is not None and key.lower() == UPDATE_PACKAGE_SOURCE_OPTION.lower():
            return ["true"]
        return list(request.get_option_values(key))

    override = {"get_option_keys": get_option_keys, "get_option_values": get_option_values}
    return _REQUEST_COMPOSER.compose(override, request)


class SourceMutator:
    """Applies updates and renames to resolved package sources.

    A rename is an add under the new name followed by a remove of the old one.
    The two steps are not atomic: when the remove fails the provider keeps both
    entries and the remove error is raised, unless ``rollback_on_failure`` asks
    for the new entry to be removed first.
    """

    def __init__(self, resolver: SourceResolver, *, rollback_on_failure: bool = False) -> None:
        self.resolver = resolver
        self.rollback_on_failure = rollback_on_failure

    @classmethod
    def from_config(cls, resolver: SourceResolver, config: SourcesConfig) -> "SourceMutator":
        return cls(resolver, rollback_on_failure=config.rollback_on_rename_failure)

    def _base_request(self, request: HostRequest | None) -> HostRequest:
        if request is not None:
            return request
        return SourceRequest(suppress_errors_and_warnings=self.resolver.suppress_errors_and_warnings)

    def update_source(
        self,
        source: PackageSource,
        new_name: str | None = None,
        new_location: str | None = None,
        trusted: bool | None = None,
        request: HostRequest | None = None,
    ) -> list[PackageSource]:
        base = self._base_request(request)
        location = source.location if _blank(new_location) else new_location
        is_trusted = source.is_trusted if trusted is None else trusted
        provider = source.provider

        if _blank(new_name) or new_name == source.name:
            logger.debug("updating source %s in provider %s", source.name, provider.name)
            return list(
                provider.add_package_source(source.name, location, is_trusted, with_update_marker(base))
            )

        logger.debug("renaming source %s to %s in provider %s", source.name, new_name, provider.name)
        added = list(provider.add_package_source(new_name, location, is_trusted, base))
        if base.is_cancelled():
            raise OperationCancelled(
                f"rename of '{source.name}' cancelled after adding '{new_name}'; "
                f"provider '{provider.name}' now lists both"
            )
        try:
            wait_for_completion(provider.remove_package_source(source.name, base))
        except Exception:
            if not self.rollback_on_failure:
                logger.warning(
                    "removing %s from provider %s failed after adding %s; both sources remain",
                    source.name,
                    provider.name,
                    new_name,
                )
                raise
            logger.warning("removing %s failed, rolling back %s", source.name, new_name)
            try:
                wait_for_completion(provider.remove_package_source(new_name, base))
            except Exception:
                logger.error("rollback of %s in provider %s failed", new_name, provider.name, exc_info=True)
            raise
        return added

    def set_source(
        self,
        name: str | None = None,
        location: str | None = None,
        provider_names: Sequence[str] | None = None,
        new_name: str | None = None,
        new_location: str | None = None,
        trusted: bool | None = None,
        request: HostRequest | None = None,
    ) -> list[PackageSource]:
        """Resolve a source by name/location, then update or rename it."""
        base = self._base_request(request)
        source = self.resolver.resolve(name, location, provider_names, base)
        return self.update_source(source, new_name, new_location, trusted, base)
