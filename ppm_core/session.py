"""Wire configuration, registry, resolver and mutator for one workspace."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .capabilities.request import SourceRequest
from .config import SourcesConfig, load_sources_config
from .providers.base import PackageProvider
from .providers.registry import ProviderRegistry
from .sources.mutator import SourceMutator
from .sources.resolver import SourceResolver


@dataclass(frozen=True)
class SourceSession:
    config: SourcesConfig
    registry: ProviderRegistry
    resolver: SourceResolver
    mutator: SourceMutator

    @classmethod
    def open(cls, workspace_root: Path, providers: Iterable[PackageProvider]) -> "SourceSession":
        config = load_sources_config(workspace_root)
        registry = ProviderRegistry.from_config(providers, config)
        resolver = SourceResolver(
            registry,
            suppress_errors_and_warnings=config.suppress_errors_and_warnings,
            match_all=config.match_all_filters,
        )
        return cls(
            config=config,
            registry=registry,
            resolver=resolver,
            mutator=SourceMutator.from_config(resolver, config),
        )

    def new_request(self, **options: str) -> SourceRequest:
        return SourceRequest(options, suppress_errors_and_warnings=self.config.suppress_errors_and_warnings)
