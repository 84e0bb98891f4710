from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml

from ppm_core.capabilities.request import UPDATE_PACKAGE_SOURCE_OPTION, HostRequest, option_flag
from ppm_core.providers.models import PackageSource

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "sources.yml"


class SourceAlreadyExistsError(ValueError):
    pass


class SourceMissingError(KeyError):
    pass


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass
class SourceEntry:
    name: str
    location: str
    trusted: bool = False

    @classmethod
    def from_dict(cls, name: str, data: Any) -> "SourceEntry":
        if isinstance(data, str):
            return cls(name=name, location=data)
        if not isinstance(data, Mapping):
            raise ValueError(f"expected mapping for source '{name}'")
        location = data.get("location")
        if not location:
            raise KeyError("location")
        return cls(name=name, location=str(location), trusted=_to_bool(data.get("trusted", False)))

    def to_dict(self) -> dict[str, Any]:
        return {"location": self.location, "trusted": self.trusted}


class YamlSourceProvider:
    """Provider that keeps its package sources in a YAML file.

    The file maps source names to their location and trust flag::

        sources:
          internal:
            location: https://pkgs.example.local/simple
            trusted: true
    """

    def __init__(self, name: str, path: Path | str) -> None:
        self.name = name
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def _load(self) -> dict[str, SourceEntry]:
        if not self.path.exists():
            return {}
        raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"expected mapping in {self.path}")
        sources = raw.get("sources") or {}
        if not isinstance(sources, Mapping):
            raise ValueError(f"expected mapping for 'sources' in {self.path}")
        entries: dict[str, SourceEntry] = {}
        for name, data in sources.items():
            if not isinstance(name, str):
                continue
            try:
                entries[name] = SourceEntry.from_dict(name, data)
            except (KeyError, ValueError):
                logger.warning("skipping malformed source %s in %s", name, self.path)
        return entries

    def _persist(self, entries: Mapping[str, SourceEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"sources": {name: entry.to_dict() for name, entry in entries.items()}}
        self.path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")

    def _to_source(self, entry: SourceEntry) -> PackageSource:
        return PackageSource(
            name=entry.name,
            location=entry.location,
            provider=self,
            is_trusted=entry.trusted,
            is_registered=True,
            details={"file": str(self.path)},
        )

    @staticmethod
    def _find(entries: Mapping[str, SourceEntry], name: str) -> str | None:
        for key in entries:
            if key.casefold() == name.casefold():
                return key
        return None

    def resolve_package_sources(self, suppress_errors_and_warnings: bool) -> Iterator[PackageSource]:
        try:
            entries = self._load()
        except (OSError, yaml.YAMLError, ValueError):
            if not suppress_errors_and_warnings:
                raise
            logger.debug("unable to read %s", self.path, exc_info=True)
            return
        for entry in entries.values():
            yield self._to_source(entry)

    def add_package_source(
        self, name: str, location: str, trusted: bool, request: HostRequest
    ) -> list[PackageSource]:
        is_update = option_flag(request, UPDATE_PACKAGE_SOURCE_OPTION)
        with self._lock:
            entries = self._load()
            existing = self._find(entries, name)
            if existing is not None and not is_update:
                raise SourceAlreadyExistsError(f"source '{name}' already exists in provider '{self.name}'")
            if existing is None and is_update:
                request.warning(f"source '{name}' not found in provider '{self.name}'; registering it")
            key = existing or name
            entries[key] = SourceEntry(name=key, location=location, trusted=bool(trusted))
            self._persist(entries)
            request.verbose(f"{'updated' if is_update else 'registered'} source {key} in {self.path}")
            return [self._to_source(entries[key])]

    def remove_package_source(self, name: str, request: HostRequest) -> Future[None]:
        done: Future[None] = Future()
        with self._lock:
            entries = self._load()
            existing = self._find(entries, name)
            if existing is None:
                done.set_exception(SourceMissingError(f"source '{name}' not found in provider '{self.name}'"))
                return done
            del entries[existing]
            self._persist(entries)
        request.verbose(f"removed source {existing} from {self.path}")
        done.set_result(None)
        return done
