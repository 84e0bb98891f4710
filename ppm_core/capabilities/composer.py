"""Per-operation composition of capability objects.

A composite is built from an ordered list of objects. For every operation of
the capability interface the first object that supplies a compatible callable
wins; the base object goes last and acts as the fallback. The lookup table is
computed once, when the composite is constructed.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from ppm_core.errors import CapabilityConfigurationError

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_FRAMEWORK_MODULES = frozenset({"builtins", "typing", "typing_extensions"})


def interface_operations(interface: type) -> dict[str, int]:
    """Map each public operation of ``interface`` to its positional arity (``self`` excluded)."""
    operations: dict[str, int] = {}
    for klass in reversed(interface.__mro__):
        if klass.__module__ in _FRAMEWORK_MODULES:
            continue
        for name, member in vars(klass).items():
            if name.startswith("_") or not inspect.isfunction(member):
                continue
            params = list(inspect.signature(member).parameters.values())[1:]
            operations[name] = sum(1 for param in params if param.kind in _POSITIONAL)
    return operations


def _lookup(candidate: object, name: str) -> Any:
    if isinstance(candidate, Mapping):
        return candidate.get(name)
    return getattr(candidate, name, None)


def _compatible(member: Callable[..., Any], arity: int) -> bool:
    try:
        signature = inspect.signature(member)
    except (TypeError, ValueError):
        # Some builtins expose no signature; trust the name match.
        return True
    try:
        signature.bind(*([None] * arity))
    except TypeError:
        return False
    return True


class CompositeCapability:
    """Capability surface whose operations were picked from several objects."""

    def __init__(
        self,
        interface: type,
        table: Mapping[str, Callable[..., Any]],
        origins: Mapping[str, object],
    ) -> None:
        self._interface = interface
        self._origins = dict(origins)
        self.__dict__.update(table)

    @property
    def interface(self) -> type:
        return self._interface

    def implementation_of(self, operation: str) -> object:
        """Return the capability object that supplies ``operation``."""
        try:
            return self._origins[operation]
        except KeyError:
            raise KeyError(f"'{operation}' is not an operation of {self._interface.__name__}") from None

    def __repr__(self) -> str:
        return f"<CompositeCapability {self._interface.__name__}>"


# Operations with these names would be shadowed by CompositeCapability itself.
_COMPOSITE_MEMBERS = frozenset(name for name in vars(CompositeCapability) if not name.startswith("_"))


class CapabilityComposer:
    """Builds composites for one capability interface."""

    def __init__(self, interface: type) -> None:
        self.interface = interface
        self.operations = interface_operations(interface)
        if not self.operations:
            raise CapabilityConfigurationError(interface, ())
        reserved = tuple(name for name in self.operations if name in _COMPOSITE_MEMBERS)
        if reserved:
            raise CapabilityConfigurationError(interface, (), reserved=reserved)

    def compose(self, *capability_objects: object) -> CompositeCapability:
        """Compose ``capability_objects`` in precedence order; the last one is the base."""
        table: dict[str, Callable[..., Any]] = {}
        origins: dict[str, object] = {}
        missing: list[str] = []
        for name, arity in self.operations.items():
            for candidate in capability_objects:
                if candidate is None:
                    continue
                member = _lookup(candidate, name)
                if member is None or not callable(member):
                    continue
                if not _compatible(member, arity):
                    logger.debug("skipping %s.%s: signature does not take %s argument(s)", type(candidate).__name__, name, arity)
                    continue
                table[name] = member
                origins[name] = candidate
                break
            else:
                missing.append(name)
        if missing:
            raise CapabilityConfigurationError(self.interface, tuple(missing))
        logger.debug(
            "composed %s: %s",
            self.interface.__name__,
            ", ".join(f"{name}<-{type(origin).__name__}" for name, origin in origins.items()),
        )
        return CompositeCapability(self.interface, table, origins)


def compose(interface: type, *capability_objects: object) -> CompositeCapability:
    return CapabilityComposer(interface).compose(*capability_objects)
