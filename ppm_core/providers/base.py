"""Provider contract consumed by the resolver and mutator."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Iterable, Protocol

from ppm_core.capabilities.request import HostRequest

from .models import PackageSource

PROVIDER_OPERATIONS: tuple[str, ...] = (
    "resolve_package_sources",
    "add_package_source",
    "remove_package_source",
)


class PackageProvider(Protocol):
    name: str

    def resolve_package_sources(self, suppress_errors_and_warnings: bool) -> Iterable[PackageSource]: ...

    def add_package_source(
        self, name: str, location: str, trusted: bool, request: HostRequest
    ) -> Iterable[PackageSource]: ...

    def remove_package_source(self, name: str, request: HostRequest) -> Any:
        """Return ``None``, a future-like object or an awaitable signalling completion."""
        ...


def supports(provider: object, operation: str) -> bool:
    """Whether ``provider`` implements ``operation``, one of :data:`PROVIDER_OPERATIONS`."""
    if operation not in PROVIDER_OPERATIONS:
        raise ValueError(f"unknown provider operation '{operation}'")
    return callable(getattr(provider, operation, None))


async def _await(signal: Awaitable[Any]) -> Any:
    return await signal


def wait_for_completion(signal: Any) -> Any:
    """Block until a provider completion signal settles and return its result.

    Errors carried by the signal are raised in the caller's thread. Awaitables
    run on a private event loop, so this must not be called from inside a
    running loop.
    """
    if signal is None:
        return None
    if inspect.isawaitable(signal):
        return asyncio.run(_await(signal))
    result = getattr(signal, "result", None)
    if callable(result):
        return result()
    return signal
