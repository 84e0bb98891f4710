"""Request surface handed to providers on every add/remove call."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from typing import Protocol

logger = logging.getLogger(__name__)

UPDATE_PACKAGE_SOURCE_OPTION = "IsUpdatePackageSource"


class HostRequest(Protocol):
    """Operations a provider may call back on the caller while it works."""

    def get_option_keys(self) -> Sequence[str]: ...

    def get_option_values(self, key: str) -> Sequence[str]: ...

    def is_cancelled(self) -> bool: ...

    def warning(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...


class SourceRequest:
    """Default request implementation backed by an options mapping.

    Option keys are matched case-insensitively; a scalar option value is
    exposed as a one-item list.
    """

    def __init__(
        self,
        options: Mapping[str, str | Sequence[str]] | None = None,
        *,
        suppress_errors_and_warnings: bool = False,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.options: dict[str, list[str]] = {}
        for key, value in (options or {}).items():
            if isinstance(value, str):
                self.options[str(key)] = [value]
            else:
                self.options[str(key)] = [str(item) for item in value]
        self.suppress_errors_and_warnings = suppress_errors_and_warnings
        self._cancel_event = cancel_event or threading.Event()

    def get_option_keys(self) -> Sequence[str]:
        return list(self.options)

    def get_option_values(self, key: str) -> Sequence[str]:
        if key is None:
            return []
        for name, values in self.options.items():
            if name.lower() == key.lower():
                return list(values)
        return []

    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        self._cancel_event.set()

    def warning(self, message: str) -> None:
        if not self.suppress_errors_and_warnings:
            logger.warning(message)

    def verbose(self, message: str) -> None:
        logger.debug(message)


def option_flag(request: HostRequest, key: str) -> bool:
    """Return True when ``request`` carries ``key`` with a truthy value."""
    keys = {str(item).lower() for item in request.get_option_keys()}
    if key.lower() not in keys:
        return False
    values = request.get_option_values(key)
    return any(str(value).strip().lower() in {"1", "true", "yes", "on"} for value in values)
