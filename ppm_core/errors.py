"""Error types raised by the package-source coordination layer."""

from __future__ import annotations

from enum import Enum


class PpmError(Exception):
    """Base class for all ppm errors."""


class SourceErrorKind(str, Enum):
    NAME_OR_LOCATION_REQUIRED = "NameOrLocationRequired"
    UNABLE_TO_FIND_PROVIDER_FOR_SOURCE = "UnableToFindProviderForSource"
    UNKNOWN_PROVIDER = "UnknownProvider"
    SOURCE_NOT_FOUND = "SourceNotFound"
    SOURCE_FOUND_IN_MULTIPLE_PROVIDERS = "SourceFoundInMultipleProviders"

    @property
    def template(self) -> str:
        return _TEMPLATES[self]


_TEMPLATES: dict[SourceErrorKind, str] = {
    SourceErrorKind.NAME_OR_LOCATION_REQUIRED: "a source name or location is required",
    SourceErrorKind.UNABLE_TO_FIND_PROVIDER_FOR_SOURCE: "unable to find a package provider for source '{0}'",
    SourceErrorKind.UNKNOWN_PROVIDER: "unknown package provider '{0}'",
    SourceErrorKind.SOURCE_NOT_FOUND: "unable to find package source '{0}'",
    SourceErrorKind.SOURCE_FOUND_IN_MULTIPLE_PROVIDERS: (
        "package source '{0}' exists in multiple providers ({1}); specify a provider name"
    ),
}


class PackageSourceError(PpmError):
    """Structured, user-facing resolution failure: an error kind plus its format arguments."""

    def __init__(self, kind: SourceErrorKind, *args: object) -> None:
        self.kind = kind
        self.format_args = args
        self.message = kind.template.format(*("" if arg is None else arg for arg in args))
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"PackageSourceError({self.kind.value!r}, {', '.join(repr(arg) for arg in self.format_args)})"


class CapabilityConfigurationError(PpmError):
    """Raised when a composite cannot implement every operation of its interface."""

    def __init__(
        self, interface: type, missing: tuple[str, ...], *, reserved: tuple[str, ...] = ()
    ) -> None:
        self.interface = interface
        self.missing = missing
        self.reserved = reserved
        if reserved:
            message = f"{interface.__name__} declares operations reserved by the composite: {', '.join(reserved)}"
        elif missing:
            message = f"no implementation for {', '.join(missing)} required by {interface.__name__}"
        else:
            message = f"{interface.__name__} declares no operations"
        super().__init__(message)


class OperationCancelled(PpmError):
    """Raised between provider calls once the caller requested a stop."""


class ProviderRegistrationError(PpmError):
    """Raised when two providers register under the same name."""
