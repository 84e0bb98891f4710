"""File-backed package source provider."""

from .provider import (
    DEFAULT_FILENAME,
    SourceAlreadyExistsError,
    SourceEntry,
    SourceMissingError,
    YamlSourceProvider,
)

__all__ = [
    "DEFAULT_FILENAME",
    "SourceAlreadyExistsError",
    "SourceEntry",
    "SourceMissingError",
    "YamlSourceProvider",
]
