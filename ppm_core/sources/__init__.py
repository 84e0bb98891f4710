"""Source resolution and mutation across providers."""

from .mutator import SourceMutator, with_update_marker
from .resolver import SourceResolver, source_matches

__all__ = [
    "SourceMutator",
    "SourceResolver",
    "source_matches",
    "with_update_marker",
]
