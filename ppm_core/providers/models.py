from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from .base import PackageProvider


def _same_text(left: str | None, right: str | None) -> bool:
    if left is None or right is None:
        return False
    return left.casefold() == right.casefold()


@dataclass(frozen=True, eq=False)
class PackageSource:
    """A named, located repository entry owned by exactly one provider.

    Two records are the same source when they belong to the same provider and
    share a name (case-insensitive).
    """

    name: str
    location: str
    provider: "PackageProvider" = field(repr=False)
    is_trusted: bool = False
    is_registered: bool = True
    details: Mapping[str, str] = field(default_factory=dict)

    @property
    def provider_name(self) -> str:
        return str(self.provider.name)

    @property
    def key(self) -> tuple[str, str]:
        return self.provider_name.casefold(), self.name.casefold()

    def matches_name(self, name: str | None) -> bool:
        return _same_text(self.name, name)

    def matches_location(self, location: str | None) -> bool:
        return _same_text(self.location, location)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageSource):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)
