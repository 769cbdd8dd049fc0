"""
Dependency descriptors attached to resolved factories.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .keys import Key


class Visibility(Enum):
    """Where the lookup for a dependency starts and how far it may go."""

    DEFAULT = "default"  # self, then up through the parents
    SELF = "self"  # only the requesting injector
    SKIP_SELF = "skip_self"  # start at the parent


@dataclass(frozen=True)
class Dependency:
    """A single dependency of a resolved factory."""

    key: Key
    optional: bool = False
    visibility: Visibility = Visibility.DEFAULT

    @classmethod
    def from_key(cls, key: Key) -> Dependency:
        """Create a required dependency with default visibility."""
        return cls(key, False, Visibility.DEFAULT)

    def __str__(self) -> str:
        flags = []
        if self.optional:
            flags.append("optional")
        if self.visibility is not Visibility.DEFAULT:
            flags.append(self.visibility.value)
        flags_str = f" [{', '.join(flags)}]" if flags else ""
        return f"{self.key}{flags_str}"
