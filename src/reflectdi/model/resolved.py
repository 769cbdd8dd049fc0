"""
Normalized provider structures produced by the resolver.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .dependency import Dependency
from .keys import Key


@dataclass(frozen=True)
class ResolvedFactory:
    """A factory function together with the dependencies it must be called with."""

    factory: Callable[..., Any]
    dependencies: tuple[Dependency, ...] = ()


@dataclass(frozen=True)
class ResolvedProvider:
    """
    Everything an injector needs to produce the value for one key.

    A regular provider holds exactly one factory. A multi provider holds one
    factory per contributing declaration, in declaration order, and produces
    a list of their results.
    """

    key: Key
    resolved_factories: tuple[ResolvedFactory, ...] = field(default_factory=tuple)
    multi_provider: bool = False

    @property
    def resolved_factory(self) -> ResolvedFactory:
        """The first (for regular providers, the only) factory."""
        return self.resolved_factories[0]

    def with_factories(self, factories: tuple[ResolvedFactory, ...]) -> ResolvedProvider:
        """Copy of this provider with a different factory list."""
        return ResolvedProvider(self.key, factories, self.multi_provider)

    def __str__(self) -> str:
        multi_str = " (multi)" if self.multi_provider else ""
        return f"ResolvedProvider[{self.key}{multi_str}]"
