"""
Parameter markers and injection tokens.

Markers are used either inside `Annotated[...]` parameter annotations or in
the `deps` list of a factory provider:

    def make_car(engine: Annotated[Engine, Optional(), SkipSelf()]) -> Car: ...

    FactoryProvider(Car, make_car, deps=[[Engine, Optional(), SkipSelf()]])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .model.dependency import Visibility
from .model.keys import stringify


class InjectionToken:
    """An opaque token for values that have no class of their own."""

    __slots__ = ("description",)

    def __init__(self, description: str):
        self.description = description

    def __str__(self) -> str:
        return f"InjectionToken {self.description}"

    def __repr__(self) -> str:
        return f"InjectionToken({self.description!r})"


@dataclass(frozen=True)
class Inject:
    """Inject the value for `token` instead of the parameter's type."""

    token: Any

    def __str__(self) -> str:
        return f"@Inject({stringify(self.token)})"


@dataclass(frozen=True)
class Optional:
    """Inject None when no provider is found instead of failing."""

    def __str__(self) -> str:
        return "@Optional"


@dataclass(frozen=True)
class Self:
    """Only look the dependency up in the requesting injector."""

    visibility = Visibility.SELF

    def __str__(self) -> str:
        return "@Self"


@dataclass(frozen=True)
class SkipSelf:
    """Start the lookup at the parent of the requesting injector."""

    visibility = Visibility.SKIP_SELF

    def __str__(self) -> str:
        return "@SkipSelf"
