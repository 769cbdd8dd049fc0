"""
Provider declarations accepted by the resolver.

Besides the dataclasses below a declaration may be a bare class (shorthand for
`ClassProvider(cls, cls)`), a mapping with the same field names, or any of
these wrapped in `forward_ref`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import InvalidProviderError
from .model.keys import stringify


@dataclass(frozen=True)
class ClassProvider:
    """Provide `provide` by constructing `use_class` with injected dependencies."""

    provide: Any
    use_class: Any
    multi: bool = False

    def __str__(self) -> str:
        return f"{stringify(self.provide)} -> class {stringify(self.use_class)}"


@dataclass(frozen=True)
class ValueProvider:
    """Provide `provide` as a fixed value. None is a valid value."""

    provide: Any
    use_value: Any
    multi: bool = False

    def __str__(self) -> str:
        return f"{stringify(self.provide)} -> value {self.use_value!r}"


@dataclass(frozen=True)
class FactoryProvider:
    """
    Provide `provide` by calling `use_factory`.

    Dependencies come from `deps` when given, otherwise from the factory's
    own signature.
    """

    provide: Any
    use_factory: Callable[..., Any]
    deps: Sequence[Any] | None = None
    multi: bool = False

    def __str__(self) -> str:
        return f"{stringify(self.provide)} -> factory {stringify(self.use_factory)}"


@dataclass(frozen=True)
class ExistingProvider:
    """Provide `provide` as an alias of the value provided for `use_existing`."""

    provide: Any
    use_existing: Any
    multi: bool = False

    def __str__(self) -> str:
        return f"{stringify(self.provide)} -> existing {stringify(self.use_existing)}"


Provider = ClassProvider | ValueProvider | FactoryProvider | ExistingProvider

_USE_FIELDS = ("use_class", "use_value", "use_factory", "use_existing")


def provider_from_mapping(mapping: Mapping[str, Any]) -> Provider:
    """
    Convert a `{"provide": ..., "use_*": ...}` mapping into a provider dataclass.

    Exactly one of `use_class`, `use_value`, `use_factory`, `use_existing`
    must be present.
    """
    if "provide" not in mapping:
        raise InvalidProviderError(mapping)

    present = [name for name in _USE_FIELDS if name in mapping]
    if len(present) != 1:
        raise InvalidProviderError(mapping)

    provide = mapping["provide"]
    multi = bool(mapping.get("multi", False))
    match present[0]:
        case "use_class":
            return ClassProvider(provide, mapping["use_class"], multi)
        case "use_value":
            return ValueProvider(provide, mapping["use_value"], multi)
        case "use_factory":
            return FactoryProvider(provide, mapping["use_factory"], mapping.get("deps"), multi)
        case _:
            return ExistingProvider(provide, mapping["use_existing"], multi)
