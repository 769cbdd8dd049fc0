"""
Errors raised while resolving providers and instantiating dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from .model.keys import Key, stringify

if TYPE_CHECKING:
    from .injector_base import Injector
    from .model.resolved import ResolvedProvider


class DIError(Exception):
    """Base class for all dependency injection errors."""


class InvalidProviderError(DIError):
    """Raised when a declaration is neither a class nor a provider."""

    def __init__(self, provider: Any):
        self.provider = provider
        super().__init__(
            f"Invalid provider - only instances of Provider and Type are allowed, got: {provider}"
        )


class MixingMultiProvidersError(DIError):
    """Raised when multi and regular declarations target the same key."""

    def __init__(self, existing: ResolvedProvider, provider: ResolvedProvider):
        self.key = provider.key
        self.existing = existing
        self.provider = provider
        super().__init__(
            f"Cannot mix multi providers and regular providers, got: {existing} {provider}"
        )


class NoAnnotationError(DIError):
    """Raised when a parameter of a class or function has no usable dependency hint."""

    def __init__(self, type_or_func: Any, params: Sequence[Sequence[Any] | None]):
        self.type_or_func = type_or_func
        self.params = list(params)
        signature = ", ".join(
            "?" if not param else " ".join(stringify(p) for p in param) for param in self.params
        )
        name = stringify(type_or_func)
        super().__init__(
            f"Cannot resolve all parameters for '{name}'({signature}). "
            "Make sure that all the parameters are decorated with Inject or have valid type "
            f"annotations and that '{name}' is decorated with Injectable."
        )


class OutOfBoundsError(DIError):
    """Raised when a provider index is outside an injector's table."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Index {index} is out-of-bounds.")


def find_first_closed_cycle(keys: Sequence[Key]) -> list[Key]:
    """Cut a key path right after the first key that repeats."""
    result: list[Key] = []
    for key in keys:
        if key in result:
            result.append(key)
            return result
        result.append(key)
    return result


def construct_resolving_path(keys: Sequence[Key]) -> str:
    """
    Render the path from the requested key to the failing one.

    `keys` is ordered from the failing key up to the requested key. A single
    key renders as an empty string.
    """
    if len(keys) > 1:
        path = find_first_closed_cycle(list(reversed(keys)))
        return " (" + " -> ".join(stringify(key.token) for key in path) + ")"
    return ""


class ResolutionError(DIError):
    """
    Base for errors raised while an injector resolves a key.

    The error is created where resolution fails and every injector it passes
    through on the way back to the caller prepends the key it was building,
    so the message always shows the complete path.
    """

    def __init__(self, injector: Injector, key: Key):
        self.keys: list[Key] = [key]
        self.injectors: list[Injector] = [injector]
        super().__init__(self._construct_message())

    def add_key(self, injector: Injector, key: Key) -> None:
        self.injectors.append(injector)
        self.keys.append(key)
        self.args = (self._construct_message(),)

    @property
    def key(self) -> Key:
        """The key that failed."""
        return self.keys[0]

    def _construct_message(self) -> str:
        raise NotImplementedError


class NoProviderError(ResolutionError):
    """Raised when no injector in the visible chain has a provider for a key."""

    def _construct_message(self) -> str:
        return f"No provider for {stringify(self.keys[0].token)}!{construct_resolving_path(self.keys)}"


class CyclicDependencyError(ResolutionError):
    """Raised when a key is requested again while it is still being built."""

    def _construct_message(self) -> str:
        return f"Cannot instantiate cyclic dependency!{construct_resolving_path(self.keys)}"


class InstantiationError(ResolutionError):
    """Raised when a factory or constructor itself fails."""

    def __init__(self, injector: Injector, original_error: BaseException, key: Key):
        self.original_error = original_error
        super().__init__(injector, key)

    @property
    def cause_key(self) -> Key:
        """The key whose factory raised."""
        return self.keys[0]

    def _construct_message(self) -> str:
        return (
            f"Error during instantiation of {stringify(self.keys[0].token)}!"
            f"{construct_resolving_path(self.keys)}"
        )


def get_original_error(error: BaseException) -> BaseException | None:
    """The exception a factory raised, if `error` wraps one."""
    if isinstance(error, InstantiationError):
        return error.original_error
    return None
