"""
Abstract Injector interface and the null injector.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .errors import NoProviderError
from .model.keys import Key


class _ThrowIfNotFound:
    """Sentinel default for `Injector.get`: raise instead of returning a fallback."""

    def __repr__(self) -> str:
        return "THROW_IF_NOT_FOUND"


THROW_IF_NOT_FOUND: Any = _ThrowIfNotFound()


class Injector(ABC):
    """
    Abstract interface for injectors.

    The `Injector` class is also a token: requesting it from an injector
    returns that injector.
    """

    THROW_IF_NOT_FOUND = THROW_IF_NOT_FOUND

    @abstractmethod
    def get(self, token: Any, not_found_value: Any = THROW_IF_NOT_FOUND) -> Any:
        """
        Get the value provided for a token.

        Args:
            token: The token to resolve
            not_found_value: Returned when no provider exists. When omitted a
                             NoProviderError is raised instead.

        Returns:
            The (cached) value for the token

        Raises:
            NoProviderError: If no provider exists and no fallback was given
            CyclicDependencyError: If the token depends on itself
            InstantiationError: If a factory raised
        """

    @property
    @abstractmethod
    def parent(self) -> Injector | None:
        """Get the parent injector, if any."""

    @staticmethod
    def null() -> Injector:
        """
        The injector at the top of every chain; it provides nothing.

        Returns:
            The NullInjector singleton
        """
        return NullInjector.instance()


class NullInjector(Injector):
    """
    Injector that provides no values.

    This is a singleton that serves as a null object for parent injectors.
    """

    _instance: NullInjector | None = None

    def __init__(self) -> None:
        """Private constructor - use instance() instead."""
        if NullInjector._instance is not None:
            raise RuntimeError("NullInjector is a singleton - use instance() method")

    @classmethod
    def instance(cls) -> NullInjector:
        """Get the singleton null injector instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get(self, token: Any, not_found_value: Any = THROW_IF_NOT_FOUND) -> Any:
        """Null injector cannot provide any values."""
        if not_found_value is THROW_IF_NOT_FOUND:
            raise NoProviderError(self, Key.get(token))
        return not_found_value

    @property
    def parent(self) -> Injector | None:
        """Null injector has no parent."""
        return None

    def __str__(self) -> str:
        return "NullInjector()"
