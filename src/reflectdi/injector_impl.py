"""
Concrete implementation of Injector.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

from .errors import (
    CyclicDependencyError,
    InstantiationError,
    InvalidProviderError,
    NoProviderError,
    OutOfBoundsError,
    ResolutionError,
)
from .injector_base import THROW_IF_NOT_FOUND, Injector
from .introspection import Reflector, default_reflector
from .model.dependency import Dependency, Visibility
from .model.keys import Key, KeyRegistry, default_registry
from .model.resolved import ResolvedFactory, ResolvedProvider
from .resolver import merge_resolved_providers, resolve_providers

logger = logging.getLogger(__name__)


class _Slot(Enum):
    UNINSTANTIATED = "uninstantiated"
    IN_PROGRESS = "in_progress"  # cycle marker while the value is being built
    NOT_FOUND = "not_found"  # no provider in this injector's table


UNINSTANTIATED = _Slot.UNINSTANTIATED
IN_PROGRESS = _Slot.IN_PROGRESS
_NOT_FOUND = _Slot.NOT_FOUND


class ReflectiveInjector(Injector):
    """
    Injector that builds values from ResolvedProviders on demand.

    Each value is built at most once per injector and cached. Keys missing
    from this injector's table are looked up in the parent chain; a provider
    found in an ancestor is built by that ancestor, so its dependencies are
    resolved from the ancestor's point of view and never see the child's
    providers.

    Example:
        ```python
        injector = ReflectiveInjector.resolve_and_create([Engine, Car])
        car = injector.get(Car)

        child = injector.resolve_and_create_child([
            ClassProvider(Engine, TurboEngine),
        ])
        child.get(Engine)  # TurboEngine, built and cached by the child
        child.get(Car)     # the parent's Car, built with the parent's Engine
        ```
    """

    def __init__(
        self,
        providers: Iterable[ResolvedProvider],
        parent: Injector | None = None,
        registry: KeyRegistry | None = None,
        reflector: Reflector | None = None,
    ):
        """
        Create a new ReflectiveInjector.

        Args:
            providers: Resolved providers, usually from `ReflectiveInjector.resolve`
            parent: Optional parent injector consulted for keys this one lacks
            registry: Registry the providers' keys came from. Children and
                      parents share it; defaults to the process-wide one.
            reflector: Reflector used by `resolve_and_create_child` and
                       `resolve_and_instantiate`
        """
        self._parent = parent
        self._registry = registry or _inherit(parent, "_registry") or default_registry()
        self._reflector = reflector or _inherit(parent, "_reflector") or default_reflector()
        # Duplicate keys collapse the same way resolve() merges them
        self._providers: list[ResolvedProvider] = list(merge_resolved_providers(providers).values())
        self._providers_by_key_id: dict[int, ResolvedProvider] = {
            provider.key.id: provider for provider in self._providers
        }
        self._instances: dict[int, Any] = dict.fromkeys(self._providers_by_key_id, UNINSTANTIATED)

        logger.debug("Created %s", self)

    @classmethod
    def resolve(
        cls,
        providers: Iterable[Any],
        reflector: Reflector | None = None,
        registry: KeyRegistry | None = None,
    ) -> list[ResolvedProvider]:
        """Normalize a possibly nested list of declarations into ResolvedProviders."""
        return resolve_providers(providers, reflector, registry)

    @classmethod
    def resolve_and_create(
        cls,
        providers: Iterable[Any],
        parent: Injector | None = None,
        reflector: Reflector | None = None,
        registry: KeyRegistry | None = None,
    ) -> ReflectiveInjector:
        """Resolve declarations and create an injector from them."""
        registry = registry or _inherit(parent, "_registry")
        reflector = reflector or _inherit(parent, "_reflector")
        resolved = cls.resolve(providers, reflector, registry)
        return cls.from_resolved_providers(resolved, parent, registry, reflector)

    @classmethod
    def from_resolved_providers(
        cls,
        providers: Iterable[ResolvedProvider],
        parent: Injector | None = None,
        registry: KeyRegistry | None = None,
        reflector: Reflector | None = None,
    ) -> ReflectiveInjector:
        """Create an injector from already resolved providers."""
        return cls(providers, parent, registry, reflector)

    @property
    def parent(self) -> Injector | None:
        """Get the parent injector, if any."""
        return self._parent

    def get(self, token: Any, not_found_value: Any = THROW_IF_NOT_FOUND) -> Any:
        return self._get_by_key(self._registry.get(token), Visibility.DEFAULT, not_found_value)

    def resolve_and_create_child(self, providers: Iterable[Any]) -> ReflectiveInjector:
        """Resolve declarations and create a child injector from them."""
        resolved = self.resolve(providers, self._reflector, self._registry)
        return self.create_child_from_resolved(resolved)

    def create_child_from_resolved(self, providers: Iterable[ResolvedProvider]) -> ReflectiveInjector:
        """
        Create a child injector with exactly the given providers.

        The child does not copy the parent's table; keys it lacks are
        delegated to this injector at request time.
        """
        return ReflectiveInjector(providers, self, self._registry, self._reflector)

    def resolve_and_instantiate(self, provider: Any) -> Any:
        """
        Build a fresh value for a single declaration in the context of this injector.

        The result is not cached; its dependencies are resolved (and cached)
        as usual.
        """
        resolved = self.resolve([provider], self._reflector, self._registry)
        if not resolved:
            raise InvalidProviderError(provider)
        return self.instantiate_resolved(resolved[0])

    def instantiate_resolved(self, provider: ResolvedProvider) -> Any:
        """Build a fresh value for a resolved provider without caching it."""
        return self._instantiate_provider(provider)

    def get_provider_at_index(self, index: int) -> ResolvedProvider:
        """Get the provider at a position of this injector's table."""
        if index < 0 or index >= len(self._providers):
            raise OutOfBoundsError(index)
        return self._providers[index]

    @property
    def display_name(self) -> str:
        providers = ", ".join(f' "{provider.key.display_name}" ' for provider in self._providers)
        return f"ReflectiveInjector(providers: [{providers}])"

    def __str__(self) -> str:
        return self.display_name

    def _get_by_key(self, key: Key, visibility: Visibility, not_found_value: Any) -> Any:
        if key.token is Injector:
            return self

        if visibility is Visibility.SELF:
            return self._get_by_key_self(key, not_found_value)
        return self._get_by_key_default(key, not_found_value, visibility)

    def _get_by_key_self(self, key: Key, not_found_value: Any) -> Any:
        obj = self._get_obj_by_key_id(key)
        if obj is not _NOT_FOUND:
            return obj
        return self._throw_or_default(key, not_found_value)

    def _get_by_key_default(self, key: Key, not_found_value: Any, visibility: Visibility) -> Any:
        injector = self._parent if visibility is Visibility.SKIP_SELF else self

        while isinstance(injector, ReflectiveInjector):
            obj = injector._get_obj_by_key_id(key)
            if obj is not _NOT_FOUND:
                return obj
            injector = injector._parent

        if injector is not None:
            logger.debug("Delegating %s to %s", key, injector)
            return injector.get(key.token, not_found_value)
        return self._throw_or_default(key, not_found_value)

    def _get_obj_by_key_id(self, key: Key) -> Any:
        provider = self._providers_by_key_id.get(key.id)
        if provider is None:
            return _NOT_FOUND

        obj = self._instances[key.id]
        if obj is IN_PROGRESS:
            raise CyclicDependencyError(self, key)
        if obj is UNINSTANTIATED:
            obj = self._new(provider)
        return obj

    def _new(self, provider: ResolvedProvider) -> Any:
        key_id = provider.key.id
        logger.debug("Instantiating %s", provider.key)

        self._instances[key_id] = IN_PROGRESS
        obj: Any = UNINSTANTIATED
        try:
            obj = self._instantiate_provider(provider)
        finally:
            # A failed attempt leaves the slot retryable
            self._instances[key_id] = obj
        return obj

    def _instantiate_provider(self, provider: ResolvedProvider) -> Any:
        if provider.multi_provider:
            return [self._instantiate(provider, factory) for factory in provider.resolved_factories]
        return self._instantiate(provider, provider.resolved_factory)

    def _instantiate(self, provider: ResolvedProvider, factory: ResolvedFactory) -> Any:
        try:
            deps = [self._get_by_dependency(dependency) for dependency in factory.dependencies]
        except ResolutionError as e:
            e.add_key(self, provider.key)
            raise

        try:
            return factory.factory(*deps)
        except Exception as e:
            logger.debug("Factory for %s raised %r", provider.key, e)
            raise InstantiationError(self, e, provider.key) from e

    def _get_by_dependency(self, dependency: Dependency) -> Any:
        not_found_value = None if dependency.optional else THROW_IF_NOT_FOUND
        return self._get_by_key(dependency.key, dependency.visibility, not_found_value)

    def _throw_or_default(self, key: Key, not_found_value: Any) -> Any:
        if not_found_value is THROW_IF_NOT_FOUND:
            raise NoProviderError(self, key)
        return not_found_value


def _inherit(parent: Injector | None, attribute: str) -> Any:
    if isinstance(parent, ReflectiveInjector):
        return getattr(parent, attribute)
    return None
