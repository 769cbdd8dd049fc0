"""
Provider normalization: turns raw declarations into ResolvedProviders.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from . import markers
from .bindings import (
    ClassProvider,
    ExistingProvider,
    FactoryProvider,
    Provider,
    ValueProvider,
    provider_from_mapping,
)
from .errors import InvalidProviderError, MixingMultiProvidersError, NoAnnotationError
from .forward_ref import resolve_forward_ref
from .introspection import Reflector, default_reflector
from .model.dependency import Dependency, Visibility
from .model.keys import KeyRegistry, default_registry, stringify
from .model.resolved import ResolvedFactory, ResolvedProvider

logger = logging.getLogger(__name__)

_PROVIDER_TYPES = (ClassProvider, ValueProvider, FactoryProvider, ExistingProvider)
_BARE_MARKERS = (markers.Optional, markers.Self, markers.SkipSelf)


def resolve_providers(
    providers: Iterable[Any],
    reflector: Reflector | None = None,
    registry: KeyRegistry | None = None,
) -> list[ResolvedProvider]:
    """
    Normalize a possibly nested list of declarations.

    Returns one ResolvedProvider per distinct key, in order of first
    appearance.
    """
    reflector = reflector or default_reflector()
    registry = registry or default_registry()

    normalized = normalize_providers(providers)
    resolved = [resolve_provider(provider, reflector, registry) for provider in normalized]
    merged = merge_resolved_providers(resolved)

    logger.debug("Resolved %d declarations into %d providers", len(normalized), len(merged))
    return list(merged.values())


def normalize_providers(providers: Iterable[Any], result: list[Provider] | None = None) -> list[Provider]:
    """Flatten nested declarations into a list of provider dataclasses."""
    if result is None:
        result = []

    for declaration in providers:
        declaration = resolve_forward_ref(declaration)
        if declaration is None:
            continue
        if isinstance(declaration, list | tuple):
            normalize_providers(declaration, result)
        elif inspect.isclass(declaration):
            result.append(ClassProvider(declaration, declaration))
        elif isinstance(declaration, _PROVIDER_TYPES):
            result.append(declaration)
        elif isinstance(declaration, Mapping):
            result.append(provider_from_mapping(declaration))
        else:
            raise InvalidProviderError(declaration)

    return result


def resolve_provider(
    provider: Provider, reflector: Reflector, registry: KeyRegistry
) -> ResolvedProvider:
    """Resolve a single declaration into a provider with exactly one factory."""
    key = registry.get(provider.provide)
    factory = resolve_factory(provider, reflector, registry)
    return ResolvedProvider(key, (factory,), provider.multi)


def resolve_factory(provider: Provider, reflector: Reflector, registry: KeyRegistry) -> ResolvedFactory:
    """Build the factory function and dependency list for one declaration."""
    match provider:
        case ClassProvider(use_class=use_class):
            use_class = resolve_forward_ref(use_class)
            if not callable(use_class):
                raise InvalidProviderError(provider)
            return ResolvedFactory(use_class, dependencies_for(use_class, reflector, registry))

        case ValueProvider(use_value=value):
            return ResolvedFactory(_constant(value))

        case FactoryProvider(use_factory=use_factory, deps=deps):
            if not callable(use_factory):
                raise InvalidProviderError(provider)
            return ResolvedFactory(
                use_factory, construct_dependencies(use_factory, deps, reflector, registry)
            )

        case ExistingProvider(use_existing=use_existing):
            return ResolvedFactory(_alias, (Dependency.from_key(registry.get(use_existing)),))

        case _:
            raise InvalidProviderError(provider)


def merge_resolved_providers(
    providers: Iterable[ResolvedProvider],
    merged: dict[int, ResolvedProvider] | None = None,
) -> dict[int, ResolvedProvider]:
    """
    Group providers by key id.

    Regular providers replace earlier ones for the same key; multi providers
    accumulate their factories in declaration order. A key may not mix both.
    """
    if merged is None:
        merged = {}

    for provider in providers:
        existing = merged.get(provider.key.id)
        if existing is None:
            merged[provider.key.id] = provider
            continue

        if provider.multi_provider != existing.multi_provider:
            raise MixingMultiProvidersError(existing, provider)

        if provider.multi_provider:
            logger.debug("Adding factory to multi provider %s", provider.key)
            merged[provider.key.id] = existing.with_factories(
                existing.resolved_factories + provider.resolved_factories
            )
        else:
            logger.debug("Provider for %s shadows an earlier declaration", provider.key)
            merged[provider.key.id] = provider

    return merged


def construct_dependencies(
    type_or_func: Any,
    dependencies: Sequence[Any] | None,
    reflector: Reflector | None = None,
    registry: KeyRegistry | None = None,
) -> tuple[Dependency, ...]:
    """Dependencies of a factory: from `dependencies` if given, else by reflection."""
    reflector = reflector or default_reflector()
    registry = registry or default_registry()

    if dependencies is None:
        return dependencies_for(type_or_func, reflector, registry)

    params = [[dependency] for dependency in dependencies]
    return tuple(_extract_token(type_or_func, dependency, params, registry) for dependency in dependencies)


def dependencies_for(
    type_or_func: Any, reflector: Reflector, registry: KeyRegistry
) -> tuple[Dependency, ...]:
    """Dependencies of a class or function as reported by the reflector."""
    params = reflector.parameters(type_or_func)
    if not params:
        return ()
    if any(not param for param in params):
        raise NoAnnotationError(type_or_func, params)
    return tuple(_extract_token(type_or_func, param, params, registry) for param in params)


def _extract_token(
    type_or_func: Any,
    metadata: Any,
    params: Sequence[Sequence[Any] | None],
    registry: KeyRegistry,
) -> Dependency:
    metadata = resolve_forward_ref(metadata)
    entries = metadata if isinstance(metadata, list | tuple) else [metadata]

    token: Any = None
    inject: markers.Inject | None = None
    optional = False
    visibility = Visibility.DEFAULT

    for entry in entries:
        entry = _as_marker(resolve_forward_ref(entry))
        if isinstance(entry, markers.Inject):
            inject = entry
        elif isinstance(entry, markers.Optional):
            optional = True
        elif isinstance(entry, markers.Self | markers.SkipSelf):
            visibility = entry.visibility
        elif entry is not None:
            token = entry

    if inject is not None:
        token = resolve_forward_ref(inject.token)
    if token is None:
        raise NoAnnotationError(type_or_func, params)

    return Dependency(registry.get(token), optional, visibility)


def _as_marker(entry: Any) -> Any:
    # Accept marker classes as well as instances: `Optional` == `Optional()`
    if inspect.isclass(entry) and entry in _BARE_MARKERS:
        return entry()
    return entry


def _constant(value: Any) -> Callable[[], Any]:
    def factory() -> Any:
        return value

    factory.__name__ = f"value({stringify(value)})"
    return factory


def _alias(instance: Any) -> Any:
    return instance
