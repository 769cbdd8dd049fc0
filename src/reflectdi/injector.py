"""
Factory functions for creating injector instances.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .injector_base import Injector
from .injector_impl import ReflectiveInjector
from .introspection import Reflector
from .model.keys import KeyRegistry
from .model.resolved import ResolvedProvider


def resolve(
    providers: Iterable[Any],
    reflector: Reflector | None = None,
    registry: KeyRegistry | None = None,
) -> list[ResolvedProvider]:
    """
    Normalize declarations without creating an injector.

    Args:
        providers: Possibly nested list of classes, provider dataclasses,
                   mappings and forward references
        reflector: Source of constructor/function parameter hints
        registry: Key registry (defaults to the process-wide one)

    Returns:
        One ResolvedProvider per distinct key, in order of first appearance
    """
    return ReflectiveInjector.resolve(providers, reflector, registry)


def resolve_and_create(
    providers: Iterable[Any],
    parent: Injector | None = None,
    reflector: Reflector | None = None,
    registry: KeyRegistry | None = None,
) -> ReflectiveInjector:
    """
    Resolve declarations and create an injector from them.

    Args:
        providers: Possibly nested list of declarations
        parent: Parent injector (defaults to none)
        reflector: Source of constructor/function parameter hints
        registry: Key registry (defaults to the parent's or the process-wide one)

    Returns:
        A new injector
    """
    return ReflectiveInjector.resolve_and_create(providers, parent, reflector, registry)


def from_resolved_providers(
    providers: Iterable[ResolvedProvider], parent: Injector | None = None
) -> ReflectiveInjector:
    """
    Create an injector from already resolved providers.

    When `parent` is a ReflectiveInjector this is the same as
    `parent.create_child_from_resolved(providers)`.
    """
    if isinstance(parent, ReflectiveInjector):
        return parent.create_child_from_resolved(providers)
    return ReflectiveInjector.from_resolved_providers(providers, parent)
