"""
reflectdi - a reflective dependency injection engine.

This library provides:
- Provider declarations (classes, values, factories, aliases, multi providers)
- Signature introspection for extracting constructor and factory dependencies
- Lazy, cached instantiation with cycle detection
- Hierarchical injectors with Self / SkipSelf / Optional lookups
"""

from .bindings import ClassProvider, ExistingProvider, FactoryProvider, Provider, ValueProvider
from .errors import (
    CyclicDependencyError,
    DIError,
    InstantiationError,
    InvalidProviderError,
    MixingMultiProvidersError,
    NoAnnotationError,
    NoProviderError,
    OutOfBoundsError,
    ResolutionError,
    get_original_error,
)
from .forward_ref import ForwardRef, forward_ref, resolve_forward_ref
from .injector import from_resolved_providers, resolve, resolve_and_create
from .injector_base import THROW_IF_NOT_FOUND, Injector, NullInjector
from .injector_impl import ReflectiveInjector
from .introspection import Reflector, SignatureIntrospector
from .markers import Inject, InjectionToken, Optional, Self, SkipSelf
from .model import (
    Dependency,
    Key,
    KeyRegistry,
    ResolvedFactory,
    ResolvedProvider,
    Visibility,
    stringify,
)

__all__ = [
    "THROW_IF_NOT_FOUND",
    "ClassProvider",
    "CyclicDependencyError",
    "DIError",
    "Dependency",
    "ExistingProvider",
    "FactoryProvider",
    "ForwardRef",
    "Inject",
    "InjectionToken",
    "Injector",
    "InstantiationError",
    "InvalidProviderError",
    "Key",
    "KeyRegistry",
    "MixingMultiProvidersError",
    "NoAnnotationError",
    "NoProviderError",
    "NullInjector",
    "Optional",
    "OutOfBoundsError",
    "Provider",
    "ReflectiveInjector",
    "Reflector",
    "ResolutionError",
    "ResolvedFactory",
    "ResolvedProvider",
    "Self",
    "SignatureIntrospector",
    "SkipSelf",
    "ValueProvider",
    "Visibility",
    "forward_ref",
    "from_resolved_providers",
    "get_original_error",
    "resolve",
    "resolve_and_create",
    "resolve_forward_ref",
    "stringify",
]
