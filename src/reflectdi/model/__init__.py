"""
Model subpackage containing core data structures and types.

This subpackage contains the fundamental data structures that form the
dependency injection model, organized to avoid circular dependencies.
"""

from .dependency import Dependency, Visibility
from .keys import Key, KeyRegistry, default_registry, reset_default_registry, stringify
from .resolved import ResolvedFactory, ResolvedProvider

__all__ = [
    "Dependency",
    "Key",
    "KeyRegistry",
    "ResolvedFactory",
    "ResolvedProvider",
    "Visibility",
    "default_registry",
    "reset_default_registry",
    "stringify",
]
