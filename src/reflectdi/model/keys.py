"""
Key implementation for dependency injection.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..forward_ref import resolve_forward_ref


def stringify(token: Any) -> str:
    """Render a token the way it appears in error messages and display names."""
    if isinstance(token, str):
        return token
    if token is None:
        return "None"
    if isinstance(token, list | tuple):
        return "[" + ", ".join(stringify(t) for t in token) + "]"
    name = getattr(token, "__name__", None)
    if isinstance(name, str):
        return name
    return str(token)


@dataclass(frozen=True, eq=False)
class Key:
    """
    A canonical wrapper around a token.

    Keys are only created by a KeyRegistry and compare by id, so two keys
    for the same token are always the same object.
    """

    token: Any
    id: int = field(compare=False)

    @classmethod
    def get(cls, token: Any, registry: KeyRegistry | None = None) -> Key:
        """Get the Key for a token from the given registry (or the default one)."""
        return (registry or default_registry()).get(token)

    @classmethod
    def num_keys(cls) -> int:
        """Number of keys in the default registry."""
        return default_registry().num_keys

    @property
    def display_name(self) -> str:
        return stringify(self.token)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Key) and other.id == self.id

    def __hash__(self) -> int:
        return self.id

    def __str__(self) -> str:
        return self.display_name


class KeyRegistry:
    """
    Append-only mapping from tokens to Keys with sequential ids.

    Tokens are looked up by type and value, so equal values of different
    types (`1`, `1.0`, `True`) get distinct keys. Unhashable tokens raise
    TypeError.
    """

    def __init__(self) -> None:
        self._all_keys: dict[tuple[type, Any], Key] = {}
        self._lock = threading.Lock()

    def get(self, token: Any) -> Key:
        if isinstance(token, Key):
            return token

        token = resolve_forward_ref(token)
        lookup = (type(token), token)
        key = self._all_keys.get(lookup)
        if key is not None:
            return key

        with self._lock:
            # Another thread may have registered it while we waited
            key = self._all_keys.get(lookup)
            if key is None:
                key = Key(token, len(self._all_keys))
                self._all_keys[lookup] = key
            return key

    @property
    def num_keys(self) -> int:
        return len(self._all_keys)


_default_registry = KeyRegistry()


def default_registry() -> KeyRegistry:
    """The process-wide registry used when none is passed explicitly."""
    return _default_registry


def reset_default_registry() -> KeyRegistry:
    """Replace the process-wide registry. Only meant for test isolation."""
    global _default_registry
    _default_registry = KeyRegistry()
    return _default_registry
