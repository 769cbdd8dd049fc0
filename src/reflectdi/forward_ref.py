"""
Forward references for tokens and declarations that are not defined yet.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class ForwardRef:
    """
    A deferred reference produced by `forward_ref`.

    The wrapped accessor is called every time the reference is resolved;
    nothing is memoized.
    """

    __slots__ = ("_accessor",)

    def __init__(self, accessor: Callable[[], Any]):
        if not callable(accessor):
            raise TypeError(f"forward_ref expects a callable, got: {accessor!r}")
        self._accessor = accessor

    def resolve(self) -> Any:
        return self._accessor()

    def __repr__(self) -> str:
        return f"ForwardRef({self._accessor!r})"


def forward_ref(accessor: Callable[[], Any]) -> ForwardRef:
    """
    Refer to something that is not defined yet.

    Example:
        ```python
        providers = [forward_ref(lambda: Engine)]

        class Engine:
            pass
        ```
    """
    return ForwardRef(accessor)


def resolve_forward_ref(value: Any) -> Any:
    """Unwrap a forward reference, or return any other value unchanged."""
    if isinstance(value, ForwardRef):
        return value.resolve()
    return value
