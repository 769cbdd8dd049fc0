"""
Signature introspection for extracting dependency hints from classes and functions.
"""

from __future__ import annotations

import inspect
import logging
import types
import typing
from typing import Annotated, Any, Protocol, Union

from . import markers

logger = logging.getLogger(__name__)

_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class Reflector(Protocol):
    """
    Source of per-parameter dependency hints.

    `parameters` returns one entry per injectable parameter, in call order.
    An entry is either None (no usable hint) or a list holding the
    parameter's token followed by any markers.
    """

    def parameters(self, type_or_func: Any) -> list[list[Any] | None]: ...


class SignatureIntrospector:
    """
    Reflector built on `inspect.signature` and runtime type hints.

    Positional parameters are inspected in order up to the first one with a
    default value; parameters with defaults, keyword-only parameters and
    `*args`/`**kwargs` are left to Python.

    Supported annotations:
        engine: Engine                                  -> [Engine]
        engine: Engine | None                           -> [Engine, Optional()]
        engine: Annotated[Engine, SkipSelf()]           -> [Engine, SkipSelf()]
        engine: Annotated[Any, Inject("engine")]        -> [Inject("engine")]
    """

    def parameters(self, type_or_func: Any) -> list[list[Any] | None]:
        try:
            signature = inspect.signature(type_or_func)
        except (TypeError, ValueError):
            # Builtins and other objects without a signature take no dependencies
            logger.debug("No signature available for %r", type_or_func)
            return []

        hints = self._type_hints(type_or_func)
        params: list[list[Any] | None] = []
        for parameter in signature.parameters.values():
            if parameter.kind not in _POSITIONAL_KINDS:
                break
            if parameter.default is not inspect.Parameter.empty:
                break
            annotation = hints.get(parameter.name, parameter.annotation)
            params.append(self.annotation_metadata(annotation))
        return params

    @classmethod
    def annotation_metadata(cls, annotation: Any) -> list[Any] | None:
        """Convert a single parameter annotation into a hint entry."""
        if annotation is inspect.Parameter.empty or annotation is Any:
            return None
        if isinstance(annotation, str | typing.ForwardRef):
            # String annotation that could not be evaluated
            return None

        origin = typing.get_origin(annotation)
        if origin is Annotated:
            base, *extras = typing.get_args(annotation)
            metadata = (cls.annotation_metadata(base) or []) + list(extras)
            return metadata or None

        if origin is Union or origin is types.UnionType:
            args = typing.get_args(annotation)
            others = [arg for arg in args if arg is not type(None)]
            if len(others) == 1 and len(others) != len(args):
                inner = cls.annotation_metadata(others[0])
                if inner is None:
                    return None
                return inner + [markers.Optional()]

        return [annotation]

    @staticmethod
    def _type_hints(type_or_func: Any) -> dict[str, Any]:
        target = type_or_func.__init__ if inspect.isclass(type_or_func) else type_or_func
        try:
            return typing.get_type_hints(target, include_extras=True)
        except (NameError, TypeError, AttributeError):
            # Fall back to the raw annotations from the signature
            return {}


def default_reflector() -> Reflector:
    return _default_reflector


_default_reflector = SignatureIntrospector()
