from __future__ import annotations

import types
from typing import Any, TypeGuard

_VALUE_KIND_BASES: tuple[type[Any], ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    tuple,
    frozenset,
    type(None),
)


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_reference_kind(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate can be used as a dependency key.

    Ordinary classes, ABCs and protocols qualify. Immutable value types and
    non-class annotations (unions, parametrised generics) do not.

    Args:
        candidate: Annotation or type being checked.

    """
    if not is_runtime_class(candidate):
        return False
    return not issubclass(candidate, _VALUE_KIND_BASES)


def is_exception_kind(candidate: object) -> TypeGuard[type[BaseException]]:
    """Return true when candidate is an exception class.

    Args:
        candidate: Annotation or type being checked.

    """
    return is_runtime_class(candidate) and issubclass(candidate, BaseException)


def is_wirable_object(candidate: object) -> bool:
    """Return true when candidate is an object whose fields can be wired.

    Args:
        candidate: Value being checked.

    """
    if candidate is None or isinstance(candidate, type):
        return False
    candidate_type = type(candidate)
    if candidate_type.__module__ == "builtins":
        return False
    return not isinstance(candidate, _VALUE_KIND_BASES)


def type_name(dependency: Any) -> str:
    """Return a fully qualified, human-readable name for a type.

    Args:
        dependency: Type or annotation to describe.

    """
    qualname = getattr(dependency, "__qualname__", None)
    if qualname is None:
        return repr(dependency)
    module = getattr(dependency, "__module__", None)
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


__all__ = [
    "is_exception_kind",
    "is_reference_kind",
    "is_runtime_class",
    "is_wirable_object",
    "type_name",
]
