from __future__ import annotations

from typing import Any

from wirebox._internal.type_checks import type_name as _type_name


class WireboxError(Exception):
    """Represent a base class for all wirebox-specific failures.

    Catch this type when you want to handle any wirebox error path without
    matching each concrete exception class individually. Error handlers
    installed with ``Container.set_error_handler`` always receive instances of
    this class.
    """


class WireboxNotFoundError(WireboxError):
    """Signal that no binding exists for a ``(type, name)`` key.

    Raised by ``get``/``resolve``/``fill``/``call`` when the requested type was
    never registered under the requested name. Lookups are exact: a binding
    registered under ``"primary"`` never satisfies a lookup for ``""``.
    """

    def __init__(self, dependency: Any, name: str = "") -> None:
        self.dependency = dependency
        self.name = name
        msg = (
            f"no provider found for type `{_type_name(dependency)}`"
            + (f" under name `{name}`" if name else "")
            + ", ensure the type provided matches the return annotation of the provider"
        )
        super().__init__(msg)


class WireboxPassedByValueError(WireboxError):
    """Signal that ``resolve`` received a value instead of a ``Ref``.

    A provider exists for the type of the passed object, so the caller most
    likely forgot to wrap the destination in ``Ref(...)``.
    """

    def __init__(self, dependency: Any, name: str = "") -> None:
        self.dependency = dependency
        self.name = name
        msg = (
            f"provider found for argument of type `{_type_name(dependency)}`, "
            "but the argument was not passed by reference (i.e. resolve(Ref(Type)))"
        )
        super().__init__(msg)


class WireboxInvalidProviderSignatureError(WireboxError):
    """Signal an invalid provider passed to a registration method.

    Providers must be zero-argument callables annotated to return a reference
    type ``T`` or a ``tuple[T, E | None]`` pair where ``E`` is an exception
    class. Value types (``int``, ``str``, tuples, ...) are rejected because
    fields wired into a copy would never be observed by the original holder.
    """


class WireboxNilProviderResultError(WireboxError):
    """Signal that a provider returned ``None``."""

    def __init__(self, provider: Any) -> None:
        self.provider = provider
        super().__init__(f"provider `{_type_name(provider)}` returned a None value")


class WireboxProviderReturnedError(WireboxError):
    """Signal that a provider raised or returned an error.

    The original exception is available as ``error`` and is chained as
    ``__cause__``.
    """

    def __init__(self, provider: Any, error: BaseException) -> None:
        self.provider = provider
        self.error = error
        super().__init__(f"provider `{_type_name(provider)}` failed: {error}")


class WireboxInvalidTagError(WireboxError):
    """Signal a field annotated with an unrecognized ``Wire`` marker."""

    def __init__(self, field_name: str, marker: Any) -> None:
        self.field_name = field_name
        self.marker = marker
        super().__init__(f"field `{field_name}` has an invalid injection marker `{marker!r}`")


class WireboxUnresolvedFieldError(WireboxError):
    """Signal that a marked field could not be resolved during ``fill``.

    The underlying failure is chained as ``__cause__``.
    """

    def __init__(self, field_name: str, field_type: Any, lookup_name: str = "") -> None:
        self.field_name = field_name
        self.field_type = field_type
        self.lookup_name = lookup_name
        msg = f"cannot resolve field `{field_name}: {_type_name(field_type)}`"
        if lookup_name:
            msg += f" under name `{lookup_name}`"
        super().__init__(msg)


class WireboxInvalidFillTargetError(WireboxError):
    """Signal that ``fill`` received something other than an object to wire."""


class WireboxInvalidTargetError(WireboxError):
    """Signal a ``get``/``resolve`` target that cannot hold a resolved value.

    Raised when the requested type is a value type, or when ``resolve`` does
    not receive a ``Ref`` at all.
    """


class WireboxInvalidCallReceiverError(WireboxError):
    """Signal that ``call`` received a non-callable or an unresolvable signature."""
