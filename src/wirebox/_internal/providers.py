from __future__ import annotations

import inspect
import types
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias, Union, get_args, get_origin, get_type_hints

from wirebox._internal.type_checks import is_exception_kind, is_reference_kind, type_name
from wirebox.exceptions import (
    WireboxInvalidProviderSignatureError,
    WireboxNilProviderResultError,
    WireboxProviderReturnedError,
)

Provider: TypeAlias = Callable[[], Any]
"""A zero-argument factory producing one value, optionally paired with an error."""

_MISSING_ANNOTATION: Any = object()
_PAIR_LENGTH = 2


@dataclass(frozen=True, slots=True)
class ProviderSignature:
    """Declared outputs of a validated provider."""

    provides: type[Any]
    """Type of the value the provider produces."""
    error_type: type[BaseException] | None = None
    """Declared error type for providers returning a ``(value, error)`` pair."""

    @property
    def returns_error(self) -> bool:
        return self.error_type is not None

    @property
    def keys(self) -> tuple[type[Any], ...]:
        """Types this provider is registered under, first output first."""
        if self.error_type is None or self.error_type is self.provides:
            return (self.provides,)
        return (self.provides, self.error_type)


@dataclass(slots=True)
class ProviderSignatureInspector:
    """Validate provider callables and extract their declared outputs."""

    def inspect(self, provider: object) -> ProviderSignature:
        """Return the declared outputs of a provider.

        Args:
            provider: Candidate provider passed to a registration method.

        Raises:
            WireboxInvalidProviderSignatureError: If the provider is not a
                zero-argument callable annotated with a reference type or a
                ``tuple[T, E | None]`` pair.

        """
        if not callable(provider) or isinstance(provider, type):
            msg = f"provider argument `{provider!r}` must be a function"
            raise WireboxInvalidProviderSignatureError(msg)

        provider_name = self._provider_name(provider)
        try:
            signature = inspect.signature(provider)
        except (TypeError, ValueError) as error:
            msg = f"provider function signature of `{provider_name}` cannot be inspected"
            raise WireboxInvalidProviderSignatureError(msg) from error

        if signature.parameters:
            msg = (
                f"provider function signature of `{provider_name}` is invalid, "
                "arguments are not permitted to providers"
            )
            raise WireboxInvalidProviderSignatureError(msg)

        return_annotation = self._resolved_return_annotation(provider, provider_name)
        if return_annotation is _MISSING_ANNOTATION or return_annotation in (None, type(None)):
            msg = (
                f"provider function signature of `{provider_name}` is invalid, "
                "must be annotated to return one or two values"
            )
            raise WireboxInvalidProviderSignatureError(msg)

        if get_origin(return_annotation) is tuple:
            return self._inspect_pair(provider_name, get_args(return_annotation))

        self._validate_provided_type(provider_name, return_annotation)
        return ProviderSignature(provides=return_annotation)

    def _inspect_pair(
        self,
        provider_name: str,
        outputs: tuple[Any, ...],
    ) -> ProviderSignature:
        if len(outputs) != _PAIR_LENGTH or Ellipsis in outputs:
            msg = (
                f"provider function signature of `{provider_name}` is invalid, "
                "must return one or two values"
            )
            raise WireboxInvalidProviderSignatureError(msg)

        provides, error_annotation = outputs
        self._validate_provided_type(provider_name, provides)

        error_type = self._strip_optional(error_annotation)
        if not is_exception_kind(error_type):
            msg = (
                f"provider function signature of `{provider_name}` is invalid, "
                f"second return value must be an exception type, got `{error_annotation!r}`"
            )
            raise WireboxInvalidProviderSignatureError(msg)
        return ProviderSignature(provides=provides, error_type=error_type)

    def _validate_provided_type(self, provider_name: str, provides: Any) -> None:
        if not is_reference_kind(provides):
            msg = (
                f"provider function signature of `{provider_name}` is invalid, "
                f"must return a class or protocol type, got `{type_name(provides)}`"
            )
            raise WireboxInvalidProviderSignatureError(msg)

    def _strip_optional(self, annotation: Any) -> Any:
        if get_origin(annotation) not in (Union, types.UnionType):
            return annotation
        members = [member for member in get_args(annotation) if member is not type(None)]
        if len(members) != 1:
            return annotation
        return members[0]

    def _resolved_return_annotation(self, provider: Callable[..., Any], provider_name: str) -> Any:
        try:
            return_type_hints = get_type_hints(provider)
        except (AttributeError, NameError, TypeError) as error:
            msg = f"cannot evaluate return annotation of provider `{provider_name}`"
            raise WireboxInvalidProviderSignatureError(msg) from error
        return return_type_hints.get("return", _MISSING_ANNOTATION)

    def _provider_name(self, provider: Callable[..., Any]) -> str:
        return getattr(provider, "__qualname__", repr(provider))


def invoke_provider(provider: Provider, signature: ProviderSignature) -> Any:
    """Call a provider and validate what it produced.

    Args:
        provider: Provider callable to invoke with no arguments.
        signature: Declared outputs of the provider.

    Raises:
        WireboxProviderReturnedError: If the provider raised, or returned a
            non-``None`` error as the second item of its result pair.
        WireboxNilProviderResultError: If the provider produced ``None``.
        WireboxInvalidProviderSignatureError: If a pair-returning provider did
            not return a 2-tuple.

    """
    try:
        result = provider()
    except Exception as error:
        raise WireboxProviderReturnedError(provider, error) from error

    if signature.returns_error:
        if not isinstance(result, tuple) or len(result) != _PAIR_LENGTH:
            msg = (
                f"provider `{type_name(provider)}` is annotated to return a (value, error) "
                f"pair, got `{result!r}`"
            )
            raise WireboxInvalidProviderSignatureError(msg)
        result, error = result
        if error is not None:
            if not isinstance(error, BaseException):
                error = RuntimeError(str(error))
            raise WireboxProviderReturnedError(provider, error) from error

    if result is None:
        raise WireboxNilProviderResultError(provider)
    return result
