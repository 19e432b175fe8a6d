from __future__ import annotations

import inspect
import sys
from collections.abc import Iterator
from typing import Any, Final

from wirebox._internal.bindings import DEFAULT_NAME, Binding, BindingsRegistry
from wirebox._internal.markers import INJECT_BY_NAME, INJECT_BY_TYPE, Ref, extract_wire_marker
from wirebox._internal.providers import invoke_provider
from wirebox._internal.resolution_context import MISSING, ResolutionContext
from wirebox._internal.tracing import (
    FILLING_EVENT,
    INVOKING_EVENT,
    RESOLVING_EVENT,
    RETURNING_EVENT,
    Tracer,
)
from wirebox._internal.type_checks import is_wirable_object, type_name
from wirebox.exceptions import (
    WireboxError,
    WireboxInvalidFillTargetError,
    WireboxInvalidTagError,
    WireboxNotFoundError,
    WireboxUnresolvedFieldError,
)

MAX_UNWRAP_DEPTH: Final[int] = 4

_MARKER_TOKENS: Final[tuple[str, ...]] = (
    "Annotated",
    "ByType",
    "ByName",
    "Wire",
    "BY_TYPE",
    "BY_NAME",
)
_UNEVALUABLE: Final[Any] = object()


class Resolver:
    """Build dependency values and wire their marked fields.

    ``resolve`` and ``fill`` recurse into each other: every value produced by a
    provider has its ``Wire``-marked fields populated before it is returned.
    Both take the ``ResolutionContext`` of the current top-level call.
    """

    def __init__(self, *, registry: BindingsRegistry, tracer: Tracer) -> None:
        self._registry = registry
        self._tracer = tracer

    def resolve(self, dependency: Any, name: str, ctx: ResolutionContext) -> Any:
        """Return the value bound to ``(dependency, name)``.

        Args:
            dependency: Dependency type to resolve.
            name: Binding name; empty for unnamed bindings.
            ctx: Resolution context of the current top-level call.

        Raises:
            WireboxNotFoundError: If nothing is registered under the key.
            WireboxError: Any failure raised by the provider or while wiring
                the produced value.

        """
        binding = self._registry.find(dependency, name)
        if binding is None:
            raise self._traced(WireboxNotFoundError(dependency, name))
        return self.resolve_binding(binding, ctx)

    def resolve_binding(self, binding: Binding, ctx: ResolutionContext) -> Any:
        """Return the value of an already looked-up binding.

        Args:
            binding: Binding to resolve.
            ctx: Resolution context of the current top-level call.

        """
        with self._tracer.nested():
            self._tracer.event(
                RESOLVING_EVENT,
                f"provider for type `{type_name(binding.provides)}`",
                dependency=binding.provides,
                name=binding.name,
            )

            existing = ctx.lookup(binding.provider, binding.name)
            if existing is not MISSING:
                return existing

            if not binding.is_singleton:
                return self._build(binding, ctx)

            self._tracer.event(
                RETURNING_EVENT,
                f"attempting to access instance for singleton `{type_name(binding.provides)}`",
                dependency=binding.provides,
                name=binding.name,
            )
            with binding.lock:
                if binding.has_instance:
                    ctx.remember(binding.provider, binding.name, binding.instance)
                    return binding.instance
                instance = self._build(binding, ctx)
                binding.store_instance(instance)
                return instance

    def fill(self, target: Any, ctx: ResolutionContext) -> None:
        """Populate every ``Wire``-marked field of ``target``.

        ``target`` may be wrapped in up to ``MAX_UNWRAP_DEPTH`` nested ``Ref``
        boxes. Fields are written in declaration order and the pass stops at
        the first failure; fields written before it keep their values.

        Args:
            target: Object, or ``Ref`` holding the object, to wire.
            ctx: Resolution context of the current top-level call.

        Raises:
            WireboxInvalidFillTargetError: If ``target`` is not a wirable object.
            WireboxInvalidTagError: If a field carries an unrecognized marker.
            WireboxUnresolvedFieldError: If a marked field cannot be resolved.

        """
        value = target
        for _ in range(MAX_UNWRAP_DEPTH):
            if not isinstance(value, Ref):
                break
            value = value.value

        if isinstance(value, Ref) or not is_wirable_object(value):
            msg = (
                f"argument of type `{type_name(type(value))}` is not an object "
                "with injectable fields"
            )
            raise self._traced(WireboxInvalidFillTargetError(msg))

        with self._tracer.nested():
            for field_name, field_type, lookup_name in self._injectable_fields(type(value)):
                self._tracer.event(
                    FILLING_EVENT,
                    f"field `{field_name}: {type_name(field_type)}` "
                    + ("by name" if lookup_name else "by type"),
                    dependency=field_type,
                    name=lookup_name,
                )
                try:
                    instance = self.resolve(field_type, lookup_name, ctx)
                except WireboxError as error:
                    unresolved = WireboxUnresolvedFieldError(field_name, field_type, lookup_name)
                    raise self._traced(unresolved) from error
                self._write_field(value, field_name, field_type, instance)

    def _build(self, binding: Binding, ctx: ResolutionContext) -> Any:
        self._tracer.event(
            INVOKING_EVENT,
            f"provider `{type_name(binding.provider)}` for type `{type_name(binding.provides)}`",
            dependency=binding.provides,
            name=binding.name,
        )
        try:
            instance = invoke_provider(binding.provider, binding.signature)
        except WireboxError as error:
            self._tracer.error(error)
            raise

        self._tracer.event(
            RETURNING_EVENT,
            f"value of type `{type_name(type(instance))}`",
            dependency=binding.provides,
            name=binding.name,
        )
        ctx.remember(binding.provider, binding.name, instance)
        if is_wirable_object(instance):
            self.fill(instance, ctx)
        return instance

    def _injectable_fields(self, owner: type[Any]) -> Iterator[tuple[str, Any, str]]:
        for field_name, annotation in self._field_annotations(owner):
            extracted = extract_wire_marker(annotation)
            if extracted is None:
                continue
            field_type, marker = extracted
            if marker.by == INJECT_BY_TYPE:
                yield field_name, field_type, DEFAULT_NAME
            elif marker.by == INJECT_BY_NAME:
                yield field_name, field_type, field_name
            else:
                raise self._traced(WireboxInvalidTagError(field_name, marker))

    def _field_annotations(self, owner: type[Any]) -> Iterator[tuple[str, Any]]:
        # base classes first; a redeclared field keeps its first position
        declared: dict[str, tuple[type[Any], Any]] = {}
        for klass in reversed(owner.__mro__):
            for field_name, annotation in inspect.get_annotations(klass).items():
                declared[field_name] = (klass, annotation)

        for field_name, (klass, annotation) in declared.items():
            if not isinstance(annotation, str):
                yield field_name, annotation
                continue
            evaluated = self._evaluate_annotation(klass, field_name, annotation)
            if evaluated is not _UNEVALUABLE:
                yield field_name, evaluated

    def _evaluate_annotation(self, owner: type[Any], field_name: str, annotation: str) -> Any:
        module = sys.modules.get(owner.__module__)
        globalns = dict(vars(module)) if module is not None else {}
        try:
            return eval(annotation, globalns, dict(vars(owner)))  # noqa: S307
        except (AttributeError, NameError, SyntaxError, TypeError) as error:
            # unmarked fields may reference names imported only for type checking
            if not any(token in annotation for token in _MARKER_TOKENS):
                return _UNEVALUABLE
            msg = (
                f"cannot evaluate annotation `{annotation}` of field `{field_name}` "
                f"of `{type_name(owner)}`"
            )
            raise self._traced(WireboxInvalidFillTargetError(msg)) from error

    def _write_field(self, owner: Any, field_name: str, field_type: Any, instance: Any) -> None:
        # object.__setattr__ bypasses frozen dataclasses/attrs classes and custom
        # __setattr__ guards; injection happens before the object is handed out.
        try:
            object.__setattr__(owner, field_name, instance)
        except AttributeError as error:
            msg = (
                f"field `{field_name}: {type_name(field_type)}` of `{type_name(type(owner))}` "
                "is not writable"
            )
            raise self._traced(WireboxInvalidFillTargetError(msg)) from error

    def _traced(self, error: WireboxError) -> WireboxError:
        self._tracer.error(error)
        return error
