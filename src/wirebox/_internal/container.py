from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias, TypeVar, cast, get_type_hints

from wirebox._internal.bindings import DEFAULT_NAME, Binding, BindingsRegistry, Lifetime
from wirebox._internal.markers import Ref
from wirebox._internal.providers import ProviderSignatureInspector
from wirebox._internal.resolution_context import ResolutionContext
from wirebox._internal.resolver import Resolver
from wirebox._internal.tracing import BINDING_EVENT, Tracer
from wirebox._internal.type_checks import is_reference_kind, type_name
from wirebox.exceptions import (
    WireboxError,
    WireboxInvalidCallReceiverError,
    WireboxInvalidTargetError,
    WireboxPassedByValueError,
)

if TYPE_CHECKING:
    from typing_extensions import Self

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

ErrorHandler: TypeAlias = Callable[[WireboxError], None]
"""Callback receiving every failure reported by a container."""

_MISSING_ANNOTATION: Any = object()
_VARIADIC_PARAMETER_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class Container:
    """Register providers and build object graphs from them.

    Providers are zero-argument callables keyed by their annotated return type
    and an optional name. ``get``, ``resolve``, ``fill`` and ``call`` build
    values on demand, wiring ``Wire``-marked fields of every produced object
    recursively. Mutually referential graphs are supported: within one call a
    provider runs at most once per name and every holder shares the same
    reference.

    Failures are reported to the error handler exactly once per call. Without a
    handler the failing call raises the ``WireboxError``; with a handler the
    call returns normally (``get`` returns ``None``).

    Registrations are not synchronized with resolution. Register everything at
    startup, then resolve from any number of threads.
    """

    def __init__(self, *, debug: bool = False) -> None:
        """Initialize an empty container.

        Args:
            debug: Enable debug tracing right away. Equivalent to calling
                ``enable_debug_logging()`` after construction.

        Examples:
            .. code-block:: python

                container = Container()
                traced_container = Container(debug=True)

        """
        self._registry = BindingsRegistry()
        self._tracer = Tracer(enabled=debug)
        self._resolver = Resolver(registry=self._registry, tracer=self._tracer)
        self._signature_inspector = ProviderSignatureInspector()
        self._error_handler_lock = threading.RLock()
        self._error_handler: ErrorHandler | None = None

    # region Configuration
    def set_error_handler(self, handler: ErrorHandler | None) -> None:
        """Install the callback receiving every reported failure.

        Args:
            handler: Callable invoked once per failed operation with the
                ``WireboxError``. ``None`` restores the default behavior of
                raising the error from the failing call.

        """
        with self._error_handler_lock:
            self._error_handler = handler

    def set_logger(self, logger: logging.Logger) -> None:
        """Send debug tracing records to ``logger``.

        Args:
            logger: Logger receiving ``DEBUG`` records while tracing is enabled.

        """
        self._tracer.set_logger(logger)

    def enable_debug_logging(self) -> None:
        """Start emitting debug tracing records."""
        self._tracer.enable()

    def disable_debug_logging(self) -> None:
        """Stop emitting debug tracing records."""
        self._tracer.disable()

    @property
    def is_debug_logging_enabled(self) -> bool:
        return self._tracer.enabled

    # endregion Configuration

    # region Registration Methods
    def singleton(self, provider: Callable[[], Any]) -> Self:
        """Bind a provider whose value is created once and shared.

        The provider runs lazily on the first resolution and its value is
        cached for the lifetime of the binding.

        Args:
            provider: Zero-argument callable annotated with the type it provides.

        Examples:
            .. code-block:: python

                def build_shape() -> Shape:
                    return Circle(area=13)


                container.singleton(build_shape)

        """
        self._trace_call("Singleton", provider)
        self._bind_reporting(provider, DEFAULT_NAME, Lifetime.SINGLETON)
        return self

    def named_singleton(self, name: str, provider: Callable[[], Any]) -> Self:
        """Bind a singleton provider under an explicit name.

        Args:
            name: Binding name; lookups must use exactly this name.
            provider: Zero-argument callable annotated with the type it provides.

        """
        self._trace_call("NamedSingleton", provider, name=name)
        self._bind_reporting(provider, name, Lifetime.SINGLETON)
        return self

    def instance(self, provider: Callable[[], Any]) -> Self:
        """Bind a provider invoked once per top-level resolution call.

        Args:
            provider: Zero-argument callable annotated with the type it provides.

        """
        self._trace_call("Instance", provider)
        self._bind_reporting(provider, DEFAULT_NAME, Lifetime.INSTANCE)
        return self

    def named_instance(self, name: str, provider: Callable[[], Any]) -> Self:
        """Bind an instance provider under an explicit name.

        Args:
            name: Binding name; lookups must use exactly this name.
            provider: Zero-argument callable annotated with the type it provides.

        """
        self._trace_call("NamedInstance", provider, name=name)
        self._bind_reporting(provider, name, Lifetime.INSTANCE)
        return self

    def bind(
        self,
        provider: Callable[[], Any],
        *,
        name: str = DEFAULT_NAME,
        lifetime: Lifetime = Lifetime.INSTANCE,
    ) -> None:
        """Bind a provider with an explicit lifetime and name.

        Re-binding an existing ``(type, name)`` key replaces the previous
        binding and drops its cached singleton value. A provider annotated
        ``-> tuple[T, E | None]`` is bound under both ``T`` and ``E``, each
        with its own independent binding.

        Args:
            provider: Zero-argument callable annotated with the type it provides.
            name: Binding name; empty for unnamed bindings.
            lifetime: ``Lifetime.SINGLETON`` or ``Lifetime.INSTANCE``.

        """
        self._trace_call("Bind", provider, name=name)
        self._bind_reporting(provider, name, lifetime)

    def provider(
        self,
        *,
        lifetime: Lifetime = Lifetime.INSTANCE,
        name: str = DEFAULT_NAME,
    ) -> Callable[[F], F]:
        """Return a decorator binding the decorated provider.

        Args:
            lifetime: ``Lifetime.SINGLETON`` or ``Lifetime.INSTANCE``.
            name: Binding name; empty for unnamed bindings.

        Examples:
            .. code-block:: python

                @container.provider(lifetime=Lifetime.SINGLETON)
                def build_database() -> Database:
                    return MySQL()

        """

        def decorator(provider: F) -> F:
            self.bind(provider, name=name, lifetime=lifetime)
            return provider

        return decorator

    def reset(self) -> None:
        """Delete every binding, dropping cached singleton values."""
        self._tracer.event("Reset", "Reset()")
        self._registry.clear()

    # endregion Registration Methods

    # region Resolution Methods
    def get(self, dependency: type[T], name: str = DEFAULT_NAME) -> T:
        """Build and return the value bound to ``dependency``.

        Args:
            dependency: Class or protocol type the provider was annotated with.
            name: Binding name; empty for unnamed bindings.

        Returns:
            The resolved value, or ``None`` when the failure was passed to an
            installed error handler.

        """
        self._trace_call("Get", dependency, name=name)
        try:
            if not is_reference_kind(dependency):
                msg = (
                    f"invalid type argument `{type_name(dependency)}`, "
                    "only class and protocol types can be resolved"
                )
                raise WireboxInvalidTargetError(msg)
            return cast("T", self._resolver.resolve(dependency, name, ResolutionContext()))
        except WireboxError as error:
            self._report(error)
        return cast("T", None)

    def named_get(self, dependency: type[T], name: str) -> T:
        """Build and return the value bound to ``dependency`` under ``name``.

        Args:
            dependency: Class or protocol type the provider was annotated with.
            name: Binding name.

        """
        return self.get(dependency, name)

    def resolve(self, ref: Ref[Any], name: str = DEFAULT_NAME) -> None:
        """Resolve ``ref.target`` and store the value in ``ref.value``.

        Args:
            ref: Destination holder created with ``Ref(SomeType)``.
            name: Binding name; empty for unnamed bindings.

        Examples:
            .. code-block:: python

                shape = Ref(Shape)
                container.resolve(shape)
                assert shape.value.area() == 13

        """
        self._trace_call("Resolve", ref, name=name)
        try:
            self._resolve_into(ref, name)
        except WireboxError as error:
            self._report(error)

    def named_resolve(self, ref: Ref[Any], name: str) -> None:
        """Resolve like ``resolve`` but for named bindings.

        Args:
            ref: Destination holder created with ``Ref(SomeType)``.
            name: Binding name.

        """
        self.resolve(ref, name)

    def fill(self, target: Any) -> None:
        """Populate the ``Wire``-marked fields of an existing object.

        Args:
            target: Object to wire, or a ``Ref`` holding it.

        Examples:
            .. code-block:: python

                class App:
                    shape: ByType[Shape]
                    primary: ByName[Database]


                app = App()
                container.fill(app)

        """
        self._trace_call("Fill", target)
        try:
            self._resolver.fill(target, ResolutionContext())
        except WireboxError as error:
            self._report(error)

    def call(self, function: Callable[..., Any]) -> None:
        """Invoke ``function`` with every parameter resolved from the container.

        Parameters are resolved by their annotated type under the default name,
        sharing one resolution context. Nothing is invoked if any parameter
        fails to resolve. The return value of ``function`` is discarded.

        Args:
            function: Callable whose parameters are all annotated with bound types.

        Examples:
            .. code-block:: python

                def handler(shape: Shape, db: Database) -> None: ...


                container.call(handler)

        """
        self._trace_call("Call", function)
        try:
            args, kwargs = self._call_arguments(function)
        except WireboxError as error:
            self._report(error)
            return
        function(*args, **kwargs)

    # endregion Resolution Methods

    def _bind_reporting(self, provider: Any, name: str, lifetime: Lifetime) -> None:
        try:
            self._bind(provider, name, lifetime)
        except WireboxError as error:
            self._tracer.error(error)
            self._report(error)

    def _bind(self, provider: Any, name: str, lifetime: Lifetime) -> None:
        signature = self._signature_inspector.inspect(provider)
        for provides in signature.keys:
            self._tracer.event(
                BINDING_EVENT,
                f"{lifetime.name.lower()} provider for type `{type_name(provides)}` "
                f"with structure `{type_name(provider)}`",
                dependency=provides,
                name=name,
            )
            self._registry.add(
                Binding(
                    provides=provides,
                    name=name,
                    provider=provider,
                    signature=signature,
                    lifetime=lifetime,
                ),
            )

    def _resolve_into(self, ref: Any, name: str) -> None:
        if not isinstance(ref, Ref):
            passed_type = ref if isinstance(ref, type) else type(ref)
            if ref is not None and self._registry.contains(passed_type, name):
                raise WireboxPassedByValueError(passed_type, name)
            msg = (
                f"invalid abstraction argument `{ref!r}`, ensure arguments are passed "
                "by reference (i.e. resolve(Ref(Type)))"
            )
            raise WireboxInvalidTargetError(msg)

        if not is_reference_kind(ref.target):
            msg = (
                f"invalid abstraction argument `{ref!r}` of type `{type_name(ref.target)}`, "
                "argument must be a class or protocol type"
            )
            raise WireboxInvalidTargetError(msg)

        ref.value = self._resolver.resolve(ref.target, name, ResolutionContext())

    def _call_arguments(self, function: Any) -> tuple[list[Any], dict[str, Any]]:
        if not callable(function):
            msg = f"invalid function argument `{function!r}`, argument must be a function"
            raise WireboxInvalidCallReceiverError(msg)

        function_name = getattr(function, "__qualname__", repr(function))
        try:
            signature = inspect.signature(function)
            hints = get_type_hints(self._annotated_callable(function))
        except (AttributeError, NameError, TypeError, ValueError) as error:
            msg = f"cannot inspect the signature of `{function_name}`"
            raise WireboxInvalidCallReceiverError(msg) from error

        ctx = ResolutionContext()
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter in signature.parameters.values():
            if parameter.kind in _VARIADIC_PARAMETER_KINDS:
                msg = f"variadic parameter `{parameter.name}` of `{function_name}` is not supported"
                raise WireboxInvalidCallReceiverError(msg)
            annotation = hints.get(parameter.name, _MISSING_ANNOTATION)
            if annotation is _MISSING_ANNOTATION:
                msg = f"parameter `{parameter.name}` of `{function_name}` has no type annotation"
                raise WireboxInvalidCallReceiverError(msg)

            value = self._resolver.resolve(annotation, DEFAULT_NAME, ctx)
            if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[parameter.name] = value
        return args, kwargs

    def _annotated_callable(self, function: Any) -> Any:
        if inspect.isclass(function):
            return function.__init__
        if inspect.isroutine(function):
            return function
        return type(function).__call__

    def _trace_call(self, operation: str, argument: Any, *, name: str = DEFAULT_NAME) -> None:
        described = argument.target if isinstance(argument, Ref) else argument
        if not callable(described):
            described = type(described)
        description = type_name(described)
        if name:
            self._tracer.event(operation, f'{operation}("{name}", {description})', name=name)
        else:
            self._tracer.event(operation, f"{operation}({description})")

    def _report(self, error: WireboxError) -> None:
        with self._error_handler_lock:
            handler = self._error_handler
        if handler is None:
            raise error
        handler(error)
