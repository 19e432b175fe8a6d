from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from wirebox._internal.bindings import DEFAULT_NAME
from wirebox._internal.container import Container, ErrorHandler
from wirebox._internal.markers import Ref

if TYPE_CHECKING:
    from typing_extensions import Self

T = TypeVar("T")


class ContainerContext:
    """Proxy registrations and resolution through a process-wide container.

    A default ``Container`` is created eagerly, so the module-level functions
    work without any setup. ``set_current`` swaps in another container, which
    is mostly useful in tests and at application startup.

    The binding is process-global (not task-local or thread-local).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._container = Container()

    def get_current(self) -> Container:
        """Return the container calls are currently proxied to."""
        with self._lock:
            return self._container

    def set_current(self, container: Container) -> None:
        """Proxy every following call to ``container``.

        Args:
            container: Container to bind as the process-wide default.

        """
        with self._lock:
            self._container = container

    def singleton(self, provider: Callable[[], Any]) -> Self:
        self.get_current().singleton(provider)
        return self

    def named_singleton(self, name: str, provider: Callable[[], Any]) -> Self:
        self.get_current().named_singleton(name, provider)
        return self

    def instance(self, provider: Callable[[], Any]) -> Self:
        self.get_current().instance(provider)
        return self

    def named_instance(self, name: str, provider: Callable[[], Any]) -> Self:
        self.get_current().named_instance(name, provider)
        return self

    def reset(self) -> None:
        """Delete every binding of the current container."""
        self.get_current().reset()

    def get(self, dependency: type[T], name: str = DEFAULT_NAME) -> T:
        return self.get_current().get(dependency, name)

    def named_get(self, dependency: type[T], name: str) -> T:
        return self.get_current().named_get(dependency, name)

    def resolve(self, ref: Ref[Any], name: str = DEFAULT_NAME) -> None:
        self.get_current().resolve(ref, name)

    def named_resolve(self, ref: Ref[Any], name: str) -> None:
        self.get_current().named_resolve(ref, name)

    def fill(self, target: Any) -> None:
        self.get_current().fill(target)

    def call(self, function: Callable[..., Any]) -> None:
        self.get_current().call(function)

    def set_error_handler(self, handler: ErrorHandler | None) -> None:
        self.get_current().set_error_handler(handler)

    def set_logger(self, logger: logging.Logger) -> None:
        self.get_current().set_logger(logger)

    def enable_debug_logging(self) -> None:
        self.get_current().enable_debug_logging()

    def disable_debug_logging(self) -> None:
        self.get_current().disable_debug_logging()

    def is_debug_logging_enabled(self) -> bool:
        return self.get_current().is_debug_logging_enabled


container_context = ContainerContext()
"""Process-wide container proxy behind the module-level functions.

Examples:
    .. code-block:: python

        import wirebox

        wirebox.singleton(build_database)
        database = wirebox.get(Database)
"""


def singleton(provider: Callable[[], Any]) -> None:
    """Bind a singleton provider in the default container."""
    container_context.singleton(provider)


def named_singleton(name: str, provider: Callable[[], Any]) -> None:
    """Bind a named singleton provider in the default container."""
    container_context.named_singleton(name, provider)


def instance(provider: Callable[[], Any]) -> None:
    """Bind an instance provider in the default container."""
    container_context.instance(provider)


def named_instance(name: str, provider: Callable[[], Any]) -> None:
    """Bind a named instance provider in the default container."""
    container_context.named_instance(name, provider)


def reset() -> None:
    """Delete every binding of the default container."""
    container_context.reset()


def get(dependency: type[T], name: str = DEFAULT_NAME) -> T:
    """Resolve ``dependency`` from the default container."""
    return container_context.get(dependency, name)


def named_get(dependency: type[T], name: str) -> T:
    return container_context.named_get(dependency, name)


def resolve(ref: Ref[Any], name: str = DEFAULT_NAME) -> None:
    """Resolve ``ref.target`` from the default container into ``ref.value``."""
    container_context.resolve(ref, name)


def named_resolve(ref: Ref[Any], name: str) -> None:
    container_context.named_resolve(ref, name)


def fill(target: Any) -> None:
    """Wire the marked fields of ``target`` from the default container."""
    container_context.fill(target)


def call(function: Callable[..., Any]) -> None:
    """Invoke ``function`` with arguments resolved from the default container."""
    container_context.call(function)


def set_error_handler(handler: ErrorHandler | None) -> None:
    container_context.set_error_handler(handler)


def set_logger(logger: logging.Logger) -> None:
    container_context.set_logger(logger)


def enable_debug_logging() -> None:
    container_context.enable_debug_logging()


def disable_debug_logging() -> None:
    container_context.disable_debug_logging()


def is_debug_logging_enabled() -> bool:
    return container_context.is_debug_logging_enabled()
