from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Final

from wirebox._internal.providers import Provider, ProviderSignature

DEFAULT_NAME: Final[str] = ""

_MISSING_INSTANCE: Final[Any] = object()


class Lifetime(Enum):
    """Define cache behavior for provider results."""

    INSTANCE = auto()
    """Invoke the provider once per top-level resolution call.

    Within one call the value is shared by every field that asks for it; across
    calls a fresh value is built each time.
    """

    SINGLETON = auto()
    """Invoke the provider at most once per binding and share the cached value."""


@dataclass(kw_only=True)
class Binding:
    """One registered provider for a ``(type, name)`` key.

    Singleton bindings cache the provider result after the first successful
    resolution. The cache is written under ``lock`` and never on failure, so a
    failed provider is invoked again by the next resolution.
    """

    provides: Any
    """The dependency type this binding is registered under."""
    name: str = DEFAULT_NAME
    """The binding name; empty for unnamed bindings."""
    provider: Provider
    """Zero-argument provider callable."""
    signature: ProviderSignature
    """Declared outputs of the provider."""
    lifetime: Lifetime
    """Whether the provider result is cached for the binding lifetime."""
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    """Guards the singleton cache."""

    _instance: Any = field(default=_MISSING_INSTANCE, init=False, repr=False)

    @property
    def is_singleton(self) -> bool:
        return self.lifetime is Lifetime.SINGLETON

    @property
    def has_instance(self) -> bool:
        return self._instance is not _MISSING_INSTANCE

    @property
    def instance(self) -> Any:
        """Cached singleton value; only meaningful when ``has_instance`` is true."""
        return self._instance

    def store_instance(self, instance: Any) -> None:
        """Cache the resolved singleton value. Callers must hold ``lock``."""
        self._instance = instance


class BindingsRegistry:
    """Store bindings indexed by dependency type and name.

    Keys are exact: no subclass or structural matching is attempted. Adding a
    binding for an existing ``(type, name)`` key replaces the previous one.

    The registry is not synchronized. Registrations are expected to happen
    before concurrent resolution starts.
    """

    def __init__(self) -> None:
        self._bindings: dict[Any, dict[str, Binding]] = {}

    def add(self, binding: Binding) -> None:
        """Add a binding, replacing any binding with the same key.

        Args:
            binding: Binding to register.

        """
        self._bindings.setdefault(binding.provides, {})[binding.name] = binding

    def find(self, dependency: Any, name: str = DEFAULT_NAME) -> Binding | None:
        """Get a binding by dependency type and name, if it exists.

        Args:
            dependency: Dependency type key to look up.
            name: Binding name to look up.

        """
        try:
            return self._bindings.get(dependency, {}).get(name)
        except TypeError:
            # unhashable lookup keys can never be registered
            return None

    def contains(self, dependency: Any, name: str = DEFAULT_NAME) -> bool:
        return self.find(dependency, name) is not None

    def clear(self) -> None:
        """Remove every binding."""
        self._bindings.clear()

    def values(self) -> list[Binding]:
        """Get all bindings."""
        return [binding for by_name in self._bindings.values() for binding in by_name.values()]

    def __len__(self) -> int:
        return sum(len(by_name) for by_name in self._bindings.values())
