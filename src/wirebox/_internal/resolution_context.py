from __future__ import annotations

from typing import Any, Final

from wirebox._internal.providers import Provider

MISSING: Final[Any] = object()


class ResolutionContext:
    """Remember values built during one top-level resolution call.

    A value is recorded before its own fields are wired, so a re-entrant
    resolution of the same provider and name inside the same call reuses the
    (possibly not yet fully wired) reference instead of invoking the provider
    again. This is what makes mutually referential graphs terminate.

    A context is created per ``get``/``resolve``/``fill``/``call`` invocation
    and is never shared between threads.
    """

    __slots__ = ("_resolved",)

    def __init__(self) -> None:
        # keyed by provider identity; the registry keeps providers alive for the call
        self._resolved: dict[int, dict[str, Any]] = {}

    def lookup(self, provider: Provider, name: str) -> Any:
        """Return the value recorded for ``provider`` and ``name``, or ``MISSING``."""
        return self._resolved.get(id(provider), {}).get(name, MISSING)

    def remember(self, provider: Provider, name: str, value: Any) -> None:
        self._resolved.setdefault(id(provider), {})[name] = value

    def __len__(self) -> int:
        return sum(len(by_name) for by_name in self._resolved.values())
