from __future__ import annotations

from wirebox._internal.bindings import DEFAULT_NAME, Lifetime

__all__ = ["DEFAULT_NAME", "Lifetime"]
