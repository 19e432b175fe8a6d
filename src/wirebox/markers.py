from __future__ import annotations

from wirebox._internal.markers import BY_NAME, BY_TYPE, ByName, ByType, Ref, Wire

__all__ = ["BY_NAME", "BY_TYPE", "ByName", "ByType", "Ref", "Wire"]
