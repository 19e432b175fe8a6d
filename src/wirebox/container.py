from __future__ import annotations

from wirebox._internal.container import Container, ErrorHandler

__all__ = ["Container", "ErrorHandler"]
