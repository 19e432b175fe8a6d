from __future__ import annotations

from wirebox._internal.container_context import (
    ContainerContext,
    call,
    container_context,
    disable_debug_logging,
    enable_debug_logging,
    fill,
    get,
    instance,
    is_debug_logging_enabled,
    named_get,
    named_instance,
    named_resolve,
    named_singleton,
    reset,
    resolve,
    set_error_handler,
    set_logger,
    singleton,
)

__all__ = [
    "ContainerContext",
    "call",
    "container_context",
    "disable_debug_logging",
    "enable_debug_logging",
    "fill",
    "get",
    "instance",
    "is_debug_logging_enabled",
    "named_get",
    "named_instance",
    "named_resolve",
    "named_singleton",
    "reset",
    "resolve",
    "set_error_handler",
    "set_logger",
    "singleton",
]
