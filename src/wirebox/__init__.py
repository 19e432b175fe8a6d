from wirebox.bindings import Lifetime
from wirebox.container import Container, ErrorHandler
from wirebox.container_context import (
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
from wirebox.exceptions import (
    WireboxError,
    WireboxInvalidCallReceiverError,
    WireboxInvalidFillTargetError,
    WireboxInvalidProviderSignatureError,
    WireboxInvalidTagError,
    WireboxInvalidTargetError,
    WireboxNilProviderResultError,
    WireboxNotFoundError,
    WireboxPassedByValueError,
    WireboxProviderReturnedError,
    WireboxUnresolvedFieldError,
)
from wirebox.markers import BY_NAME, BY_TYPE, ByName, ByType, Ref, Wire

__all__ = [
    "BY_NAME",
    "BY_TYPE",
    "ByName",
    "ByType",
    "Container",
    "ContainerContext",
    "ErrorHandler",
    "Lifetime",
    "Ref",
    "Wire",
    "WireboxError",
    "WireboxInvalidCallReceiverError",
    "WireboxInvalidFillTargetError",
    "WireboxInvalidProviderSignatureError",
    "WireboxInvalidTagError",
    "WireboxInvalidTargetError",
    "WireboxNilProviderResultError",
    "WireboxNotFoundError",
    "WireboxPassedByValueError",
    "WireboxProviderReturnedError",
    "WireboxUnresolvedFieldError",
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
