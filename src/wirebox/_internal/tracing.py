from __future__ import annotations

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from wirebox._internal.type_checks import type_name

logger = logging.getLogger(__name__)

BINDING_EVENT = "BINDING"
RESOLVING_EVENT = "RESOLVING"
RETURNING_EVENT = "RETURNING"
INVOKING_EVENT = "INVOKING"
FILLING_EVENT = "FILLING"
ERROR_EVENT = "ERROR"

# Nesting depth of the current resolution, per thread/task.
_trace_depth: ContextVar[int] = ContextVar("wirebox_trace_depth", default=0)


class Tracer:
    """Emit structured debug records for registrations and resolutions.

    Tracing is off by default. When enabled, every event is logged at
    ``DEBUG`` level on the configured logger with ``wirebox_event``,
    ``wirebox_type`` and ``wirebox_name`` attributes attached to the record,
    and a ``di:`` prefix indented by resolution depth.

    The toggle and logger are guarded by a lock so they can be changed while
    other threads resolve dependencies.
    """

    def __init__(self, *, enabled: bool = False) -> None:
        self._lock = threading.RLock()
        self._enabled = enabled
        self._logger = logger

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def set_logger(self, custom_logger: logging.Logger) -> None:
        with self._lock:
            self._logger = custom_logger

    def event(
        self,
        event: str,
        message: str,
        *,
        dependency: Any = None,
        name: str = "",
    ) -> None:
        """Log a single tracing event when tracing is enabled.

        Args:
            event: Event kind, one of the ``*_EVENT`` constants.
            message: Human-readable description of the step.
            dependency: Type the event is about, if any.
            name: Binding name the event is about.

        """
        with self._lock:
            if not self._enabled:
                return
            target_logger = self._logger
        target_logger.debug(
            "%s%s: %s",
            self._prefix(),
            event,
            message,
            extra={
                "wirebox_event": event,
                "wirebox_type": type_name(dependency) if dependency is not None else None,
                "wirebox_name": name,
            },
        )

    def error(self, error: BaseException) -> None:
        self.event(ERROR_EVENT, str(error))

    @contextmanager
    def nested(self) -> Generator[None, None, None]:
        """Indent events logged inside the block by one level."""
        token = _trace_depth.set(_trace_depth.get() + 1)
        try:
            yield
        finally:
            _trace_depth.reset(token)

    def _prefix(self) -> str:
        depth = _trace_depth.get()
        if depth == 0:
            return "di: "
        return "di: " + "    " * (depth - 1) + "╰-> "
