from __future__ import annotations

from collections.abc import Iterator

import pytest

from wirebox._internal.container import Container
from wirebox._internal.container_context import ContainerContext, container_context
from wirebox._internal.tracing import logger as tracing_logger
from wirebox.exceptions import WireboxError


@pytest.fixture()
def wirebox_container() -> Container:
    """Create a fresh container for one test.

    The fixture is function-scoped, so bindings and cached singletons are
    isolated between tests.

    Returns:
        A new ``Container`` instance.

    """
    return Container()


@pytest.fixture()
def wirebox_errors(wirebox_container: Container) -> Iterator[list[WireboxError]]:
    """Collect every error reported by ``wirebox_container``.

    Installs an error handler appending to the returned list, so failing
    operations return normally instead of raising. The default handler is
    restored after the test.

    Yields:
        The list receiving reported errors in order.

    """
    errors: list[WireboxError] = []
    wirebox_container.set_error_handler(errors.append)
    yield errors
    wirebox_container.set_error_handler(None)


@pytest.fixture()
def wirebox_default_container() -> Iterator[ContainerContext]:
    """Expose the process-wide default container with a clean state.

    Bindings are deleted and the default configuration restored before and
    after the test. A container swapped in with ``set_current`` is replaced
    by the previous one on teardown.

    Yields:
        The process-wide ``ContainerContext``.

    """
    previous = container_context.get_current()
    _restore_defaults(container_context)
    yield container_context
    container_context.set_current(previous)
    _restore_defaults(container_context)


def _restore_defaults(context: ContainerContext) -> None:
    context.reset()
    context.set_error_handler(None)
    context.set_logger(tracing_logger)
    context.disable_debug_logging()
