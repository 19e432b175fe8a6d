from __future__ import annotations

import logging

import pytest

from wirebox import ByType, Container, WireboxError, WireboxNotFoundError

TRACING_LOGGER = "wirebox._internal.tracing"


class Engine:
    pass


class Car:
    engine: ByType[Engine]


def build_engine() -> Engine:
    return Engine()


def build_car() -> Car:
    return Car()


def _events(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [record.wirebox_event for record in caplog.records if hasattr(record, "wirebox_event")]


def test_disabled_by_default(container: Container, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger=TRACING_LOGGER)

    container.singleton(build_engine)
    container.get(Engine)

    assert not container.is_debug_logging_enabled
    assert _events(caplog) == []


def test_registration_and_resolution_events(
    debug_container: Container,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.DEBUG, logger=TRACING_LOGGER)

    debug_container.singleton(build_engine)
    debug_container.instance(build_car)
    debug_container.get(Car)

    events = _events(caplog)
    assert "BINDING" in events
    assert events.index("RESOLVING") < events.index("INVOKING") < events.index("FILLING")
    assert "RETURNING" in events
    assert all(record.levelno == logging.DEBUG for record in caplog.records)


def test_records_carry_structured_fields(
    debug_container: Container,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.DEBUG, logger=TRACING_LOGGER)

    debug_container.named_singleton("v8", build_engine)

    binding = next(
        record for record in caplog.records if getattr(record, "wirebox_event", None) == "BINDING"
    )
    assert binding.wirebox_type == f"{__name__}.Engine"
    assert binding.wirebox_name == "v8"
    assert binding.getMessage().startswith("di: BINDING: singleton provider")


def test_nested_resolution_is_indented(
    debug_container: Container,
    caplog: pytest.LogCaptureFixture,
) -> None:
    debug_container.singleton(build_engine)
    debug_container.instance(build_car)
    caplog.set_level(logging.DEBUG, logger=TRACING_LOGGER)

    debug_container.get(Car)

    resolving = [
        record.getMessage()
        for record in caplog.records
        if getattr(record, "wirebox_event", None) == "RESOLVING"
    ]
    car_message, engine_message = resolving
    assert car_message.startswith("di: ╰-> RESOLVING")
    assert engine_message.index("╰->") > car_message.index("╰->")


def test_errors_are_traced(
    debug_container: Container,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.DEBUG, logger=TRACING_LOGGER)

    with pytest.raises(WireboxNotFoundError):
        debug_container.get(Engine)

    assert "ERROR" in _events(caplog)


def test_toggle_and_custom_logger(container: Container, caplog: pytest.LogCaptureFixture) -> None:
    custom_logger = logging.getLogger("wirebox.tests.custom")
    caplog.set_level(logging.DEBUG, logger="wirebox.tests.custom")
    container.set_logger(custom_logger)

    container.enable_debug_logging()
    assert container.is_debug_logging_enabled
    container.singleton(build_engine)
    container.disable_debug_logging()
    container.get(Engine)

    assert {record.name for record in caplog.records} == {"wirebox.tests.custom"}
    assert "RESOLVING" not in _events(caplog)


def test_tracing_does_not_change_error_reporting(debug_container: Container) -> None:
    errors: list[WireboxError] = []
    debug_container.set_error_handler(errors.append)

    debug_container.fill(Car())

    assert len(errors) == 1
