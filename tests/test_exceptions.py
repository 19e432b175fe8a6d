"""Tests for custom exception hierarchy."""

from __future__ import annotations

import pytest

import wirebox
from wirebox import (
    Wire,
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


class Service:
    pass


def build_service() -> Service:
    return Service()


@pytest.mark.parametrize(
    "error_type",
    [
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
    ],
)
def test_every_error_is_a_wirebox_error(error_type: type[Exception]) -> None:
    assert issubclass(error_type, WireboxError)
    assert error_type.__name__ in wirebox.__all__


class TestWireboxNotFoundError:
    def test_unnamed_message(self) -> None:
        error = WireboxNotFoundError(Service)

        assert error.dependency is Service
        assert error.name == ""
        assert str(error).startswith(f"no provider found for type `{__name__}.Service`,")

    def test_named_message(self) -> None:
        error = WireboxNotFoundError(Service, "primary")

        assert "under name `primary`" in str(error)


class TestWireboxPassedByValueError:
    def test_message_suggests_ref(self) -> None:
        error = WireboxPassedByValueError(Service)

        assert error.dependency is Service
        assert "Ref(Type)" in str(error)


class TestWireboxProviderReturnedError:
    def test_keeps_original_error(self) -> None:
        original = ValueError("broken")
        error = WireboxProviderReturnedError(build_service, original)

        assert error.provider is build_service
        assert error.error is original
        assert str(error).endswith("failed: broken")


class TestWireboxNilProviderResultError:
    def test_names_provider(self) -> None:
        error = WireboxNilProviderResultError(build_service)

        assert "build_service" in str(error)
        assert error.provider is build_service


class TestWireboxInvalidTagError:
    def test_keeps_field_and_marker(self) -> None:
        error = WireboxInvalidTagError("database", Wire("typo"))

        assert error.field_name == "database"
        assert error.marker == Wire("typo")
        assert "`database`" in str(error)


class TestWireboxUnresolvedFieldError:
    def test_message_includes_lookup_name(self) -> None:
        error = WireboxUnresolvedFieldError("primary", Service, "primary")

        assert error.field_name == "primary"
        assert error.field_type is Service
        assert error.lookup_name == "primary"
        assert str(error) == (
            f"cannot resolve field `primary: {__name__}.Service` under name `primary`"
        )
