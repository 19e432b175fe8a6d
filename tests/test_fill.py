from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Annotated, Any

import attrs
import pytest

from wirebox import (
    BY_NAME,
    ByName,
    ByType,
    Container,
    Ref,
    Wire,
    WireboxError,
    WireboxInvalidFillTargetError,
    WireboxInvalidTagError,
    WireboxNotFoundError,
    WireboxUnresolvedFieldError,
)

if TYPE_CHECKING:
    from decimal import Decimal as OnlyForTyping


class Database:
    pass


class Cache:
    pass


class Service:
    database: ByType[Database]
    cache: Annotated[Cache, Wire("type")]
    plain: Database


class NamedService:
    primary: ByName[Database]
    replica: Annotated[Database, BY_NAME]


class PrivateFields:
    _database: ByType[Database]


@dataclass(frozen=True)
class FrozenService:
    name: str
    database: ByType[Database] = field(init=False)


@attrs.define(frozen=True)
class SlottedAttrsService:
    name: str
    database: ByType[Database] = attrs.field(init=False)


class SlottedService:
    __slots__ = ("database",)

    database: ByType[Database]


class NotWritable:
    __slots__ = ()

    database: ByType[Database]


class InvalidTag:
    database: Annotated[Database, Wire("typo")]


class PartiallyResolvable:
    database: ByType[Database]
    cache: ByType[Cache]


class UnresolvableAnnotation:
    database: ByType[MissingType]  # type: ignore[name-defined]  # noqa: F821


class Client:
    cache: OnlyForTyping


class Reporter:
    database: ByType[Database]
    total: OnlyForTyping


def build_client() -> Client:
    return Client()


class BaseService:
    database: ByType[Database]


class DerivedService(BaseService):
    cache: ByType[Cache]


@pytest.fixture()
def wired_container(container: Container) -> Container:
    container.singleton(build_database)
    container.singleton(build_cache)
    return container


def build_database() -> Database:
    return Database()


def build_cache() -> Cache:
    return Cache()


class TestFillFields:
    def test_marked_fields_are_wired(self, wired_container: Container) -> None:
        service = Service()

        wired_container.fill(service)

        assert service.database is wired_container.get(Database)
        assert service.cache is wired_container.get(Cache)

    def test_unmarked_fields_are_untouched(self, wired_container: Container) -> None:
        service = Service()

        wired_container.fill(service)

        assert not hasattr(service, "plain")

    def test_name_marker_uses_field_identifier(self, container: Container) -> None:
        primary = Database()
        replica = Database()
        container.named_singleton("primary", lambda_returning(primary))
        container.named_singleton("replica", lambda_returning(replica))
        service = NamedService()

        container.fill(service)

        assert service.primary is primary
        assert service.replica is replica

    def test_private_fields_are_wired(self, wired_container: Container) -> None:
        target = PrivateFields()

        wired_container.fill(target)

        assert isinstance(target._database, Database)

    def test_frozen_dataclass_fields_are_wired(self, wired_container: Container) -> None:
        target = FrozenService(name="frozen")

        wired_container.fill(target)

        assert isinstance(target.database, Database)

    def test_frozen_slotted_attrs_fields_are_wired(self, wired_container: Container) -> None:
        target = SlottedAttrsService(name="attrs")

        wired_container.fill(target)

        assert isinstance(target.database, Database)

    def test_slotted_fields_are_wired(self, wired_container: Container) -> None:
        target = SlottedService()

        wired_container.fill(target)

        assert isinstance(target.database, Database)

    def test_inherited_fields_are_wired(self, wired_container: Container) -> None:
        target = DerivedService()

        wired_container.fill(target)

        assert isinstance(target.database, Database)
        assert isinstance(target.cache, Cache)


class TestFillTargets:
    @pytest.mark.parametrize("depth", [1, 2, 3, 4])
    def test_ref_boxes_are_unwrapped(self, wired_container: Container, depth: int) -> None:
        service = Service()
        target: Any = service
        for _ in range(depth):
            target = Ref(Service, target)

        wired_container.fill(target)

        assert isinstance(service.database, Database)

    def test_too_deeply_nested_ref_is_rejected(self, wired_container: Container) -> None:
        target: Any = Service()
        for _ in range(5):
            target = Ref(Service, target)

        with pytest.raises(WireboxInvalidFillTargetError):
            wired_container.fill(target)

    @pytest.mark.parametrize(
        "target",
        [
            pytest.param(None, id="none"),
            pytest.param(42, id="int"),
            pytest.param("service", id="str"),
            pytest.param({"database": None}, id="dict"),
            pytest.param(Service, id="class"),
            pytest.param(Ref(Service), id="empty-ref"),
        ],
    )
    def test_non_objects_are_rejected(self, wired_container: Container, target: Any) -> None:
        with pytest.raises(WireboxInvalidFillTargetError):
            wired_container.fill(target)

    def test_field_without_storage_is_rejected(self, wired_container: Container) -> None:
        with pytest.raises(WireboxInvalidFillTargetError, match="is not writable"):
            wired_container.fill(NotWritable())

    def test_unresolvable_annotations_are_rejected(self, wired_container: Container) -> None:
        with pytest.raises(WireboxInvalidFillTargetError, match="cannot evaluate"):
            wired_container.fill(UnresolvableAnnotation())

    def test_typing_only_annotations_on_unmarked_fields_are_ignored(
        self,
        wired_container: Container,
    ) -> None:
        reporter = Reporter()

        wired_container.fill(reporter)

        assert reporter.database is wired_container.get(Database)
        assert not hasattr(reporter, "total")

    def test_provider_result_with_typing_only_annotations_resolves(
        self,
        container: Container,
    ) -> None:
        container.singleton(build_client)

        client = container.get(Client)

        assert isinstance(client, Client)
        assert not hasattr(client, "cache")


class TestFillFailures:
    def test_invalid_marker_names_field(self, wired_container: Container) -> None:
        with pytest.raises(WireboxInvalidTagError, match="`database`") as exc_info:
            wired_container.fill(InvalidTag())

        assert exc_info.value.field_name == "database"
        assert exc_info.value.marker == Wire("typo")

    def test_unresolved_field_carries_field_and_cause(self, container: Container) -> None:
        with pytest.raises(WireboxUnresolvedFieldError) as exc_info:
            container.fill(Service())

        assert exc_info.value.field_name == "database"
        assert exc_info.value.field_type is Database
        assert isinstance(exc_info.value.__cause__, WireboxNotFoundError)

    def test_fields_written_before_failure_are_kept(self, container: Container) -> None:
        container.singleton(build_database)
        target = PartiallyResolvable()

        with pytest.raises(WireboxUnresolvedFieldError, match="cache"):
            container.fill(target)

        assert isinstance(target.database, Database)
        assert not hasattr(target, "cache")

    def test_failure_is_reported_once(
        self,
        wirebox_container: Container,
        wirebox_errors: list[WireboxError],
    ) -> None:
        wirebox_container.fill(Service())

        assert len(wirebox_errors) == 1
        assert isinstance(wirebox_errors[0], WireboxUnresolvedFieldError)

    def test_provider_result_with_invalid_marker_fails_resolution(
        self,
        container: Container,
    ) -> None:
        container.singleton(build_database)

        def build_invalid() -> InvalidTag:
            return InvalidTag()

        container.singleton(build_invalid)

        with pytest.raises(WireboxInvalidTagError):
            container.get(InvalidTag)


def lambda_returning(value: Database) -> Any:
    def build() -> Database:
        return value

    return build
