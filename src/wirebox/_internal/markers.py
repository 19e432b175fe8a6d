from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Generic, NamedTuple, TypeVar, get_args, get_origin

T = TypeVar("T")
_ANNOTATED_MARKER_MIN_ARGS = 2

INJECT_BY_TYPE = "type"
INJECT_BY_NAME = "name"


class Wire(NamedTuple):
    """Declare how a field is populated by ``Container.fill``.

    Attach ``Wire`` metadata to a ``typing.Annotated`` class annotation. Only
    two values are recognized: ``"type"`` resolves the field by its declared
    type under the default name, ``"name"`` resolves it by its declared type
    under the field's own identifier. Any other value makes ``fill`` fail with
    ``WireboxInvalidTagError``.

    Examples:
        .. code-block:: python

            class Robert:
                dale: Annotated[Partner, Wire("name")]
                cache: Annotated[Cache, Wire("type")]

    """

    by: str


BY_TYPE = Wire(INJECT_BY_TYPE)
BY_NAME = Wire(INJECT_BY_NAME)


if TYPE_CHECKING:
    ByType = Annotated[T, BY_TYPE]
    """Shorthand for ``Annotated[T, Wire("type")]``."""

    ByName = Annotated[T, BY_NAME]
    """Shorthand for ``Annotated[T, Wire("name")]``."""

else:

    class ByType:
        """Mark a field for injection by its declared type.

        At runtime ``ByType[T]`` resolves to ``Annotated[T, Wire("type")]``.
        """

        def __class_getitem__(cls, item: T) -> Annotated[T, Wire]:
            return _build_annotated((item, BY_TYPE))

    class ByName:
        """Mark a field for injection by its declared type and field name.

        At runtime ``ByName[T]`` resolves to ``Annotated[T, Wire("name")]``.
        """

        def __class_getitem__(cls, item: T) -> Annotated[T, Wire]:
            return _build_annotated((item, BY_NAME))


class Ref(Generic[T]):
    """Hold a reference to a value the container writes into.

    ``Ref`` is what ``Container.resolve`` assigns into, and ``Container.fill``
    unwraps up to a few nested ``Ref`` boxes to reach the object to wire.

    Examples:
        .. code-block:: python

            shape_ref = Ref(Shape)
            container.resolve(shape_ref)
            shape_ref.value.area()

    """

    __slots__ = ("target", "value")

    def __init__(self, target: type[T] | Any, value: T | None = None) -> None:
        self.target = target
        self.value = value

    def __repr__(self) -> str:
        target_name = getattr(self.target, "__qualname__", repr(self.target))
        return f"Ref[{target_name}]({self.value!r})"


def extract_wire_marker(annotation: Any) -> tuple[Any, Wire] | None:
    """Return ``(declared type, marker)`` for annotations carrying a ``Wire`` marker."""
    if get_origin(annotation) is not Annotated:
        return None
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return None
    marker = next((item for item in annotation_args[1:] if isinstance(item, Wire)), None)
    if marker is None:
        return None
    return annotation_args[0], marker


def _build_annotated(params: tuple[object, ...]) -> Any:
    """Return Annotated[...] with a pre-built params tuple (Py 3.10+ compatible)."""
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]
