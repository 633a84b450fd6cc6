from typing import List, Optional, Protocol, Type, TypeVar, runtime_checkable

from appgraph.models.annotations import Annotation

A = TypeVar("A", bound=Annotation)


class Resource:
    """A named node in the application topology."""

    kind = "resource"

    def __init__(self, name: str):
        if not name:
            raise ValueError("Resource name must not be empty")
        self._name = name
        self._annotations: List[Annotation] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def annotations(self) -> List[Annotation]:
        return list(self._annotations)

    def add_annotation(self, annotation: Annotation) -> None:
        if not isinstance(annotation, Annotation):
            raise TypeError(f"Not an annotation: {annotation!r}")
        self._annotations.append(annotation)

    def get_annotations(self, kind: Type[A]) -> List[A]:
        return [a for a in self._annotations if isinstance(a, kind)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"


class ContainerResource(Resource):
    kind = "container"


class ConnectionResource(Resource):
    kind = "connection"

    def __init__(self, name: str, connection_string: Optional[str] = None):
        super().__init__(name)
        self._connection_string = connection_string

    @property
    def supplied_connection_string(self) -> Optional[str]:
        return self._connection_string


class ChildResource(Resource):
    """
    A resource logically owned by a parent resource.

    Only the parent's name is stored; the graph resolves it back to the
    parent object, so parent and child never reference each other.
    """

    kind = "child"
    parent_type: Type[Resource] = Resource

    def __init__(self, name: str, parent: Resource):
        if not isinstance(parent, self.parent_type):
            raise TypeError(
                f"{type(self).__name__} requires a {self.parent_type.__name__} parent, "
                f"got {type(parent).__name__}"
            )
        super().__init__(name)
        self._parent_name = parent.name

    @property
    def parent_name(self) -> str:
        return self._parent_name


@runtime_checkable
class ResourceWithConnectionString(Protocol):
    def get_connection_string(self, graph) -> Optional[str]:
        ...


@runtime_checkable
class Publishable(Protocol):
    """Capability of resources that know how to write their own manifest fragment."""

    def write_to_manifest(self, context) -> None:
        ...
