"""
Resource registry: owns every resource of an application topology.
"""
from typing import Callable, Dict, Iterator, List, Optional, Type, TypeVar

from appgraph.models.annotations import (
    AllocatedEndpointAnnotation,
    Annotation,
    ManifestPublishingCallbackAnnotation,
    Protocol,
    ServiceBindingAnnotation,
)
from appgraph.models.errors import (
    DuplicateResourceNameError,
    GraphFrozenError,
    UnknownResourceError,
)
from appgraph.models.resource import ChildResource, Resource

A = TypeVar("A", bound=Annotation)


class ResourceGraph:
    def __init__(self):
        self._resources: Dict[str, Resource] = {}
        self._frozen = False

    def register(self, resource: Resource) -> "ResourceBuilder":
        self._check_mutable()
        if resource.name in self._resources:
            raise DuplicateResourceNameError(resource.name)
        if isinstance(resource, ChildResource):
            parent = self._resources.get(resource.parent_name)
            if parent is None:
                raise UnknownResourceError(resource.parent_name)
            if not isinstance(parent, resource.parent_type):
                raise TypeError(
                    f"{type(resource).__name__} '{resource.name}' requires a "
                    f"{resource.parent_type.__name__} parent, '{parent.name}' is {type(parent).__name__}"
                )
        self._resources[resource.name] = resource
        return ResourceBuilder(self, resource)

    def attach(self, resource: Resource, annotation: Annotation) -> None:
        self._check_mutable()
        self._check_member(resource)
        resource.add_annotation(annotation)

    def record_allocation(self, resource: Resource, allocation: AllocatedEndpointAnnotation) -> None:
        """Record allocator output; still allowed once the graph is frozen."""
        if not isinstance(allocation, AllocatedEndpointAnnotation):
            raise TypeError(f"Not an endpoint allocation: {allocation!r}")
        self._check_member(resource)
        resource.add_annotation(allocation)

    def get_annotations(self, resource: Resource, kind: Type[A]) -> List[A]:
        return resource.get_annotations(kind)

    def get(self, name: str) -> Optional[Resource]:
        return self._resources.get(name)

    def __getitem__(self, name: str) -> Resource:
        try:
            return self._resources[name]
        except KeyError:
            raise UnknownResourceError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._resources

    def __iter__(self) -> Iterator[Resource]:
        return iter(list(self._resources.values()))

    def __len__(self) -> int:
        return len(self._resources)

    def parent_of(self, child: ChildResource) -> Resource:
        return self[child.parent_name]

    def children_of(self, resource: Resource) -> List[ChildResource]:
        return [
            r for r in self._resources.values()
            if isinstance(r, ChildResource) and r.parent_name == resource.name
        ]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Stop accepting registrations and annotations."""
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise GraphFrozenError("The resource graph is frozen once publishing starts")

    def _check_member(self, resource: Resource) -> None:
        if self._resources.get(resource.name) is not resource:
            raise UnknownResourceError(resource.name)


class ResourceBuilder:
    """Fluent handle returned from ``ResourceGraph.register``."""

    def __init__(self, graph: ResourceGraph, resource: Resource):
        self.graph = graph
        self.resource = resource

    def with_annotation(self, annotation: Annotation) -> "ResourceBuilder":
        self.graph.attach(self.resource, annotation)
        return self

    def with_service_binding(
        self,
        protocol: Protocol = Protocol.TCP,
        port: Optional[int] = None,
        container_port: Optional[int] = None,
        name: Optional[str] = None,
        scheme: Optional[str] = None,
    ) -> "ResourceBuilder":
        return self.with_annotation(
            ServiceBindingAnnotation(
                protocol=protocol,
                port=port,
                container_port=container_port,
                name=name,
                scheme=scheme,
            )
        )

    def with_manifest_publishing_callback(self, callback: Callable) -> "ResourceBuilder":
        return self.with_annotation(ManifestPublishingCallbackAnnotation(callback))
