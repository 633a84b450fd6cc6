"""
Endpoint resolution.

Endpoints are allocated outside this package (a container runtime picking
host ports, for instance) and recorded on the resource as
``AllocatedEndpointAnnotation``s. Everything here only reads that state:
nothing waits for allocation or retries.
"""
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from appgraph.models.annotations import (
    AllocatedEndpointAnnotation,
    Protocol,
    ServiceBindingAnnotation,
)
from appgraph.models.errors import AmbiguousEndpointError, NoEndpointsAllocatedError
from appgraph.models.resource import Resource


@dataclass(frozen=True)
class Endpoint:
    address: str
    port: int

    @property
    def endpoint_string(self) -> str:
        return f"{self.address}:{self.port}"


def try_get_allocated_endpoints(resource: Resource) -> Tuple[bool, List[Endpoint]]:
    allocated = resource.get_annotations(AllocatedEndpointAnnotation)
    endpoints = [Endpoint(address=a.address, port=a.port) for a in allocated]
    return bool(endpoints), endpoints


def resolve_endpoints(resource: Resource) -> List[Endpoint]:
    if not resource.get_annotations(ServiceBindingAnnotation):
        raise NoEndpointsAllocatedError(resource.name, "No service binding declared")

    ok, endpoints = try_get_allocated_endpoints(resource)
    if not ok:
        raise NoEndpointsAllocatedError(resource.name)
    return endpoints


def resolve_single_endpoint(resource: Resource) -> Endpoint:
    """Return the one endpoint of a single-binding resource; never guess between several."""
    bindings = resource.get_annotations(ServiceBindingAnnotation)
    if len(bindings) > 1:
        raise AmbiguousEndpointError(resource.name, len(bindings))

    endpoints = resolve_endpoints(resource)
    if len(endpoints) != 1:
        raise AmbiguousEndpointError(resource.name, len(endpoints))
    return endpoints[0]


def allocate_endpoints(graph, resource: Resource, endpoints: Iterable[Endpoint]) -> None:
    """Record allocator output on a resource, pairing endpoints with bindings in order."""
    bindings = resource.get_annotations(ServiceBindingAnnotation)
    for i, ep in enumerate(endpoints):
        if i < len(bindings):
            name, protocol = bindings[i].binding_name, bindings[i].protocol
        else:
            name, protocol = f"endpoint{i}", Protocol.TCP
        graph.record_allocation(
            resource,
            AllocatedEndpointAnnotation(
                name=name, address=ep.address, port=ep.port, protocol=protocol
            ),
        )
