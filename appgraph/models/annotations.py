"""
Annotations: typed metadata appended to resources while the graph is built.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class Protocol(str, Enum):
    TCP = "tcp"
    UDP = "udp"


class Annotation:
    """Marker base class for everything that can be attached to a resource."""


@dataclass(frozen=True)
class ServiceBindingAnnotation(Annotation):
    protocol: Protocol = Protocol.TCP
    port: Optional[int] = None            # externally visible host port
    container_port: Optional[int] = None  # port inside the container
    name: Optional[str] = None
    scheme: Optional[str] = None

    @property
    def binding_name(self) -> str:
        return self.name or self.scheme or self.protocol.value


@dataclass(frozen=True)
class ContainerImageAnnotation(Annotation):
    image: str
    tag: str = "latest"
    registry: Optional[str] = None

    @property
    def reference(self) -> str:
        ref = f"{self.image}:{self.tag}"
        return f"{self.registry}/{ref}" if self.registry else ref


@dataclass(frozen=True)
class AllocatedEndpointAnnotation(Annotation):
    """Written by the external allocator once a binding has a reachable address."""
    name: str
    address: str
    port: int
    protocol: Protocol = Protocol.TCP


@dataclass(frozen=True)
class ManifestPublishingCallbackAnnotation(Annotation):
    callback: Callable
