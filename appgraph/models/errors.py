"""
Typed errors raised while building, resolving and publishing a resource graph.
"""
from typing import Optional


class AppGraphError(RuntimeError):
    """Base error for the resource graph."""


class ResourceError(AppGraphError):
    """An error tied to one named resource."""

    def __init__(self, resource_name: str, message: str):
        super().__init__(f"{message} (resource '{resource_name}')")
        self.resource_name = resource_name


class DuplicateResourceNameError(ResourceError):
    def __init__(self, resource_name: str):
        super().__init__(resource_name, "A resource with this name is already registered")


class GraphFrozenError(AppGraphError):
    """The graph was mutated after publishing started."""


class NoEndpointsAllocatedError(ResourceError):
    def __init__(self, resource_name: str, reason: str = "No allocated endpoints"):
        super().__init__(resource_name, reason)


class AmbiguousEndpointError(ResourceError):
    def __init__(self, resource_name: str, count: int):
        super().__init__(resource_name, f"Expected exactly one endpoint, found {count}")
        self.count = count


class ParentConnectionStringUnavailableError(ResourceError):
    def __init__(self, resource_name: str, parent_name: str):
        super().__init__(
            resource_name, f"Parent resource '{parent_name}' has no connection string"
        )
        self.parent_name = parent_name


class ManifestPublishingError(ResourceError):
    def __init__(self, resource_name: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(resource_name, f"Failed to publish manifest fragment{detail}")
        self.cause = cause


class TopologyError(AppGraphError):
    """A topology or endpoints file could not be read."""


class ConfigError(AppGraphError):
    """A configuration file could not be read."""


class UnknownResourceError(ResourceError):
    def __init__(self, resource_name: str):
        super().__init__(resource_name, "No such resource is registered")
