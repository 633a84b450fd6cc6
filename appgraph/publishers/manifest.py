"""
Manifest generation: one fragment per resource, assembled in registration order.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from rich.console import Console

from appgraph.graph import ResourceGraph
from appgraph.models.annotations import ManifestPublishingCallbackAnnotation
from appgraph.models.errors import AppGraphError, ManifestPublishingError
from appgraph.models.resource import Publishable, Resource

console = Console(stderr=True)


class ManifestWriter:
    """Ordered sink for the fields of a single fragment."""

    def __init__(self):
        self._fields: Dict[str, Any] = {}

    def write_string(self, key: str, value: Optional[str]) -> None:
        self._fields[key] = value

    def write_number(self, key: str, value: int) -> None:
        self._fields[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._fields)


class ManifestPublishingContext:
    def __init__(self, graph: ResourceGraph, resource: Resource, writer: ManifestWriter):
        self.graph = graph
        self.resource = resource
        self.writer = writer


def publish(resource: Resource, graph: ResourceGraph) -> Optional[Dict[str, Any]]:
    """
    Compute the manifest fragment for ``resource``.

    A registered publishing callback takes precedence over the resource's own
    ``write_to_manifest``. Returns None for resources with neither. The
    fragment is only returned once complete; a failure raises
    ManifestPublishingError naming the resource.
    """
    callbacks = resource.get_annotations(ManifestPublishingCallbackAnnotation)
    if callbacks:
        write = callbacks[-1].callback
    elif isinstance(resource, Publishable):
        write = resource.write_to_manifest
    else:
        return None

    writer = ManifestWriter()
    try:
        write(ManifestPublishingContext(graph, resource, writer))
    except AppGraphError as exc:
        raise ManifestPublishingError(resource.name, exc) from exc
    return writer.to_dict()


def build_manifest(graph: ResourceGraph, max_workers: Optional[int] = None) -> Dict[str, Any]:
    graph.freeze()
    resources: List[Resource] = list(graph)

    if max_workers and max_workers > 1 and len(resources) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            fragments = list(pool.map(lambda r: publish(r, graph), resources))
    else:
        fragments = [publish(r, graph) for r in resources]

    entries: Dict[str, Any] = {}
    for r, fragment in zip(resources, fragments):
        if fragment is None:
            console.print(f"[dim]Skipping resource without manifest support:[/dim] {r.name}")
            continue
        entries[r.name] = fragment
    return {"resources": entries}
