"""
Allocated-endpoints file loader.

Stands in for the launcher that assigns host ports; maps resource names to
the endpoints it allocated::

    db:
      - address: 127.0.0.1
        port: 27017
"""
from typing import Any, Dict, List

import yaml
from rich.console import Console

from appgraph.endpoints import Endpoint, allocate_endpoints
from appgraph.graph import ResourceGraph
from appgraph.models.errors import TopologyError

console = Console(stderr=True)


def _to_endpoints(name: str, entries: Any, source: str) -> List[Endpoint]:
    if not isinstance(entries, list):
        entries = [entries]
    endpoints = []
    for e in entries:
        if not isinstance(e, dict) or "address" not in e or "port" not in e:
            raise TopologyError(f"{source}: endpoint of '{name}' needs 'address' and 'port'")
        try:
            port = int(e["port"])
        except (TypeError, ValueError):
            raise TopologyError(f"{source}: invalid port {e['port']!r} for '{name}'") from None
        endpoints.append(Endpoint(address=str(e["address"]), port=port))
    return endpoints


def apply_endpoints(graph: ResourceGraph, data: Any, source: str = "<endpoints>") -> int:
    """Attach allocated endpoints to the graph; returns how many resources received any."""
    if data is None:
        return 0
    if not isinstance(data, dict):
        raise TopologyError(f"{source}: expected a mapping of resource name to endpoints")

    applied = 0
    allocations: Dict[str, List[Endpoint]] = {
        str(name): _to_endpoints(str(name), entries, source) for name, entries in data.items()
    }
    for name, endpoints in allocations.items():
        resource = graph.get(name)
        if resource is None:
            console.print(f"[yellow]Warning:[/yellow] endpoints for unknown resource '{name}' in {source}, skipping.")
            continue
        allocate_endpoints(graph, resource, endpoints)
        applied += 1
    return applied


def parse_file(filepath: str, graph: ResourceGraph) -> int:
    try:
        with open(filepath, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise TopologyError(f"Failed to read endpoints {filepath}: {exc}") from exc
    return apply_endpoints(graph, data, filepath)
