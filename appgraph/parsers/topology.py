"""
Topology file loader.

A topology file is YAML with a top-level ``resources`` list::

    resources:
      - name: db
        kind: mongodb.server
        port: 27017
        password: secret
        databases: [orders]
      - name: cache
        kind: mongodb.connection
        connectionString: mongodb://cache:27017
"""
from typing import Any, Callable, Dict, Optional

import yaml
from rich.console import Console

from appgraph.graph import ResourceGraph
from appgraph.models.errors import TopologyError
from appgraph.resources import mongodb

console = Console(stderr=True)


def _port(spec: Dict[str, Any]) -> Optional[int]:
    value = spec.get("port")
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise TopologyError(f"Invalid port {value!r} for '{spec['name']}'") from None


def _load_server(graph: ResourceGraph, spec: Dict[str, Any]) -> None:
    builder = mongodb.add_mongodb_container(
        graph,
        spec["name"],
        port=_port(spec),
        password=None if spec.get("password") is None else str(spec["password"]),
    )
    for db_name in spec.get("databases") or []:
        mongodb.add_database(builder, str(db_name))


def _load_connection(graph: ResourceGraph, spec: Dict[str, Any]) -> None:
    mongodb.add_mongodb_connection(graph, spec["name"], spec.get("connectionString"))


def _load_database(graph: ResourceGraph, spec: Dict[str, Any]) -> None:
    parent_name = spec.get("parent")
    if not parent_name:
        raise TopologyError(f"Database '{spec['name']}' has no parent")
    parent = graph[parent_name]
    if not isinstance(parent, mongodb.MongoDBContainerResource):
        raise TopologyError(
            f"Database '{spec['name']}' needs a mongodb.server parent, '{parent_name}' is {parent.kind}"
        )
    graph.register(mongodb.MongoDBDatabaseResource(spec["name"], parent))


SUPPORTED_KINDS: Dict[str, Callable[[ResourceGraph, Dict[str, Any]], None]] = {
    "mongodb.server": _load_server,
    "mongodb.connection": _load_connection,
    "mongodb.database": _load_database,
}


def load_topology(data: Any, source: str = "<topology>") -> ResourceGraph:
    if not isinstance(data, dict) or not isinstance(data.get("resources"), list):
        raise TopologyError(f"{source}: expected a mapping with a 'resources' list")

    graph = ResourceGraph()
    for i, spec in enumerate(data["resources"]):
        if not isinstance(spec, dict) or not spec.get("name"):
            raise TopologyError(f"{source}: resource #{i + 1} has no name")
        spec = dict(spec, name=str(spec["name"]))

        kind = spec.get("kind", "")
        loader = SUPPORTED_KINDS.get(kind)
        if loader is None:
            console.print(
                f"[yellow]Warning:[/yellow] skipping resource '{spec['name']}' of unsupported kind '{kind}' in {source}"
            )
            continue
        loader(graph, spec)
    return graph


def parse_file(filepath: str) -> ResourceGraph:
    try:
        with open(filepath, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise TopologyError(f"Failed to read topology {filepath}: {exc}") from exc
    return load_topology(data, filepath)
