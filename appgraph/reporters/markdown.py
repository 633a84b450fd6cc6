"""
Markdown + Mermaid topology report generator.

Lists resources with their manifest type and allocated endpoints; never
includes credentials or connection strings.
"""
import re
from typing import Dict, List

from jinja2 import Environment

from appgraph import __version__
from appgraph.endpoints import try_get_allocated_endpoints
from appgraph.graph import ResourceGraph
from appgraph.models.resource import ChildResource, ConnectionResource, Resource
from appgraph.publishers.manifest import publish


def _sanitize_node_id(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9_]", "_", name)


def _node_ids(graph: ResourceGraph) -> Dict[str, str]:
    """Map resource names to Mermaid ids, suffixing ids that sanitize to the same text."""
    ids: Dict[str, str] = {}
    taken = set()
    for r in graph:
        base = _sanitize_node_id(r.name)
        node_id, n = base, 2
        while node_id in taken:
            node_id, n = f"{base}_{n}", n + 1
        taken.add(node_id)
        ids[r.name] = node_id
    return ids


def _label(name: str) -> str:
    return '"' + name.replace('"', "#quot;") + '"'


def _node_shape(r: Resource) -> str:
    """Return a Mermaid node definition string (without ID)."""
    if isinstance(r, ChildResource):
        return f"[({_label(r.name)})]"
    if isinstance(r, ConnectionResource):
        return f"(({_label(r.name)}))"
    return f"[{_label(r.name)}]"


def _build_mermaid(graph: ResourceGraph) -> str:
    ids = _node_ids(graph)
    lines = ["flowchart LR"]
    for r in graph:
        lines.append(f"    {ids[r.name]}{_node_shape(r)}")
    for r in graph:
        if isinstance(r, ChildResource):
            lines.append(f"    {ids[r.parent_name]} --> {ids[r.name]}")
    return "\n".join(lines)


def inventory(graph: ResourceGraph) -> List[Dict[str, str]]:
    rows = []
    for r in graph:
        fragment = publish(r, graph) or {}
        _, endpoints = try_get_allocated_endpoints(r)
        rows.append({
            "name": r.name,
            "kind": r.kind,
            "type": fragment.get("type") or "-",
            "parent": r.parent_name if isinstance(r, ChildResource) else "",
            "endpoints": ", ".join(e.endpoint_string for e in endpoints),
        })
    return rows


_TEMPLATE = """\
# Application Topology

**Source:** {{ source }}
**Tool:** appgraph v{{ version }}

---

## Resources

| # | Resource | Kind | Manifest type | Parent | Endpoints |
|---|----------|------|---------------|--------|-----------|
{% for r in rows %}| {{ loop.index }} | `{{ r.name }}` | {{ r.kind }} | `{{ r.type }}` | {{ r.parent or "-" }} | {{ r.endpoints or "-" }} |
{% endfor %}

## Topology Diagram

```mermaid
{{ mermaid }}
```
"""


def build_report(graph: ResourceGraph, source_path: str) -> str:
    graph.freeze()
    env = Environment(autoescape=False)
    template = env.from_string(_TEMPLATE)

    return template.render(
        source=source_path,
        version=__version__,
        rows=inventory(graph),
        mermaid=_build_mermaid(graph),
    )
