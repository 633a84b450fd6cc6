"""
YAML deployment manifest, same structure as the JSON one.
"""
from typing import Optional

import yaml

from appgraph.graph import ResourceGraph
from appgraph.publishers import manifest


def build_manifest(graph: ResourceGraph, max_workers: Optional[int] = None) -> str:
    return yaml.safe_dump(
        manifest.build_manifest(graph, max_workers),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
