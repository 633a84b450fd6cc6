"""
JSON deployment manifest.
"""
import json
from typing import Optional

from appgraph.graph import ResourceGraph
from appgraph.publishers import manifest


def build_manifest(graph: ResourceGraph, max_workers: Optional[int] = None) -> str:
    return json.dumps(manifest.build_manifest(graph, max_workers), indent=2) + "\n"
