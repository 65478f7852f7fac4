"""Public graph API surface."""

from nofile.graph.dependency_graph import DependencyGraph
from nofile.graph.io import shared_sources, to_networkx, write_graph_json

__all__ = [
    "DependencyGraph",
    "shared_sources",
    "to_networkx",
    "write_graph_json",
]
