"""Export helpers turning a dependency snapshot into a networkx graph."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Union

import networkx as nx

logger = logging.getLogger("nofile.graph.io")

ENTRYPOINT_NODE = "entrypoint"
SOURCE_NODE = "source"
LINK_EDGE = "links"


def to_networkx(snapshot: Dict[str, Iterable[str]]) -> nx.DiGraph:
    """Build a directed graph from ``{entrypoint: dependency paths}``.

    Nodes are keyed by path. Every edge points from an entrypoint to a
    source file that must be linked into its executable. A path that is
    both an entrypoint and someone's dependency keeps the entrypoint type.

    Args:
        snapshot: Mapping as returned by ``DependencyGraph.snapshot()``.

    Returns:
        nx.DiGraph: Graph with ``type`` on nodes and ``kind`` on edges.
    """
    graph = nx.DiGraph()
    for entrypoint in snapshot:
        graph.add_node(entrypoint, type=ENTRYPOINT_NODE)

    for entrypoint, dependencies in snapshot.items():
        for dependency in dependencies:
            if not graph.has_node(dependency):
                graph.add_node(dependency, type=SOURCE_NODE)
            graph.add_edge(entrypoint, dependency, kind=LINK_EDGE)

    logger.debug(
        "Projected dependency snapshot: %d nodes, %d edges",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph


def shared_sources(graph: nx.DiGraph) -> List[str]:
    """Return source nodes linked into more than one executable, sorted."""
    return sorted(
        node
        for node, attrs in graph.nodes(data=True)
        if attrs.get("type") == SOURCE_NODE and graph.in_degree(node) > 1
    )


def write_graph_json(snapshot: Dict[str, Iterable[str]], path: Union[str, Path]) -> Path:
    """Write ``snapshot`` as node-link JSON and return the output path."""
    output = Path(path)
    graph = to_networkx(snapshot)
    data = nx.node_link_data(graph, edges="links")
    data["shared_sources"] = shared_sources(graph)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    logger.info("Dependency graph written to %s", output)
    return output


__all__ = [
    "ENTRYPOINT_NODE",
    "LINK_EDGE",
    "SOURCE_NODE",
    "shared_sources",
    "to_networkx",
    "write_graph_json",
]
