"""
Topological ordering of a provenance store.

Edges run from an input to every computed node that lists it, counted
only when the input is itself stored; dangling references are zero
leaves, not edges.
"""

import logging
from typing import Dict, List, Mapping, Sequence, Set

import networkx as nx

from models.traced import TracedValue

logger = logging.getLogger(__name__)


class CycleDetectedError(Exception):
    """The store's dependency graph has a cycle; a collector bug."""

    def __init__(self, node_ids: Sequence[str]):
        self.node_ids = tuple(node_ids)
        super().__init__(f"Cycle detected involving: {', '.join(self.node_ids)}")


def build_dependency_graph(values: Mapping[str, TracedValue]) -> nx.DiGraph:
    """Directed graph of input -> node edges between stored nodes, in store order."""
    graph = nx.DiGraph()
    graph.add_nodes_from(values)
    for node_id, value in values.items():
        for input_id in value.inputs:
            if input_id in values:
                graph.add_edge(input_id, node_id)
    return graph


def _unplaceable(graph: nx.DiGraph) -> Set[str]:
    """Nodes on a cycle, plus everything downstream of one."""
    stuck: Set[str] = set()
    for component in nx.strongly_connected_components(graph):
        if len(component) > 1:
            stuck.update(component)
    stuck.update(nx.nodes_with_selfloops(graph))
    for node_id in list(stuck):
        stuck.update(nx.descendants(graph, node_id))
    return stuck


def topological_sort(values: Mapping[str, TracedValue]) -> List[str]:
    """
    Order node ids so every stored input precedes the nodes built from it.

    Among nodes that are ready at the same time, the one stored first comes
    first, so the order is stable across runs.

    Raises:
        CycleDetectedError: Listing every node that could not be placed,
            in store order
    """
    graph = build_dependency_graph(values)
    position: Dict[str, int] = {node_id: i for i, node_id in enumerate(values)}

    try:
        return list(nx.lexicographical_topological_sort(graph, key=position.__getitem__))
    except nx.NetworkXUnfeasible:
        stuck = _unplaceable(graph)
        remaining = [node_id for node_id in values if node_id in stuck]
        logger.error(f"Provenance graph has a cycle among {len(remaining)} nodes: {remaining}")
        raise CycleDetectedError(remaining)
