#!/usr/bin/env python3
"""
Maximum-flow solvers over a DirectedGraph of integer residual capacities.

Both solvers leave the graph in residual form: every edge's value is its
remaining capacity, and pushing f units along u → v adds f to v → u
(creating that edge if needed).

  EdmondsKarpSolver     BFS shortest augmenting paths, O(V·E²)
  OrToolsMaxFlowSolver  Google OR-Tools SimpleMaxFlow, flows written back
"""

from collections import deque
from typing import Dict, Hashable, List, Optional

from ortools.graph.python import max_flow

from ..logging_config import LoggingFlags, log_if
from .directed_graph import DirectedGraph


def push_flow(graph: DirectedGraph, source, dest, amount: int) -> None:
    """Move `amount` units of residual capacity from source → dest onto dest → source."""
    graph[source, dest] -= amount
    if graph.contains_edge(dest, source):
        graph[dest, source] += amount
    else:
        graph.add_edge(dest, source, amount)


def _check_terminals(graph: DirectedGraph, source, sink) -> None:
    if source not in graph:
        raise KeyError(f"source {source!r} is not in the graph")
    if sink not in graph:
        raise KeyError(f"sink {sink!r} is not in the graph")
    if source == sink:
        raise ValueError("source and sink must be different nodes")


class EdmondsKarpSolver:
    """
    Edmonds–Karp maximum flow.

    Source and sink are passed explicitly; the solver never looks at what
    the nodes represent.
    """

    name = "edmonds-karp"

    def __init__(self):
        self.augmentations = 0

    def solve(self, graph: DirectedGraph, source, sink) -> int:
        """
        Saturate `graph` in place and return the value of the maximum flow.
        """
        _check_terminals(graph, source, sink)
        self.augmentations = 0
        total = 0

        while True:
            path = self.find_augmenting_path(graph, source, sink)
            if path is None:
                break
            bottleneck = self.find_bottleneck(graph, path)
            self.augment(graph, path, bottleneck)
            total += bottleneck
            self.augmentations += 1
            log_if(LoggingFlags.FLOW_DETAILS,
                   f"  augmenting path #{self.augmentations}: {len(path) - 1} edges, bottleneck={bottleneck}")

        return total

    @staticmethod
    def find_augmenting_path(graph: DirectedGraph, source, sink) -> Optional[List[Hashable]]:
        """
        Breadth-first search over edges with positive residual capacity.

        Returns the node sequence source → … → sink, or None if the sink is
        unreachable. Stops as soon as the sink is discovered.
        """
        parents: Dict[Hashable, Optional[Hashable]] = {source: None}
        queue = deque([source])

        while queue:
            current = queue.popleft()
            for edge in graph.outgoing_edges(current):
                if edge.destination in parents or edge.value <= 0:
                    continue
                parents[edge.destination] = current
                if edge.destination == sink:
                    return _build_path(parents, sink)
                queue.append(edge.destination)

        return None

    @staticmethod
    def find_bottleneck(graph: DirectedGraph, path: List[Hashable]) -> int:
        return min(graph[u, v] for u, v in zip(path, path[1:]))

    @staticmethod
    def augment(graph: DirectedGraph, path: List[Hashable], bottleneck: int) -> None:
        for u, v in zip(path, path[1:]):
            push_flow(graph, u, v, bottleneck)


def _build_path(parents: Dict[Hashable, Optional[Hashable]], sink) -> List[Hashable]:
    path = []
    current = sink
    while current is not None:
        path.append(current)
        current = parents[current]
    path.reverse()
    return path


class OrToolsMaxFlowSolver:
    """
    Maximum flow via OR-Tools SimpleMaxFlow

    Same contract as EdmondsKarpSolver: the graph is left in residual form
    and the flow value is returned.
    """

    name = "ortools"

    def solve(self, graph: DirectedGraph, source, sink) -> int:
        _check_terminals(graph, source, sink)
        smf = max_flow.SimpleMaxFlow()

        node_to_index = {node: idx for idx, node in enumerate(graph.nodes)}

        # only arcs with spare capacity take part
        arcs = {}
        for node in list(graph.nodes):
            for edge in graph.outgoing_edges(node):
                if edge.value <= 0:
                    continue
                arc = smf.add_arc_with_capacity(
                    node_to_index[edge.source],
                    node_to_index[edge.destination],
                    edge.value,
                )
                arcs[arc] = (edge.source, edge.destination)

        status = smf.solve(node_to_index[source], node_to_index[sink])
        if status != smf.OPTIMAL:
            raise RuntimeError(f"OR-Tools max flow finished with status {status}")

        for arc, (u, v) in arcs.items():
            flow = smf.flow(arc)
            if flow > 0:
                push_flow(graph, u, v, flow)

        return smf.optimal_flow()


_SOLVERS = {
    EdmondsKarpSolver.name: EdmondsKarpSolver,
    OrToolsMaxFlowSolver.name: OrToolsMaxFlowSolver,
}


def get_solver(name: str):
    try:
        return _SOLVERS[name]()
    except KeyError:
        raise ValueError(f"unknown max-flow solver {name!r} (choose from {', '.join(sorted(_SOLVERS))})") from None


def available_solvers() -> List[str]:
    return sorted(_SOLVERS)
