#!/usr/bin/env python3
"""
Generic directed graph with per-edge values.

Storage:
  adjacency: node → deque of destinations (most recently added first)
  edges:     (source, destination) → value

Nodes carry no outgoing-edge state of their own, so any hashable value
(an int, a tuple, a frozen dataclass) can be used as a node.
"""

from collections import deque
from typing import Deque, Dict, Generic, Hashable, Iterator, KeysView, NamedTuple, Optional, Tuple, TypeVar

N = TypeVar("N", bound=Hashable)
E = TypeVar("E")


class Edge(NamedTuple):
    """One outgoing edge as seen by `DirectedGraph.outgoing_edges`."""
    source: Hashable
    destination: Hashable
    value: object


class DirectedGraph(Generic[N, E]):
    """
    Directed graph backed by adjacency lists plus an edge-value dictionary.

    Self-loops and parallel edges are rejected; an edge's value is updated
    in place with ``graph[src, dst] = value``.
    """

    def __init__(self):
        self._adjacency: Dict[N, Deque[N]] = {}
        self._edges: Dict[Tuple[N, N], E] = {}

    def add_node(self, node: N) -> None:
        """
        Register a node with no outgoing edges.

        Adding a node twice is an error (ValueError), not a no-op.
        """
        if node is None:
            raise ValueError("node must not be None")
        if node in self._adjacency:
            raise ValueError(f"node {node!r} is already in the graph")
        self._adjacency[node] = deque()

    def add_edge(self, source: N, dest: N, value: E) -> None:
        """
        Add the edge source → dest carrying `value`.

        Either endpoint that is not yet a node is added implicitly (source
        first). Raises ValueError for None endpoints, self-loops and edges
        that already exist.
        """
        if source is None or dest is None:
            raise ValueError("edge endpoints must not be None")
        if source == dest:
            raise ValueError(f"self-loop on {source!r} is not allowed")
        if (source, dest) in self._edges:
            raise ValueError(f"edge {source!r} -> {dest!r} already exists")

        self._edges[(source, dest)] = value
        if source not in self._adjacency:
            self._adjacency[source] = deque()
        self._adjacency[source].appendleft(dest)
        if dest not in self._adjacency:
            self._adjacency[dest] = deque()

    def __getitem__(self, key: Tuple[N, N]) -> E:
        try:
            return self._edges[key]
        except KeyError:
            raise KeyError(f"the edge from {key[0]!r} to {key[1]!r} is not in the graph") from None

    def __setitem__(self, key: Tuple[N, N], value: E) -> None:
        if key not in self._edges:
            raise KeyError(f"the edge from {key[0]!r} to {key[1]!r} is not in the graph")
        self._edges[key] = value

    def try_get_edge(self, source: N, dest: N) -> Tuple[bool, Optional[E]]:
        """Return (True, value) if the edge exists, else (False, None)."""
        if (source, dest) in self._edges:
            return True, self._edges[(source, dest)]
        return False, None

    def contains_node(self, node: N) -> bool:
        return node in self._adjacency

    def contains_edge(self, source: N, dest: N) -> bool:
        return (source, dest) in self._edges

    def __contains__(self, node) -> bool:
        return self.contains_node(node)

    def outgoing_edges(self, node: N) -> Iterator[Edge]:
        """
        Yield (source, destination, value) for every edge leaving `node`.

        Values are read at the moment each edge is yielded. Raises KeyError
        if `node` is not in the graph.
        """
        if node not in self._adjacency:
            raise KeyError(f"node {node!r} is not in the graph")
        return self._iter_outgoing(node, self._adjacency[node])

    def _iter_outgoing(self, node: N, destinations: Deque[N]) -> Iterator[Edge]:
        # snapshot so reverse edges added mid-walk are not visited
        for dest in list(destinations):
            yield Edge(node, dest, self._edges[(node, dest)])

    @property
    def nodes(self) -> KeysView:
        """All nodes, in insertion order."""
        return self._adjacency.keys()

    def num_nodes(self) -> int:
        return len(self._adjacency)

    def num_edges(self) -> int:
        return len(self._edges)
