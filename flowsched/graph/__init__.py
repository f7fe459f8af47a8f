"""Generic graph and maximum-flow components."""

from .directed_graph import DirectedGraph, Edge
from .max_flow_solver import (
    EdmondsKarpSolver,
    OrToolsMaxFlowSolver,
    available_solvers,
    get_solver,
    push_flow,
)

__all__ = [
    "DirectedGraph",
    "Edge",
    "EdmondsKarpSolver",
    "OrToolsMaxFlowSolver",
    "available_solvers",
    "get_solver",
    "push_flow",
]
