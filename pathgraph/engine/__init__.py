from pathgraph.engine.adjacency import AdjacencyListGraph
from pathgraph.engine.backends import BACKENDS, DEFAULT_BACKEND, create_graph
from pathgraph.engine.core import Graph, NodePair
from pathgraph.engine.matrix import AdjacencyMatrixGraph
from pathgraph.engine.search import (
    Algorithm,
    a_star,
    breadth_first_search,
    dijkstra,
    select_algorithm,
)

__all__ = [
    "Graph",
    "NodePair",
    "AdjacencyListGraph",
    "AdjacencyMatrixGraph",
    "BACKENDS",
    "DEFAULT_BACKEND",
    "create_graph",
    "Algorithm",
    "select_algorithm",
    "breadth_first_search",
    "dijkstra",
    "a_star",
]
