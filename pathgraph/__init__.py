"""pathgraph — directed graphs with interchangeable edge storage and automatic best-path search."""

__version__ = "0.1.0"

from pathgraph.engine import (
    AdjacencyListGraph,
    AdjacencyMatrixGraph,
    Algorithm,
    Graph,
    create_graph,
)
from pathgraph.models import EdgeRecord, GraphDocument, GraphStats, PathResult, ValidationResult

__all__ = [
    "AdjacencyListGraph",
    "AdjacencyMatrixGraph",
    "Algorithm",
    "EdgeRecord",
    "Graph",
    "GraphDocument",
    "GraphStats",
    "PathResult",
    "ValidationResult",
    "create_graph",
    "__version__",
]
