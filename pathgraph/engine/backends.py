"""Backend registry: look up graph storage implementations by name."""

from collections.abc import Hashable, Iterable

from .adjacency import AdjacencyListGraph
from .core import Graph
from .matrix import AdjacencyMatrixGraph

BACKENDS: dict[str, type[Graph]] = {
    AdjacencyListGraph.backend_name: AdjacencyListGraph,
    AdjacencyMatrixGraph.backend_name: AdjacencyMatrixGraph,
}

DEFAULT_BACKEND = AdjacencyListGraph.backend_name


def create_graph(backend: str = DEFAULT_BACKEND, nodes: Iterable[Hashable] | None = None) -> Graph:
    """Create an empty (or node-seeded) graph for a backend name.

    Args:
        backend: "adjacency" or "matrix"
        nodes: Optional initial nodes

    Raises:
        ValueError: If the backend name is unknown
    """
    try:
        graph_cls = BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown backend: {backend!r} (expected one of {sorted(BACKENDS)})"
        ) from None
    return graph_cls(nodes)
