"""Benchmark fixtures for graph performance tests."""

import random

import pytest

from pathgraph.engine import AdjacencyListGraph, AdjacencyMatrixGraph, Graph


def generate_random_graph(
    graph_cls: type[Graph],
    num_nodes: int,
    num_edges: int,
    max_length: float = 10.0,
    seed: int = 42,
) -> Graph:
    """Generate a random directed graph for benchmarking.

    Nodes are 0..num_nodes-1 and are all added before any edge. A chain
    0 -> 1 -> ... guarantees every node is reachable from node 0.

    Args:
        graph_cls: Backend class to instantiate
        num_nodes: Number of nodes to create
        num_edges: Number of random edges to add on top of the chain
        max_length: Upper bound for the random edge lengths
        seed: Random seed for reproducibility
    """
    rng = random.Random(seed)
    graph = graph_cls(range(num_nodes))
    with graph.batch():
        for i in range(num_nodes - 1):
            graph.connect(i, i + 1, rng.uniform(1.0, max_length))
        for _ in range(num_edges):
            graph.connect(
                rng.randrange(num_nodes), rng.randrange(num_nodes), rng.uniform(1.0, max_length)
            )
    return graph


@pytest.fixture(params=[AdjacencyListGraph, AdjacencyMatrixGraph], ids=["adjacency", "matrix"])
def graph_500(request) -> Graph:
    """500 nodes, ~2.5K edges on each backend."""
    return generate_random_graph(request.param, num_nodes=500, num_edges=2000)


@pytest.fixture
def sparse_graph_5k() -> Graph:
    """Sparse 5K graph on the adjacency-list backend."""
    return generate_random_graph(AdjacencyListGraph, num_nodes=5000, num_edges=5000)
