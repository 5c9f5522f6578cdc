"""Shared fixtures for pathgraph tests."""

import json

import pytest

from graph_data import REFERENCE_EDGES, build_reference

from pathgraph.engine import AdjacencyListGraph, AdjacencyMatrixGraph


@pytest.fixture(params=[AdjacencyListGraph, AdjacencyMatrixGraph], ids=["adjacency", "matrix"])
def graph_cls(request):
    """Each graph backend class."""
    return request.param


@pytest.fixture()
def graph(graph_cls):
    """Empty graph of each backend."""
    return graph_cls()


@pytest.fixture()
def reference_graph(graph_cls):
    """The 11-node reference graph, loaded into each backend.

    Nodes 1..11, 13 edges; payloads are edge lengths. Degrees:
        2: 1, 3, 5, 8, 9, 10, 11
        3: 2, 4, 6, 7
    """
    return build_reference(graph_cls)


@pytest.fixture()
def reference_document(tmp_path):
    """The reference graph written as a JSON graph document, with grid positions."""
    top = [1, 2, 3, 7, 9]
    bottom = [8, 4, 5, 6, 10, 11]
    positions = {str(n): [float(x), 1.0] for x, n in enumerate(top)}
    positions.update({str(n): [float(x), 0.0] for x, n in enumerate(bottom)})
    data = {
        "nodes": list(range(1, 12)),
        "edges": [
            {"source": s, "target": t, "payload": length} for s, t, length in REFERENCE_EDGES
        ],
        "positions": positions,
    }
    path = tmp_path / "reference.json"
    path.write_text(json.dumps(data))
    return str(path)
