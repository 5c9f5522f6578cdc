"""Load graph documents from JSON and convert them to and from graphs.

A graph document is a small JSON file:

    {
      "nodes": [1, 2, 3],
      "edges": [{"source": 1, "target": 2, "payload": 2.5}],
      "positions": {"1": [0.0, 0.0], "2": [3.0, 4.0]}
    }

Documents are an input and inspection format for the CLI and for tests;
the engine itself keeps everything in memory.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from pathgraph.engine import DEFAULT_BACKEND, Graph, create_graph
from pathgraph.models import GraphDocument


def _validate_path(path: str | Path) -> Path:
    """Resolve a document path.

    Raises:
        ValueError: If the path contains null bytes
    """
    # Check for null bytes before any path operations
    if "\x00" in str(path):
        raise ValueError(f"Invalid path (contains null bytes): {str(path)!r}")
    return Path(path).resolve()


def parse_document(data: dict) -> GraphDocument:
    """Validate a decoded JSON object as a graph document.

    Raises:
        ValueError: If the data does not describe a valid graph
    """
    try:
        return GraphDocument.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid graph document: {exc}") from exc


def load_document(path: str | Path) -> GraphDocument:
    """Read and validate a graph document.

    Raises:
        ValueError: If the path is invalid, the file is not JSON, or the
            content is not a valid graph document
        FileNotFoundError: If the file does not exist
    """
    validated_path = _validate_path(path)

    with open(validated_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValueError(f"{validated_path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"{validated_path} must contain a JSON object, got {type(data).__name__}")
    return parse_document(data)


def save_document(document: GraphDocument, path: str | Path) -> None:
    """Write a graph document as indented JSON, creating parent directories."""
    validated_path = _validate_path(path)
    validated_path.parent.mkdir(parents=True, exist_ok=True)

    with open(validated_path, "w", encoding="utf-8") as f:
        json.dump(document.model_dump(mode="json"), f, indent=2, ensure_ascii=False)


def build_graph(document: GraphDocument, backend: str = DEFAULT_BACKEND) -> Graph:
    """Create a graph of the given backend holding the document's nodes and edges.

    Nodes are added before any edge, so the matrix backend builds its
    matrix once.
    """
    graph = create_graph(backend, document.nodes)
    with graph.batch():
        for edge in document.edges:
            graph.connect(edge.source, edge.target, edge.payload)
    return graph


def graph_to_document(graph: Graph) -> GraphDocument:
    """Export a graph's nodes and edges as a document.

    Raises:
        ValueError: If a node is not a string or integer
    """
    return parse_document(graph.to_dict())
