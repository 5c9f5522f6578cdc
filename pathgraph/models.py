"""Pydantic models for pathgraph's document format and reports.

The engine (pathgraph.engine) works with plain Python values; these models
validate graph documents read from disk and give typed shapes to the
statistics, validation and path reports produced by the CLI.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, Field, model_validator

NodeId = Union[str, int]


class EdgeRecord(BaseModel):
    """One directed edge of a graph document."""

    source: NodeId
    target: NodeId
    payload: Any = None

    def __repr__(self) -> str:
        return f"EdgeRecord({self.source!r} -> {self.target!r}, payload={self.payload!r})"


class GraphDocument(BaseModel):
    """A graph as stored in a JSON document.

    Every edge endpoint must be listed under ``nodes``. ``positions`` maps
    ``str(node)`` to coordinates and feeds the Euclidean heuristic, so a
    document with positions may not hold both ``1`` and ``"1"`` as nodes.
    """

    nodes: list[NodeId] = Field(default_factory=list)
    edges: list[EdgeRecord] = Field(default_factory=list)
    positions: dict[str, list[float]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_edge_endpoints(self) -> GraphDocument:
        known = set(self.nodes)
        missing = sorted(
            {repr(n) for e in self.edges for n in (e.source, e.target) if n not in known}
        )
        if missing:
            raise ValueError(f"Edges reference nodes missing from 'nodes': {', '.join(missing)}")
        return self

    @model_validator(mode="after")
    def _check_position_keys(self) -> GraphDocument:
        if not self.positions:
            return self
        seen: dict[str, NodeId] = {}
        for node in self.nodes:
            key = str(node)
            if key in seen and seen[key] != node:
                raise ValueError(
                    f"Nodes {seen[key]!r} and {node!r} share the position key {key!r}"
                )
            seen[key] = node
        return self

    def position(self, node: NodeId) -> list[float] | None:
        """Coordinates recorded for a node, if any."""
        return self.positions.get(str(node))


class GraphStats(BaseModel):
    """Summary counts for a graph."""

    node_count: int
    edge_count: int
    backend: str
    algorithm: str
    min_degree: int
    max_degree: int


class ValidationResult(BaseModel):
    """Result of a graph consistency check.

    Contains a pass/fail flag, a list of errors, and a list of warnings
    found during validation.
    """

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class PathResult(BaseModel):
    """Outcome of a path query: the nodes walked, or None when no path exists."""

    start: NodeId
    end: NodeId
    algorithm: str
    path: list[NodeId] | None = None

    @property
    def found(self) -> bool:
        return self.path is not None

    @property
    def hops(self) -> int | None:
        """Number of edges on the path."""
        return None if self.path is None else len(self.path) - 1
