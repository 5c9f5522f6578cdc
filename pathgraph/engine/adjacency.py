"""Adjacency-list edge storage.

Keeps a list of out-neighbors and a list of in-neighbors per node, plus a
payload map keyed by NodePair. Memory grows with the number of edges and
neighborhood queries cost O(degree), which suits sparse graphs.
"""

from collections import defaultdict
from collections.abc import Hashable, Iterable
from typing import Any

from .core import Graph, NodePair


class AdjacencyListGraph(Graph):
    """Directed graph backed by adjacency lists.

    A pair is appended to the neighbor lists only when it is first
    connected, so every list entry has exactly one payload entry.
    Neighborhood queries return nodes in node-set order, the same order the
    matrix backend produces, so both backends break path ties alike.
    """

    backend_name = "adjacency"

    def __init__(self, nodes: Iterable[Hashable] | None = None) -> None:
        self._out: dict[Hashable, list[Hashable]] = defaultdict(list)
        self._in: dict[Hashable, list[Hashable]] = defaultdict(list)
        self._payloads: dict[NodePair, Any] = {}
        super().__init__(nodes)

    def _connect(self, source: Hashable, target: Hashable, payload: Any) -> None:
        key = NodePair(source, target)
        if key not in self._payloads:
            self._out[source].append(target)
            self._in[target].append(source)
        self._payloads[key] = payload

    def _disconnect(self, source: Hashable, target: Hashable) -> None:
        key = NodePair(source, target)
        if key not in self._payloads:
            return
        del self._payloads[key]
        self._out[source].remove(target)
        self._in[target].remove(source)
        # Clean up empty lists to prevent memory leaks
        if not self._out[source]:
            del self._out[source]
        if not self._in[target]:
            del self._in[target]

    def _out_neighbors(self, node: Hashable) -> list[Hashable]:
        return self._ordered(self._out.get(node, ()))

    def _in_neighbors(self, node: Hashable) -> list[Hashable]:
        return self._ordered(self._in.get(node, ()))

    def _edge_info(self, source: Hashable, target: Hashable) -> Any | None:
        return self._payloads.get(NodePair(source, target))

    def _has_edge(self, source: Hashable, target: Hashable) -> bool:
        return NodePair(source, target) in self._payloads

    def _degree(self, node: Hashable) -> int:
        return len(self._out.get(node, ())) + len(self._in.get(node, ()))

    def _edges(self) -> list[tuple[Hashable, Hashable, Any]]:
        return [(key.source, key.target, payload) for key, payload in self._payloads.items()]

    def _purge_node(self, node: Hashable) -> None:
        for target in self._out_neighbors(node):
            self._disconnect(node, target)
        for source in self._in_neighbors(node):
            self._disconnect(source, node)

    def _clear_edges(self) -> None:
        self._out.clear()
        self._in.clear()
        self._payloads.clear()

    def _validate_storage(self, errors: list[str], warnings: list[str]) -> None:
        listed = sum(len(targets) for targets in self._out.values())
        if listed != len(self._payloads):
            errors.append(
                f"Out-neighbor lists hold {listed} entries but {len(self._payloads)} payloads are stored"
            )
        for key in self._payloads:
            if key.target not in self._out.get(key.source, ()):
                errors.append(f"Payload for {key.source!r} -> {key.target!r} has no neighbor entry")
            if key.source not in self._in.get(key.target, ()):
                errors.append(f"Payload for {key.source!r} -> {key.target!r} has no in-neighbor entry")
