"""Core directed-graph contract shared by every storage backend.

A graph is an owned, insertion-ordered set of nodes plus directed edges that
carry an arbitrary payload. Backends decide how edges are stored; everything
else (membership, degree sequence, resolver configuration, path finding,
statistics and validation) lives here and is implemented once.

Thread Safety:
    All public operations on a Graph are protected by an internal RLock
    (reentrant lock). The matrix backend's rebuild and a whole find_path
    search both run under it, so concurrent callers observe each operation
    as atomic.

    For atomic multi-step updates, use the batch() context manager:
        with graph.batch():
            graph.add("a")
            graph.add("b")
            graph.connect("a", "b", 1.0)
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Generator, Hashable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from .search import Algorithm, a_star, breadth_first_search, dijkstra, select_algorithm

logger = logging.getLogger(__name__)

EdgeLengthResolver = Callable[[Any], float]
NodeScoreResolver = Callable[[Any, Any], float]


@dataclass(frozen=True)
class NodePair:
    """An ordered (source, target) pair identifying one directed edge.

    Equality and hashing are structural, so a freshly built pair finds the
    entry stored under an equal pair.
    """

    source: Hashable
    target: Hashable


class Graph(ABC):
    """Directed graph over an owned node set with pluggable edge storage.

    Subclasses implement the storage hooks (``_connect``, ``_disconnect``,
    ``_out_neighbors``, ``_in_neighbors``, ``_edge_info``, ``_has_edge``,
    ``_degree``, ``_edges``, ``_purge_node``, ``_clear_edges``). The base
    class guarantees the hooks are only called for member nodes and while
    the instance lock is held.

    Design principles:
    - Node membership is the source of truth
    - At most one edge per ordered pair; reconnecting overwrites the payload
    - Unknown nodes yield empty/absent results, never exceptions
    - Path finding reads storage only through neighborhoods and edge lookups
    """

    backend_name = "abstract"

    def __init__(self, nodes: Iterable[Hashable] | None = None) -> None:
        # Insertion-ordered node set; values are insertion sequence numbers
        # used to list neighbors in the same order on every backend
        self._nodes: dict[Hashable, int] = {}
        self._sequence = 0
        self._edge_length: EdgeLengthResolver | None = None
        self._node_score: NodeScoreResolver | None = None
        # Reentrant because find_path and remove call other public methods
        self._lock = threading.RLock()
        if nodes is not None:
            self.update(nodes)

    def __getstate__(self) -> dict[str, Any]:
        """Support for pickle/deepcopy - exclude the lock."""
        with self._lock:
            state = self.__dict__.copy()
        del state["_lock"]
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        """Support for pickle/deepcopy - recreate the lock."""
        self.__dict__.update(state)
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nodes={len(self._nodes)}, edges={self.edge_count()})"

    # ========== Thread Safety ==========

    @contextmanager
    def batch(self) -> Generator[None, None, None]:
        """Hold the lock for multiple operations - provides isolation, NOT rollback.

        Other threads see either none or all of the changes made inside the
        block. If an exception occurs mid-batch, partial changes persist.

        Yields:
            None
        """
        with self._lock:
            yield

    # ========== Node Set ==========

    def add(self, node: Hashable) -> None:
        """Add a node. Adding an existing node is a no-op."""
        with self._lock:
            if node not in self._nodes:
                self._nodes[node] = self._sequence
                self._sequence += 1

    def update(self, nodes: Iterable[Hashable]) -> None:
        """Add every node from an iterable."""
        with self._lock:
            for node in nodes:
                self.add(node)

    def remove(self, node: Hashable) -> None:
        """Remove a node and every edge touching it.

        Raises:
            KeyError: If the node is not in the graph
        """
        with self._lock:
            if node not in self._nodes:
                raise KeyError(node)
            self._purge_node(node)
            del self._nodes[node]

    def discard(self, node: Hashable) -> bool:
        """Remove a node (and its edges) if present.

        Returns:
            True if the node was removed, False if it was not a member
        """
        with self._lock:
            if node not in self._nodes:
                return False
            self.remove(node)
            return True

    def clear(self) -> None:
        """Remove all nodes and edges. Resolvers are kept."""
        with self._lock:
            self._clear_edges()
            self._nodes.clear()

    def nodes(self) -> list[Hashable]:
        """All nodes, in insertion order."""
        with self._lock:
            return list(self._nodes)

    def __contains__(self, node: object) -> bool:
        with self._lock:
            try:
                return node in self._nodes
            except TypeError:
                # unhashable values can never be members
                return False

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)

    def __iter__(self) -> Iterator[Hashable]:
        # Iterate over a snapshot so callers may mutate while looping
        return iter(self.nodes())

    # ========== Degree ==========

    def degree(self, node: Hashable) -> int | None:
        """Get in-degree plus out-degree of a node.

        A self-loop counts twice (once out, once in).

        Returns:
            The degree, or None if the node is not in the graph
        """
        with self._lock:
            if node not in self._nodes:
                return None
            return self._degree(node)

    def degree_sequence(self) -> list[Hashable]:
        """All nodes ordered by ascending degree.

        The sort is stable: nodes of equal degree keep insertion order.
        """
        with self._lock:
            degrees = {node: self._degree(node) for node in self._nodes}
            return sorted(degrees, key=degrees.__getitem__)

    # ========== Edges ==========

    def connect(self, source: Hashable, target: Hashable, payload: Any = None) -> None:
        """Create or overwrite the directed edge source -> target.

        No-op if either node is not in the graph.
        """
        with self._lock:
            if source not in self._nodes or target not in self._nodes:
                logger.debug("connect(%r, %r) ignored: node not in graph", source, target)
                return
            self._connect(source, target, payload)

    def disconnect(self, source: Hashable, target: Hashable) -> None:
        """Remove the directed edge source -> target and its payload, if present."""
        with self._lock:
            if source not in self._nodes or target not in self._nodes:
                return
            self._disconnect(source, target)

    def out_neighbors(self, node: Hashable) -> list[Hashable]:
        """Nodes reachable from ``node`` by one outgoing edge."""
        with self._lock:
            if node not in self._nodes:
                return []
            return self._out_neighbors(node)

    def in_neighbors(self, node: Hashable) -> list[Hashable]:
        """Nodes with an edge into ``node``."""
        with self._lock:
            if node not in self._nodes:
                return []
            return self._in_neighbors(node)

    def all_neighbors(self, node: Hashable) -> list[Hashable]:
        """Out-neighbors followed by in-neighbors.

        A mutually connected node appears twice.
        """
        with self._lock:
            return self.out_neighbors(node) + self.in_neighbors(node)

    def edge_info(self, source: Hashable, target: Hashable) -> Any | None:
        """Get the payload of the edge source -> target, or None if there is no edge.

        Use has_edge() to tell a None payload apart from a missing edge.
        """
        with self._lock:
            if source not in self._nodes or target not in self._nodes:
                return None
            return self._edge_info(source, target)

    def has_edge(self, source: Hashable, target: Hashable) -> bool:
        """Check whether the directed edge source -> target exists."""
        with self._lock:
            if source not in self._nodes or target not in self._nodes:
                return False
            return self._has_edge(source, target)

    def edges(self) -> list[tuple[Hashable, Hashable, Any]]:
        """All edges as (source, target, payload) triples."""
        with self._lock:
            return self._edges()

    def edge_count(self) -> int:
        """Number of directed edges in the graph."""
        with self._lock:
            return len(self._edges())

    # ========== Path Finding ==========

    @property
    def edge_length_resolver(self) -> EdgeLengthResolver | None:
        return self._edge_length

    @property
    def node_score_resolver(self) -> NodeScoreResolver | None:
        return self._node_score

    @property
    def algorithm(self) -> Algorithm:
        """The algorithm find_path() would use with the current resolvers."""
        return select_algorithm(self._edge_length, self._node_score)

    def set_edge_length_resolver(self, fn: EdgeLengthResolver | None) -> None:
        """Install (or clear, with None) the edge payload -> length function.

        Installing one switches find_path() from BFS to Dijkstra.

        Raises:
            TypeError: If fn is neither callable nor None
        """
        if fn is not None and not callable(fn):
            raise TypeError(f"Edge length resolver must be callable, got: {type(fn).__name__}")
        with self._lock:
            self._edge_length = fn

    def set_node_score_resolver(self, fn: NodeScoreResolver | None) -> None:
        """Install (or clear, with None) the (node, goal) -> heuristic function.

        Together with an edge length resolver this switches find_path() to A*.

        Raises:
            TypeError: If fn is neither callable nor None
        """
        if fn is not None and not callable(fn):
            raise TypeError(f"Node score resolver must be callable, got: {type(fn).__name__}")
        with self._lock:
            self._node_score = fn

    def find_path(self, start: Hashable, end: Hashable) -> list[Hashable] | None:
        """Find the best path from start to end.

        The algorithm depends on the installed resolvers:
            - none: breadth-first search (fewest edges)
            - edge length: Dijkstra (lowest total length)
            - edge length + node score: A*

        Args:
            start: Node to start from
            end: Node to reach

        Returns:
            List of nodes from start to end (inclusive), or None if either
            node is not in the graph or end is unreachable
        """
        with self._lock:
            if start not in self._nodes or end not in self._nodes:
                return None

            algorithm = self.algorithm
            logger.debug("find_path(%r, %r) using %s", start, end, algorithm.value)
            if algorithm is Algorithm.ASTAR:
                return a_star(self, start, end, self._edge_length, self._node_score)
            if algorithm is Algorithm.DIJKSTRA:
                return dijkstra(self, start, end, self._edge_length)
            return breadth_first_search(self, start, end)

    # ========== Statistics & Validation ==========

    def stats(self) -> dict[str, Any]:
        """Get graph statistics.

        Returns:
            Dict with num_nodes, num_edges, backend, algorithm, min_degree, max_degree
        """
        with self._lock:
            degrees = [self._degree(node) for node in self._nodes]
            return {
                "num_nodes": len(self._nodes),
                "num_edges": len(self._edges()),
                "backend": self.backend_name,
                "algorithm": self.algorithm.value,
                "min_degree": min(degrees, default=0),
                "max_degree": max(degrees, default=0),
            }

    def validate(self) -> dict[str, Any]:
        """Validate graph integrity.

        Checks for:
        - Edges whose source or target is not a member node
        - Backend storage consistency (see _validate_storage)

        Returns:
            Dict with 'valid' (bool), 'errors' and 'warnings' (lists of
            descriptions) and 'dangling_edges' (list of (source, target) pairs)
        """
        with self._lock:
            errors: list[str] = []
            warnings: list[str] = []
            dangling: list[tuple[Hashable, Hashable]] = []

            for source, target, _ in self._edges():
                missing = [n for n in (source, target) if n not in self._nodes]
                if missing:
                    dangling.append((source, target))
                    errors.append(
                        f"Edge {source!r} -> {target!r} references non-existent nodes: {missing}"
                    )

            self._validate_storage(errors, warnings)

            isolated = [n for n in self._nodes if self._degree(n) == 0]
            if isolated and self._edges():
                warnings.append(f"{len(isolated)} isolated node(s) with no edges")

            return {
                "valid": len(errors) == 0,
                "errors": errors,
                "warnings": warnings,
                "dangling_edges": dangling,
            }

    # ========== Serialization ==========

    def to_dict(self) -> dict[str, Any]:
        """Export to simple dict (for debugging/internal use)."""
        with self._lock:
            return {
                "nodes": list(self._nodes),
                "edges": [
                    {"source": source, "target": target, "payload": payload}
                    for source, target, payload in self._edges()
                ],
            }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Graph":
        """Import from simple dict.

        Edges whose endpoints are not listed under "nodes" are ignored,
        exactly as connect() ignores them.
        """
        graph = cls(data.get("nodes", []))
        for edge_data in data.get("edges", []):
            graph.connect(edge_data["source"], edge_data["target"], edge_data.get("payload"))
        return graph

    def _ordered(self, nodes: Iterable[Hashable]) -> list[Hashable]:
        """Sort member nodes into node-set insertion order."""
        return sorted(nodes, key=self._nodes.__getitem__)

    # ========== Storage Hooks ==========
    # Called with the lock held and, unless noted, only for member nodes.

    @abstractmethod
    def _connect(self, source: Hashable, target: Hashable, payload: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def _disconnect(self, source: Hashable, target: Hashable) -> None:
        raise NotImplementedError

    @abstractmethod
    def _out_neighbors(self, node: Hashable) -> list[Hashable]:
        raise NotImplementedError

    @abstractmethod
    def _in_neighbors(self, node: Hashable) -> list[Hashable]:
        raise NotImplementedError

    @abstractmethod
    def _edge_info(self, source: Hashable, target: Hashable) -> Any | None:
        raise NotImplementedError

    @abstractmethod
    def _has_edge(self, source: Hashable, target: Hashable) -> bool:
        raise NotImplementedError

    @abstractmethod
    def _degree(self, node: Hashable) -> int:
        raise NotImplementedError

    @abstractmethod
    def _edges(self) -> list[tuple[Hashable, Hashable, Any]]:
        raise NotImplementedError

    @abstractmethod
    def _purge_node(self, node: Hashable) -> None:
        """Drop every edge touching ``node``; called just before it leaves the node set."""
        raise NotImplementedError

    @abstractmethod
    def _clear_edges(self) -> None:
        raise NotImplementedError

    def _validate_storage(self, errors: list[str], warnings: list[str]) -> None:
        """Append backend-specific consistency errors. Default: nothing to check."""
