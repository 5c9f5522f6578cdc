"""Adjacency-matrix edge storage.

Edges live in a dense N x N list of cells indexed by per-node integers,
where N is the node count when the matrix was last built. Edge lookups are
O(1); neighborhoods and degree scan a full row and column, and memory is
O(N^2) regardless of edge count, which suits small dense graphs.

The matrix is built lazily: adding nodes never touches it. connect()
rebuilds it when the width no longer matches the node set, so loading all
nodes before any edges costs a single rebuild.
"""

import logging
from collections.abc import Hashable, Iterable
from typing import Any

from .core import Graph

logger = logging.getLogger(__name__)


class _Empty:
    """Marker for a cell without an edge, or a slot whose node was removed.

    A None payload is still an edge, so None cannot serve as the marker.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "<empty>"

    def __reduce__(self) -> str:
        # Keep the singleton identity through pickle/deepcopy
        return "_EMPTY"


_EMPTY = _Empty()


class AdjacencyMatrixGraph(Graph):
    """Directed graph backed by a dense adjacency matrix.

    Rows are sources and columns are targets: ``matrix[row][col]`` holds
    the payload of the edge from the row's node to the column's node.
    """

    backend_name = "matrix"

    def __init__(self, nodes: Iterable[Hashable] | None = None) -> None:
        self._matrix: list[list[Any]] | None = None
        self._indexes: dict[Hashable, int] = {}
        # Reverse map; _EMPTY marks a slot whose node was removed
        self._slots: list[Any] = []
        super().__init__(nodes)

    # ========== Index Maintenance ==========

    def _needs_rebuild(self) -> bool:
        if self._matrix is None:
            return True
        size = len(self._nodes)
        return len(self._matrix) != size or len(self._indexes) != size

    def _rebuild(self) -> None:
        """Reassign indices in node-set order and migrate every stored edge.

        Each cell of the old matrix whose row and column nodes are both
        still members is copied to its new position, so no edge is lost
        when the matrix is resized.
        """
        old_matrix = self._matrix
        old_indexes = self._indexes
        size = len(self._nodes)

        new_indexes = {node: i for i, node in enumerate(self._nodes)}
        matrix: list[list[Any]] = [[_EMPTY] * size for _ in range(size)]

        if old_matrix is not None:
            # (old index, new index) for nodes present in both layouts
            retained = [
                (old_indexes[node], new_index)
                for node, new_index in new_indexes.items()
                if node in old_indexes
            ]
            for old_row, new_row in retained:
                source_row = old_matrix[old_row]
                target_row = matrix[new_row]
                for old_col, new_col in retained:
                    target_row[new_col] = source_row[old_col]

        self._matrix = matrix
        # Replacing the whole map also drops entries for removed nodes
        self._indexes = new_indexes
        self._slots = list(self._nodes)
        logger.debug(
            "Rebuilt adjacency matrix: %d -> %d",
            len(old_matrix) if old_matrix is not None else 0,
            size,
        )

    def _cell(self, source: Hashable, target: Hashable) -> Any:
        row = self._indexes.get(source)
        col = self._indexes.get(target)
        if row is None or col is None or self._matrix is None:
            return _EMPTY
        return self._matrix[row][col]

    # ========== Storage Hooks ==========

    def _connect(self, source: Hashable, target: Hashable, payload: Any) -> None:
        if self._needs_rebuild():
            self._rebuild()
        self._matrix[self._indexes[source]][self._indexes[target]] = payload

    def _disconnect(self, source: Hashable, target: Hashable) -> None:
        row = self._indexes.get(source)
        col = self._indexes.get(target)
        if row is None or col is None or self._matrix is None:
            return
        self._matrix[row][col] = _EMPTY

    def _out_neighbors(self, node: Hashable) -> list[Hashable]:
        idx = self._indexes.get(node)
        if idx is None or self._matrix is None:
            return []
        row = self._matrix[idx]
        return [
            other
            for col, other in enumerate(self._slots)
            if other is not _EMPTY and row[col] is not _EMPTY
        ]

    def _in_neighbors(self, node: Hashable) -> list[Hashable]:
        idx = self._indexes.get(node)
        if idx is None or self._matrix is None:
            return []
        return [
            other
            for row, other in enumerate(self._slots)
            if other is not _EMPTY and self._matrix[row][idx] is not _EMPTY
        ]

    def _edge_info(self, source: Hashable, target: Hashable) -> Any | None:
        cell = self._cell(source, target)
        return None if cell is _EMPTY else cell

    def _has_edge(self, source: Hashable, target: Hashable) -> bool:
        return self._cell(source, target) is not _EMPTY

    def _degree(self, node: Hashable) -> int:
        idx = self._indexes.get(node)
        # Unmapped members were added after the last rebuild and have no edges yet
        if idx is None or self._matrix is None:
            return 0
        result = 0
        for i in range(len(self._matrix)):
            if self._matrix[idx][i] is not _EMPTY:
                result += 1
            if self._matrix[i][idx] is not _EMPTY:
                result += 1
        return result

    def _edges(self) -> list[tuple[Hashable, Hashable, Any]]:
        if self._matrix is None:
            return []
        result = []
        for row, source in enumerate(self._slots):
            if source is _EMPTY:
                continue
            cells = self._matrix[row]
            for col, target in enumerate(self._slots):
                if target is not _EMPTY and cells[col] is not _EMPTY:
                    result.append((source, target, cells[col]))
        return result

    def _purge_node(self, node: Hashable) -> None:
        idx = self._indexes.pop(node, None)
        if idx is None or self._matrix is None:
            return
        for i in range(len(self._matrix)):
            self._matrix[idx][i] = _EMPTY
            self._matrix[i][idx] = _EMPTY
        self._slots[idx] = _EMPTY

    def _clear_edges(self) -> None:
        self._matrix = None
        self._indexes = {}
        self._slots = []

    def _validate_storage(self, errors: list[str], warnings: list[str]) -> None:
        if self._matrix is None:
            if self._indexes:
                errors.append("Index map is populated but no matrix has been built")
            return

        width = len(self._matrix)
        if any(len(row) != width for row in self._matrix):
            errors.append("Adjacency matrix is not square")
        if len(self._slots) != width:
            errors.append(f"Slot list has {len(self._slots)} entries for matrix width {width}")

        for node, idx in self._indexes.items():
            if node not in self._nodes:
                errors.append(f"Index map contains non-existent node: {node!r}")
            if not 0 <= idx < len(self._slots) or self._slots[idx] != node:
                errors.append(f"Index {idx} for node {node!r} does not match the slot list")

        for idx, node in enumerate(self._slots):
            if node is not _EMPTY:
                continue
            if idx < width and any(
                self._matrix[idx][i] is not _EMPTY or self._matrix[i][idx] is not _EMPTY
                for i in range(width)
            ):
                errors.append(f"Released slot {idx} still holds edges")

        unmapped = len(self._nodes) - len(self._indexes)
        if unmapped > 0:
            warnings.append(f"{unmapped} node(s) not yet indexed; the next connect() rebuilds")
