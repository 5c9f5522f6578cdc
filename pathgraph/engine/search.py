"""Path finding over any graph backend.

The search functions read a graph only through ``out_neighbors(node)`` and
``edge_info(source, target)``, so one implementation serves every storage
backend and both backends return identical paths for identical data.

Priority queues are ``heapq`` heaps of ``(priority, counter, node)`` entries.
The counter increases on every push, so ties are broken by insertion order
and nodes never need to be comparable.
"""

import heapq
import itertools
import logging
import math
from collections import deque
from collections.abc import Callable, Hashable
from enum import Enum
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Algorithm(str, Enum):
    """Path finding algorithms, chosen from the installed resolvers."""

    BFS = "bfs"
    DIJKSTRA = "dijkstra"
    ASTAR = "astar"


class Searchable(Protocol):
    """The read-only view of a graph that the search functions need."""

    def out_neighbors(self, node: Hashable) -> list[Hashable]: ...

    def edge_info(self, source: Hashable, target: Hashable) -> Any | None: ...


def select_algorithm(
    edge_length: Callable[[Any], float] | None,
    node_score: Callable[[Any, Any], float] | None,
) -> Algorithm:
    """Pick the algorithm implied by which resolvers are installed.

    A node score without an edge length cannot drive A*, so it falls back to BFS.
    """
    if edge_length is not None and node_score is not None:
        return Algorithm.ASTAR
    if edge_length is not None:
        return Algorithm.DIJKSTRA
    return Algorithm.BFS


def _build_path(start: Hashable, end: Hashable, parents: dict[Hashable, Hashable]) -> list[Hashable]:
    """Walk parent links back from end to start and return the path start-first."""
    path = [end]
    node = end
    while node != start:
        node = parents[node]
        path.append(node)
    path.reverse()
    return path


def _edge_length(length: Callable[[Any], float], payload: Any, source: Hashable, target: Hashable) -> float:
    value = length(payload)
    if value < 0:
        raise ValueError(
            f"Edge length must be non-negative, got {value!r} for edge {source!r} -> {target!r}"
        )
    return value


def _node_score(score: Callable[[Any, Any], float], node: Hashable, goal: Hashable) -> float:
    value = score(node, goal)
    if value < 0:
        raise ValueError(
            f"Node score must be non-negative, got {value!r} for node {node!r} towards {goal!r}"
        )
    return value


def breadth_first_search(graph: Searchable, start: Hashable, end: Hashable) -> list[Hashable] | None:
    """Find the path with the fewest edges.

    Nodes are marked visited when enqueued, so each is enqueued at most once.

    Returns:
        Nodes from start to end inclusive, or None if end is unreachable
    """
    parents: dict[Hashable, Hashable] = {}
    visited: set[Hashable] = {start}
    queue: deque[Hashable] = deque([start])

    while queue:
        node = queue.popleft()
        if node == end:
            logger.debug("bfs reached %r after visiting %d nodes", end, len(visited))
            return _build_path(start, end, parents)
        for child in graph.out_neighbors(node):
            if child in visited:
                continue
            visited.add(child)
            parents[child] = node
            queue.append(child)

    return None


def dijkstra(
    graph: Searchable,
    start: Hashable,
    end: Hashable,
    edge_length: Callable[[Any], float],
) -> list[Hashable] | None:
    """Find the path with the lowest total edge length.

    A node is final once dequeued; later queue entries for it are skipped.
    Edges without a payload cannot be measured and are not traversed.

    Args:
        graph: Graph to search
        start: Node to start from
        end: Node to reach
        edge_length: Maps an edge payload to a non-negative length

    Returns:
        Nodes from start to end inclusive, or None if end is unreachable

    Raises:
        ValueError: If edge_length returns a negative value
    """
    distance: dict[Hashable, float] = {start: 0.0}
    parents: dict[Hashable, Hashable] = {}
    visited: set[Hashable] = set()
    counter = itertools.count()
    queue: list[tuple[float, int, Hashable]] = [(0.0, next(counter), start)]

    while queue:
        _, _, node = heapq.heappop(queue)
        if node in visited:
            continue
        visited.add(node)

        if node == end:
            logger.debug("dijkstra reached %r after expanding %d nodes", end, len(visited))
            return _build_path(start, end, parents)

        for child in graph.out_neighbors(node):
            if child in visited:
                continue
            payload = graph.edge_info(node, child)
            if payload is None:
                continue
            candidate = distance[node] + _edge_length(edge_length, payload, node, child)
            if candidate < distance.get(child, math.inf):
                distance[child] = candidate
                parents[child] = node
                heapq.heappush(queue, (candidate, next(counter), child))

    return None


def a_star(
    graph: Searchable,
    start: Hashable,
    end: Hashable,
    edge_length: Callable[[Any], float],
    node_score: Callable[[Any, Any], float],
) -> list[Hashable] | None:
    """Find a path guided by a heuristic.

    A child's score is ``score[node] + length(edge) + node_score(node, end)``;
    the same score orders the queue and decides relaxation. Nodes are only
    checked against the visited set when dequeued, so an already expanded
    node may still be re-relaxed if a cheaper score turns up.

    Scores must be non-negative. A negative score could re-relax an
    ancestor of the current node and leave a cycle in the parent links.

    Args:
        graph: Graph to search
        start: Node to start from
        end: Node to reach
        edge_length: Maps an edge payload to a non-negative length
        node_score: Heuristic distance between a node and the goal

    Returns:
        Nodes from start to end inclusive, or None if end is unreachable

    Raises:
        ValueError: If edge_length or node_score returns a negative value
    """
    scores: dict[Hashable, float] = {start: 0.0}
    parents: dict[Hashable, Hashable] = {}
    visited: set[Hashable] = set()
    counter = itertools.count()
    queue: list[tuple[float, int, Hashable]] = [(0.0, next(counter), start)]

    while queue:
        _, _, node = heapq.heappop(queue)
        if node in visited:
            continue
        visited.add(node)

        if node == end:
            logger.debug("astar reached %r after expanding %d nodes", end, len(visited))
            return _build_path(start, end, parents)

        for child in graph.out_neighbors(node):
            payload = graph.edge_info(node, child)
            if payload is None:
                continue
            candidate = (
                scores[node]
                + _edge_length(edge_length, payload, node, child)
                + _node_score(node_score, node, end)
            )
            if candidate < scores.get(child, math.inf):
                scores[child] = candidate
                parents[child] = node
                heapq.heappush(queue, (candidate, next(counter), child))

    return None
