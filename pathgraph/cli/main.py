"""pathgraph CLI — run graph queries against a JSON graph document."""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Callable
from typing import Any

import click

from pathgraph.documents import build_graph, load_document
from pathgraph.engine import BACKENDS, DEFAULT_BACKEND, Graph
from pathgraph.models import GraphDocument, GraphStats, PathResult, ValidationResult

logger = logging.getLogger("pathgraph.cli")

GRAPH_FILE = click.Path(exists=True, dir_okay=False)


def _configure_logging(verbose: bool) -> None:
    # Logging goes to stderr; stdout carries command output
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )


def _load(ctx: click.Context, graph_file: str) -> tuple[GraphDocument, Graph]:
    try:
        document = load_document(graph_file)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    graph = build_graph(document, ctx.obj["backend"])
    logger.info("Loaded %s with %d nodes into %s backend", graph_file, len(graph), graph.backend_name)
    return document, graph


def _resolve_node(graph: Graph, raw: str, param_hint: str) -> Any:
    """Map a command-line argument to a node, trying it as a string first, then as an integer."""
    if raw in graph:
        return raw
    try:
        as_int = int(raw)
    except ValueError:
        as_int = None
    if as_int is not None and as_int in graph:
        return as_int
    raise click.BadParameter(f"Node {raw!r} is not in the graph", param_hint=param_hint)


def _length_resolver(weight_key: str | None) -> Callable[[Any], float]:
    if weight_key is None:
        return lambda payload: float(payload)
    return lambda payload: float(payload[weight_key])


def _euclidean_resolver(document: GraphDocument) -> Callable[[Any, Any], float]:
    def score(node: Any, goal: Any) -> float:
        a = document.position(node)
        b = document.position(goal)
        if a is None or b is None:
            return 0.0
        return math.dist(a, b)

    return score


@click.group()
@click.option(
    "--backend",
    type=click.Choice(sorted(BACKENDS)),
    default=DEFAULT_BACKEND,
    envvar="PATHGRAPH_BACKEND",
    show_default=True,
    help="Edge storage backend (env: PATHGRAPH_BACKEND).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, backend: str, verbose: bool) -> None:
    """pathgraph CLI — query directed graphs stored as JSON documents."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["backend"] = backend


@cli.command()
@click.argument("graph_file", type=GRAPH_FILE)
@click.argument("start")
@click.argument("end")
@click.option("--weighted", is_flag=True, help="Use numeric edge payloads as lengths (Dijkstra).")
@click.option("--weight-key", default=None, help="Read lengths from this key of dict payloads.")
@click.option(
    "--heuristic",
    type=click.Choice(["none", "euclidean"]),
    default="none",
    show_default=True,
    help="Node score for A*; needs edge lengths.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
def path(
    ctx: click.Context,
    graph_file: str,
    start: str,
    end: str,
    weighted: bool,
    weight_key: str | None,
    heuristic: str,
    as_json: bool,
) -> None:
    """Find the best path from START to END."""
    weighted = weighted or weight_key is not None
    if heuristic != "none" and not weighted:
        raise click.UsageError("--heuristic requires --weighted or --weight-key")

    document, graph = _load(ctx, graph_file)
    start_node = _resolve_node(graph, start, "START")
    end_node = _resolve_node(graph, end, "END")

    if weighted:
        graph.set_edge_length_resolver(_length_resolver(weight_key))
    if heuristic == "euclidean":
        graph.set_node_score_resolver(_euclidean_resolver(document))

    try:
        found = graph.find_path(start_node, end_node)
    except (TypeError, KeyError, ValueError) as exc:
        raise click.ClickException(f"Cannot measure edge lengths: {exc}") from exc

    result = PathResult(start=start_node, end=end_node, algorithm=graph.algorithm.value, path=found)
    if as_json:
        click.echo(result.model_dump_json())
    elif result.found:
        click.echo(" -> ".join(str(n) for n in result.path))
        click.echo(f"algorithm={result.algorithm}  hops={result.hops}")
    else:
        click.echo("No path found.")

    if not result.found:
        ctx.exit(1)


@cli.command()
@click.argument("graph_file", type=GRAPH_FILE)
@click.pass_context
def degrees(ctx: click.Context, graph_file: str) -> None:
    """Print nodes in ascending degree order."""
    _, graph = _load(ctx, graph_file)
    for node in graph.degree_sequence():
        click.echo(f"{node}\t{graph.degree(node)}")


@cli.command()
@click.argument("graph_file", type=GRAPH_FILE)
@click.argument("node")
@click.option(
    "--direction",
    type=click.Choice(["out", "in", "all"]),
    default="out",
    show_default=True,
    help="Which edges to follow.",
)
@click.pass_context
def neighbors(ctx: click.Context, graph_file: str, node: str, direction: str) -> None:
    """List the neighbors of NODE."""
    _, graph = _load(ctx, graph_file)
    resolved = _resolve_node(graph, node, "NODE")
    if direction == "out":
        found = graph.out_neighbors(resolved)
    elif direction == "in":
        found = graph.in_neighbors(resolved)
    else:
        found = graph.all_neighbors(resolved)

    if not found:
        click.echo("No neighbors found.")
        return
    for n in found:
        click.echo(f"  {n}")


@cli.command()
@click.argument("graph_file", type=GRAPH_FILE)
@click.pass_context
def stats(ctx: click.Context, graph_file: str) -> None:
    """Show graph statistics."""
    _, graph = _load(ctx, graph_file)
    s = graph.stats()
    result = GraphStats(
        node_count=s["num_nodes"],
        edge_count=s["num_edges"],
        backend=s["backend"],
        algorithm=s["algorithm"],
        min_degree=s["min_degree"],
        max_degree=s["max_degree"],
    )
    click.echo(f"Nodes: {result.node_count}  Edges: {result.edge_count}")
    click.echo(f"Backend: {result.backend}")
    click.echo(f"Degree range: {result.min_degree}..{result.max_degree}")


@cli.command()
@click.argument("graph_file", type=GRAPH_FILE)
@click.pass_context
def validate(ctx: click.Context, graph_file: str) -> None:
    """Validate internal consistency of the graph."""
    _, graph = _load(ctx, graph_file)
    report = graph.validate()
    result = ValidationResult(
        valid=report["valid"],
        errors=report.get("errors", []),
        warnings=report.get("warnings", []),
    )
    if result.valid:
        click.echo("Graph is valid.")
    else:
        click.echo("Validation errors:")
        for err in result.errors:
            click.echo(f"  ERROR: {err}")
    for warn in result.warnings:
        click.echo(f"  WARNING: {warn}")
    if not result.valid:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
