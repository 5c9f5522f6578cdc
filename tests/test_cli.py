"""Tests for the pathgraph command-line interface."""

import json

import pytest
from click.testing import CliRunner
from graph_data import REFERENCE_EDGES

from pathgraph.cli.main import cli


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture()
def keyed_document(tmp_path):
    """The reference graph with lengths stored under a "w" key of dict payloads."""
    data = {
        "nodes": list(range(1, 12)),
        "edges": [
            {"source": s, "target": t, "payload": {"w": length, "label": f"{s}-{t}"}}
            for s, t, length in REFERENCE_EDGES
        ],
    }
    path = tmp_path / "keyed.json"
    path.write_text(json.dumps(data))
    return str(path)


class TestPathCommand:
    def test_unweighted(self, runner, reference_document):
        result = runner.invoke(cli, ["path", reference_document, "1", "11"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "1 -> 2 -> 3 -> 7 -> 9 -> 11"
        assert lines[1] == "algorithm=bfs  hops=5"

    @pytest.mark.parametrize("backend", ["adjacency", "matrix"])
    def test_weighted(self, runner, reference_document, backend):
        result = runner.invoke(
            cli, ["--backend", backend, "path", reference_document, "1", "11", "--weighted"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == "1 -> 8 -> 4 -> 5 -> 6 -> 10 -> 11"
        assert "algorithm=dijkstra  hops=6" in result.output

    def test_weight_key(self, runner, keyed_document):
        result = runner.invoke(cli, ["path", keyed_document, "1", "11", "--weight-key", "w"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == "1 -> 8 -> 4 -> 5 -> 6 -> 10 -> 11"

    def test_weight_key_missing_from_payload(self, runner, keyed_document):
        result = runner.invoke(cli, ["path", keyed_document, "1", "11", "--weight-key", "cost"])
        assert result.exit_code == 1
        assert "Cannot measure edge lengths" in result.output

    def test_euclidean_heuristic(self, runner, reference_document):
        result = runner.invoke(
            cli,
            ["path", reference_document, "1", "11", "--weighted", "--heuristic", "euclidean", "--json"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["algorithm"] == "astar"
        assert data["path"][0] == 1
        assert data["path"][-1] == 11

    def test_heuristic_requires_lengths(self, runner, reference_document):
        result = runner.invoke(
            cli, ["path", reference_document, "1", "11", "--heuristic", "euclidean"]
        )
        assert result.exit_code == 2
        assert "--heuristic requires --weighted" in result.output

    def test_json_output(self, runner, reference_document):
        result = runner.invoke(cli, ["path", reference_document, "1", "11", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "start": 1,
            "end": 11,
            "algorithm": "bfs",
            "path": [1, 2, 3, 7, 9, 11],
        }

    def test_no_path(self, runner, reference_document):
        result = runner.invoke(cli, ["path", reference_document, "11", "1"])
        assert result.exit_code == 1
        assert "No path found." in result.output

    def test_no_path_json(self, runner, reference_document):
        result = runner.invoke(cli, ["path", reference_document, "11", "1", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.output.splitlines()[0])["path"] is None

    def test_unknown_node(self, runner, reference_document):
        result = runner.invoke(cli, ["path", reference_document, "1", "42"])
        assert result.exit_code == 2
        assert "Node '42' is not in the graph" in result.output

    def test_string_nodes(self, runner, tmp_path):
        doc = tmp_path / "named.json"
        doc.write_text(
            json.dumps(
                {
                    "nodes": ["home", "shop", "work"],
                    "edges": [
                        {"source": "home", "target": "shop", "payload": 1},
                        {"source": "shop", "target": "work", "payload": 1},
                    ],
                }
            )
        )
        result = runner.invoke(cli, ["path", str(doc), "home", "work"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == "home -> shop -> work"


class TestInspectionCommands:
    def test_degrees(self, runner, reference_document):
        result = runner.invoke(cli, ["degrees", reference_document])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 11
        assert lines[0] == "1\t2"
        assert lines[-1] == "7\t3"

    def test_neighbors_out(self, runner, reference_document):
        result = runner.invoke(cli, ["neighbors", reference_document, "2"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["  3", "  4"]

    def test_neighbors_all(self, runner, reference_document):
        result = runner.invoke(
            cli, ["neighbors", reference_document, "7", "--direction", "all"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["  6", "  9", "  3"]

    def test_neighbors_none(self, runner, reference_document):
        result = runner.invoke(cli, ["neighbors", reference_document, "11"])
        assert result.exit_code == 0
        assert "No neighbors found." in result.output

    def test_stats(self, runner, reference_document):
        result = runner.invoke(cli, ["stats", reference_document])
        assert result.exit_code == 0, result.output
        assert "Nodes: 11  Edges: 13" in result.output
        assert "Backend: adjacency" in result.output
        assert "Degree range: 2..3" in result.output

    def test_backend_from_environment(self, runner, reference_document):
        result = runner.invoke(
            cli, ["stats", reference_document], env={"PATHGRAPH_BACKEND": "matrix"}
        )
        assert result.exit_code == 0, result.output
        assert "Backend: matrix" in result.output

    def test_unknown_backend_rejected(self, runner, reference_document):
        result = runner.invoke(cli, ["--backend", "sparse", "stats", reference_document])
        assert result.exit_code == 2

    def test_validate(self, runner, reference_document):
        result = runner.invoke(cli, ["--backend", "matrix", "validate", reference_document])
        assert result.exit_code == 0, result.output
        assert "Graph is valid." in result.output


class TestDocumentErrors:
    def test_edges_to_unknown_nodes(self, runner, tmp_path):
        doc = tmp_path / "bad.json"
        doc.write_text(json.dumps({"nodes": [1], "edges": [{"source": 1, "target": 2}]}))
        result = runner.invoke(cli, ["validate", str(doc)])
        assert result.exit_code == 1
        assert "missing from 'nodes'" in result.output

    def test_not_json(self, runner, tmp_path):
        doc = tmp_path / "bad.json"
        doc.write_text("nodes: [1, 2]")
        result = runner.invoke(cli, ["stats", str(doc)])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_not_utf8(self, runner, tmp_path):
        doc = tmp_path / "bad.json"
        doc.write_bytes(b"\xff\xfe\x00\x01")
        result = runner.invoke(cli, ["stats", str(doc)])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["stats", str(tmp_path / "absent.json")])
        assert result.exit_code == 2
