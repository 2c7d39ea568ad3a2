"""Tests for the ordered-dag command-line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from ordered_dag import OrderedDAG, load_graph, save_graph
from ordered_dag._cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep get_config() from picking up an unrelated pyproject.toml
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def graph_path(tmp_path: Path) -> Path:
    path = tmp_path / "dag.toml"
    save_graph(OrderedDAG.from_dict({"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []}), path)
    return path


def _run(*args: str):
    return runner.invoke(app, list(args))


def _stdout_lines(result) -> list[str]:
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


class TestInit:
    def test_creates_empty_graph(self, tmp_path: Path) -> None:
        path = tmp_path / "new.json"
        result = _run("init", "--graph", str(path))
        assert result.exit_code == 0
        assert load_graph(path) == OrderedDAG()

    def test_refuses_to_overwrite(self, graph_path: Path) -> None:
        result = _run("init", "--graph", str(graph_path))
        assert result.exit_code == 1
        assert len(load_graph(graph_path)) == 4

    def test_force_overwrites(self, graph_path: Path) -> None:
        result = _run("init", "--graph", str(graph_path), "--force")
        assert result.exit_code == 0
        assert len(load_graph(graph_path)) == 0

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        result = _run("init", "--graph", str(tmp_path / "dag.yaml"))
        assert result.exit_code == 1
        assert not (tmp_path / "dag.yaml").exists()


class TestEdges:
    def test_add_edges_and_reject_cycle(self, tmp_path: Path) -> None:
        path = tmp_path / "dag.toml"
        assert _run("init", "-g", str(path)).exit_code == 0
        assert _run("add-vertex", "a", "b", "c", "-g", str(path)).exit_code == 0
        assert _run("add-edge", "a", "b", "-g", str(path)).exit_code == 0
        assert _run("add-edge", "b", "c", "-g", str(path)).exit_code == 0

        result = _run("add-edge", "c", "a", "-g", str(path))

        assert result.exit_code == 1
        assert "cycle" in result.output
        assert load_graph(path).edges() == [("a", "b"), ("b", "c")]

    def test_unregistered_target(self, tmp_path: Path) -> None:
        path = tmp_path / "dag.toml"
        save_graph(OrderedDAG.from_dict({"a": []}), path)

        assert _run("add-edge", "a", "b", "-g", str(path)).exit_code == 0
        result = _run("adjacent", "a", "b", "-g", str(path))

        assert result.exit_code == 1
        assert "registered" in result.output
        assert load_graph(path).connections("a") == frozenset({"b"})

    def test_unregistered_source(self, graph_path: Path) -> None:
        result = _run("add-edge", "z", "a", "-g", str(graph_path))
        assert result.exit_code == 1

    def test_remove_edge_is_idempotent(self, graph_path: Path) -> None:
        assert _run("remove-edge", "a", "b", "-g", str(graph_path)).exit_code == 0
        first = load_graph(graph_path)
        assert _run("remove-edge", "a", "b", "-g", str(graph_path)).exit_code == 0
        assert load_graph(graph_path) == first
        assert first.connections("a") == frozenset({"c"})

    def test_adjacent(self, graph_path: Path) -> None:
        result = _run("adjacent", "a", "b", "-g", str(graph_path))
        assert result.exit_code == 0
        assert "true" in _stdout_lines(result)

        result = _run("adjacent", "b", "a", "-g", str(graph_path))
        assert result.exit_code == 0
        assert "false" in _stdout_lines(result)


class TestVertices:
    def test_re_adding_vertex_drops_edges(self, graph_path: Path) -> None:
        result = _run("add-vertex", "a", "-g", str(graph_path))
        assert result.exit_code == 0
        assert load_graph(graph_path).connections("a") == frozenset()

    def test_remove_vertex(self, graph_path: Path) -> None:
        result = _run("remove-vertex", "d", "-g", str(graph_path))
        assert result.exit_code == 0
        dag = load_graph(graph_path)
        assert dag.vertices() == ["a", "b", "c"]
        assert dag.edges() == [("a", "b"), ("a", "c")]

    def test_remove_unregistered_vertex(self, graph_path: Path) -> None:
        before = load_graph(graph_path)
        result = _run("remove-vertex", "z", "-g", str(graph_path))
        assert result.exit_code == 1
        assert load_graph(graph_path) == before

    def test_prune_diamond(self, graph_path: Path) -> None:
        result = _run("prune", "a", "-g", str(graph_path))
        assert result.exit_code == 0
        assert _stdout_lines(result)[-4:] == ["a", "b", "d", "c"]
        assert load_graph(graph_path).vertices() == []

    def test_prune_unregistered_vertex(self, graph_path: Path) -> None:
        result = _run("prune", "z", "-g", str(graph_path))
        assert result.exit_code == 1
        assert len(load_graph(graph_path)) == 4


class TestShow:
    def test_table(self, graph_path: Path) -> None:
        result = _run("show", "-g", str(graph_path))
        assert result.exit_code == 0
        for vertex in ("a", "b", "c", "d"):
            assert vertex in result.stdout
        assert "4 vertices" in result.stdout

    def test_empty_graph(self, tmp_path: Path) -> None:
        path = tmp_path / "dag.json"
        save_graph(OrderedDAG(), path)
        result = _run("show", "-g", str(path))
        assert result.exit_code == 0
        assert "no vertices" in result.stdout

    def test_single_vertex(self, graph_path: Path) -> None:
        result = _run("show", "-g", str(graph_path), "--vertex", "a")
        assert result.exit_code == 0
        assert "Successors (2 direct)" in result.stdout

    def test_single_unregistered_vertex(self, graph_path: Path) -> None:
        result = _run("show", "-g", str(graph_path), "--vertex", "z")
        assert result.exit_code == 1

    def test_descendant_tree(self, graph_path: Path) -> None:
        result = _run("show", "-g", str(graph_path), "--tree", "a")
        assert result.exit_code == 0
        for vertex in ("a", "b", "c", "d"):
            assert vertex in result.stdout
        # "d" is reached through both "b" and "c"
        assert result.stdout.count("(repeated)") == 1

    def test_descendant_tree_includes_unregistered_targets(self, tmp_path: Path) -> None:
        path = tmp_path / "dag.toml"
        save_graph(OrderedDAG.from_dict({"a": ["ghost"]}), path)
        result = _run("show", "-g", str(path), "--tree", "a")
        assert result.exit_code == 0
        assert "ghost" in result.stdout

    def test_descendant_tree_unregistered_root(self, graph_path: Path) -> None:
        result = _run("show", "-g", str(graph_path), "--tree", "z")
        assert result.exit_code == 1

    def test_tree_and_vertex_are_exclusive(self, graph_path: Path) -> None:
        result = _run("show", "-g", str(graph_path), "--tree", "a", "--vertex", "b")
        assert result.exit_code == 1


class TestConvert:
    def test_toml_to_json(self, graph_path: Path, tmp_path: Path) -> None:
        destination = tmp_path / "dag.json"
        result = _run("convert", str(graph_path), str(destination))
        assert result.exit_code == 0
        assert load_graph(destination) == load_graph(graph_path)

    def test_missing_source(self, tmp_path: Path) -> None:
        result = _run("convert", str(tmp_path / "missing.toml"), str(tmp_path / "out.json"))
        assert result.exit_code == 1

    def test_integer_graph_without_configuration(self, tmp_path: Path) -> None:
        source = tmp_path / "ints.json"
        destination = tmp_path / "ints.toml"
        save_graph(OrderedDAG.from_dict({1: [2, 3], 2: [3], 3: []}), source)

        result = _run("convert", str(source), str(destination))

        assert result.exit_code == 0
        assert load_graph(destination) == load_graph(source)


class TestConfiguration:
    def test_graph_from_pyproject(self, tmp_path: Path, graph_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(f'[tool.ordered-dag]\ngraph = "{graph_path.name}"\n')

        result = _run("adjacent", "a", "b")

        assert result.exit_code == 0
        assert "true" in _stdout_lines(result)

    def test_no_graph_configured(self) -> None:
        result = _run("show")
        assert result.exit_code == 1

    def test_integer_vertices(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.ordered-dag]\ngraph = "dag.json"\nvertex-type = "int"\n')
        assert _run("init").exit_code == 0
        assert _run("add-vertex", "10", "2").exit_code == 0
        assert _run("add-edge", "10", "2").exit_code == 0

        dag = load_graph(tmp_path / "dag.json")

        assert dag.vertices() == [2, 10]
        assert dag.adjacent(10, 2)

    def test_integer_vertex_type_rejects_text(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.ordered-dag]\ngraph = "dag.json"\nvertex-type = "int"\n')
        assert _run("init").exit_code == 0
        result = _run("add-vertex", "a")
        assert result.exit_code == 1

    def test_vertex_type_mismatch_with_file(self, tmp_path: Path) -> None:
        path = tmp_path / "dag.json"
        save_graph(OrderedDAG.from_dict({1: [2]}), path)
        result = _run("show", "-g", str(path))
        assert result.exit_code == 1
