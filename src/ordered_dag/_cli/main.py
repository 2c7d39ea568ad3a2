import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ordered_dag._errors import DagError
from ordered_dag._graph import OrderedDAG
from ordered_dag._io import load_graph, save_graph

from .config import ConfigError, DagConfig, get_config
from .render import render_descendant_tree, render_graph_table, render_vertex_detail

app = typer.Typer(no_args_is_help=True)

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

GraphOption = Annotated[
    Path | None,
    typer.Option("-g", "--graph", help="Path to the graph file (.toml or .json); defaults to [tool.ordered-dag].graph"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Ordered DAG CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]✗ {escape(message)}[/red]")
    return typer.Exit(code=1)


def _load_config() -> DagConfig:
    try:
        return get_config()
    except ConfigError as e:
        raise _fail(str(e)) from e


def _resolve_graph_path(graph: Path | None, config: DagConfig) -> Path:
    if graph is not None:
        return graph
    if config.graph is not None:
        logger.debug(f"Using graph file from config: {config.graph}")
        return config.graph
    msg = "No graph file given. Pass --graph or set [tool.ordered-dag].graph in pyproject.toml"
    raise _fail(msg)


def _parse_vertices(raw: list[str], config: DagConfig) -> list[Any]:
    try:
        return [config.parse_vertex(value) for value in raw]
    except ConfigError as e:
        raise _fail(str(e)) from e


def _check_vertex_types(dag: OrderedDAG[Any], config: DagConfig, path: Path) -> None:
    expected = int if config.vertex_type == "int" else str
    found = set(dag.vertices()) | {vertex for edge in dag.edges() for vertex in edge}
    mismatched = sorted(repr(vertex) for vertex in found if type(vertex) is not expected)
    if mismatched:
        msg = (
            f"{path} contains vertices that are not of type {config.vertex_type!r}: {', '.join(mismatched)}. "
            "Set [tool.ordered-dag].vertex-type to match the file"
        )
        raise _fail(msg)


def _open(graph: Path | None, *, check_types: bool = True) -> tuple[Path, OrderedDAG[Any], DagConfig]:
    config = _load_config()
    path = _resolve_graph_path(graph, config)
    if not path.exists():
        msg = f"Graph file not found: {path}"
        raise _fail(msg)
    try:
        dag = load_graph(path)
    except DagError as e:
        raise _fail(str(e)) from e
    if check_types:
        _check_vertex_types(dag, config, path)
    return path, dag, config


def _save(dag: OrderedDAG[Any], path: Path) -> None:
    try:
        save_graph(dag, path)
    except DagError as e:
        raise _fail(str(e)) from e


@app.command()
def init(
    *,
    graph: GraphOption = None,
    force: Annotated[
        bool,
        typer.Option("-f", "--force", help="Overwrite an existing graph file"),
    ] = False,
) -> None:
    """Create an empty graph file."""
    path = _resolve_graph_path(graph, _load_config())
    if path.exists() and not force:
        msg = f"Graph file already exists: {path} (use --force to overwrite)"
        raise _fail(msg)
    _save(OrderedDAG(), path)
    err_console.print(f"[green]✓ Created empty graph:[/green] {path}")


@app.command()
def show(
    *,
    graph: GraphOption = None,
    vertex: Annotated[
        str | None,
        typer.Option("-v", "--vertex", help="Show only the successors of this vertex"),
    ] = None,
    tree: Annotated[
        str | None,
        typer.Option("-t", "--tree", help="Show every vertex reachable from this vertex as a tree"),
    ] = None,
) -> None:
    """Show the vertices and edges of a graph."""
    if vertex is not None and tree is not None:
        msg = "--vertex and --tree cannot be used together"
        raise _fail(msg)
    _path, dag, config = _open(graph)
    selected = vertex if vertex is not None else tree
    if selected is None:
        render_graph_table(dag, out_console)
        return

    (parsed,) = _parse_vertices([selected], config)
    if parsed not in dag:
        msg = f"Vertex {parsed!r} is not registered"
        raise _fail(msg)
    if tree is not None:
        render_descendant_tree(dag, parsed, out_console)
    else:
        render_vertex_detail(dag, parsed, out_console)


@app.command("add-vertex")
def add_vertex(
    vertices: Annotated[list[str], typer.Argument(help="Vertices to register")],
    *,
    graph: GraphOption = None,
) -> None:
    """Register one or more vertices (resets the outgoing edges of existing ones)."""
    path, dag, config = _open(graph)
    for vertex in _parse_vertices(vertices, config):
        previous = dag.add_vertex(vertex)
        if previous:
            err_console.print(
                f"[yellow]⚠ Vertex {escape(repr(vertex))} was re-registered; dropped {len(previous)} edge(s)[/yellow]",
            )
    _save(dag, path)
    err_console.print(f"[green]✓ Registered {len(vertices)} vertex(es)[/green]")


def _edge_command(graph: Path | None, source: str, target: str, *, remove: bool) -> None:
    path, dag, config = _open(graph)
    x, y = _parse_vertices([source, target], config)
    try:
        if remove:
            dag.remove_edge(x, y)
        else:
            dag.add_edge(x, y)
    except DagError as e:
        raise _fail(str(e)) from e
    _save(dag, path)
    verb = "Removed" if remove else "Added"
    err_console.print(f"[green]✓ {verb} edge {escape(repr(x))} -> {escape(repr(y))}[/green]")


@app.command("add-edge")
def add_edge(
    source: Annotated[str, typer.Argument(help="Source vertex (must be registered)")],
    target: Annotated[str, typer.Argument(help="Target vertex")],
    *,
    graph: GraphOption = None,
) -> None:
    """Add an edge, refusing any edge that would create a cycle."""
    _edge_command(graph, source, target, remove=False)


@app.command("remove-edge")
def remove_edge(
    source: Annotated[str, typer.Argument(help="Source vertex")],
    target: Annotated[str, typer.Argument(help="Target vertex")],
    *,
    graph: GraphOption = None,
) -> None:
    """Remove an edge (succeeds if the edge is already absent)."""
    _edge_command(graph, source, target, remove=True)


@app.command("remove-vertex")
def remove_vertex(
    vertex: Annotated[str, typer.Argument(help="Vertex to remove")],
    *,
    graph: GraphOption = None,
) -> None:
    """Remove a vertex and every edge pointing into it."""
    path, dag, config = _open(graph)
    (parsed,) = _parse_vertices([vertex], config)
    try:
        successors = dag.remove_vertex(parsed)
    except DagError as e:
        raise _fail(str(e)) from e
    _save(dag, path)
    err_console.print(
        f"[green]✓ Removed vertex {escape(repr(parsed))}[/green] [dim]({len(successors)} outgoing edge(s))[/dim]",
    )


@app.command()
def prune(
    vertex: Annotated[str, typer.Argument(help="Vertex to prune together with its descendants")],
    *,
    graph: GraphOption = None,
) -> None:
    """Remove a vertex and every vertex reachable from it."""
    path, dag, config = _open(graph)
    (parsed,) = _parse_vertices([vertex], config)
    try:
        removed = dag.prune(parsed)
    except DagError as e:
        raise _fail(str(e)) from e
    _save(dag, path)
    err_console.print(f"[green]✓ Pruned {len(removed)} vertex(es)[/green]")
    for item in removed:
        out_console.print(escape(str(item)))


@app.command()
def adjacent(
    source: Annotated[str, typer.Argument(help="Source vertex")],
    target: Annotated[str, typer.Argument(help="Target vertex")],
    *,
    graph: GraphOption = None,
) -> None:
    """Print whether the edge SOURCE -> TARGET exists."""
    _path, dag, config = _open(graph)
    x, y = _parse_vertices([source, target], config)
    try:
        result = dag.adjacent(x, y)
    except DagError as e:
        raise _fail(str(e)) from e
    out_console.print("true" if result else "false")


@app.command()
def convert(
    source: Annotated[Path, typer.Argument(help="Graph file to read (.toml or .json)")],
    destination: Annotated[Path, typer.Argument(help="Graph file to write (.toml or .json)")],
) -> None:
    """Re-encode a graph file between TOML and JSON."""
    # Re-encoding never parses vertex arguments, so any vertex type is accepted
    _path, dag, _config = _open(source, check_types=False)
    _save(dag, destination)
    err_console.print(f"[green]✓ Wrote {len(dag)} vertices to[/green] {destination}")


def main() -> None:
    app()
