"""Rich rendering utilities for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from rich.console import Console

    from ordered_dag._graph import OrderedDAG


def _format_vertex(vertex: Any, *, registered: bool) -> str:
    text = escape(str(vertex))
    # Unregistered targets are shown dimmed
    return text if registered else f"[dim]{text}[/dim]"


def render_graph_table(dag: OrderedDAG[Any], console: Console) -> None:
    """Render every registered vertex and its successors as a Rich table.

    Args:
        dag: The graph to render.
        console: Rich Console to output to.

    """
    if not dag:
        console.print("[dim]Graph has no vertices[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Vertex", style="bold")
    table.add_column("Successors")
    table.add_column("Out", justify="right")

    for vertex, successors in dag.to_dict().items():
        targets = ", ".join(_format_vertex(s, registered=s in dag) for s in successors)
        table.add_row(escape(str(vertex)), targets or "[dim]-[/dim]", str(len(successors)))

    console.print(table)
    console.print(f"\n[dim]Total: {len(dag)} vertices, {len(dag.edges())} edges[/dim]")


def render_vertex_detail(dag: OrderedDAG[Any], vertex: Any, console: Console) -> None:
    """Render the direct successors of a single registered vertex.

    Args:
        dag: The graph containing the vertex.
        vertex: A registered vertex.
        console: Rich Console to output to.

    """
    successors = sorted(dag.connections(vertex) or ())
    console.print(f"[bold]Vertex:[/bold] {escape(str(vertex))}")
    console.print()
    if successors:
        console.print(f"[cyan]Successors ({len(successors)} direct):[/cyan]")
        for successor in successors:
            suffix = "" if successor in dag else " [dim](unregistered)[/dim]"
            console.print(f"  {escape(str(successor))}{suffix}")
    else:
        console.print("[cyan]Successors:[/cyan] [dim]None[/dim]")


def render_descendant_tree(dag: OrderedDAG[Any], root: Any, console: Console) -> None:
    """Render everything reachable from a registered vertex as a Rich Tree.

    A vertex reached through more than one path is expanded only the first
    time; later occurrences are marked as repeated.

    Args:
        dag: The graph containing the vertex.
        root: A registered vertex.
        console: Rich Console to output to.

    """
    rich_tree = Tree(f"[bold]{escape(str(root))}[/bold]")
    visited = {root}
    # Explicit stack of (tree node, vertex whose successors still need adding)
    stack: list[tuple[Tree, Any]] = [(rich_tree, root)]
    while stack:
        parent, vertex = stack.pop()
        expand: list[tuple[Tree, Any]] = []
        for successor in sorted(dag.connections(vertex) or ()):
            registered = successor in dag
            label = _format_vertex(successor, registered=registered)
            if successor in visited:
                parent.add(f"{label} [dim](repeated)[/dim]")
                continue
            visited.add(successor)
            child = parent.add(label)
            if registered:
                expand.append((child, successor))
        # Expand in display order
        stack.extend(reversed(expand))
    console.print(rich_tree)
