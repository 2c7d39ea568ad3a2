"""Exception types raised by ordered_dag.

Every failure is raised synchronously by the call that caused it and leaves
the graph unchanged, with the single exception of ``OrderedDAG.prune``.
"""

from typing import Any


class DagError(Exception):
    """Base class for all ordered_dag errors."""


class VertexNotFoundError(DagError, KeyError):
    """Raised when an operation references a vertex that is not registered."""

    def __init__(self, vertex: Any) -> None:
        self.vertex = vertex
        super().__init__(vertex)

    def __str__(self) -> str:
        return f"Vertex {self.vertex!r} is not registered"


class CycleDetectedError(DagError, ValueError):
    """Raised when adding the edge ``source -> target`` would close a cycle."""

    def __init__(self, source: Any, target: Any) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Edge {source!r} -> {target!r} would create a cycle")


class GraphFormatError(DagError, ValueError):
    """Raised when an encoded document cannot be decoded into a graph."""
