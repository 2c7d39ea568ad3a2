"""Mutable directed acyclic graph keyed by an ordered vertex type."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from ordered_dag._errors import CycleDetectedError, VertexNotFoundError

from ._algorithms import is_reachable

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

logger = logging.getLogger(__name__)


class SupportsOrdering(Protocol):
    """Hashable value with a total order, usable as a vertex."""

    def __lt__(self, other: Any, /) -> bool: ...

    def __hash__(self) -> int: ...


class OrderedDAG[T: SupportsOrdering]:
    """A directed acyclic graph stored as a map from vertex to successor set.

    Each key of the map is a *registered* vertex. The set stored under a key
    holds the vertices that key points to, so the edge ``x -> y`` exists iff
    ``y`` is in the successor set of ``x``. A successor does not have to be
    registered itself: ``add_edge("a", "b")`` is accepted when only ``"a"`` is
    a key, and ``"b"`` stays unregistered until ``add_vertex("b")``.

    Invariants kept by every operation:
    - No directed cycle exists between registered vertices.
    - A removed vertex never remains in another vertex's successor set.

    Keys and successors are always reported in sorted order. Successor sets
    handed out by the graph are frozenset snapshots.

    Example:
        >>> dag = OrderedDAG()
        >>> dag.add_vertex("a")
        >>> dag.add_vertex("b")
        >>> dag.add_edge("a", "b")
        frozenset()
        >>> dag.adjacent("a", "b")
        True

    """

    __slots__ = ("_vertices",)

    def __init__(self) -> None:
        self._vertices: dict[T, set[T]] = {}

    @classmethod
    def from_dict(cls, vertices: Mapping[T, Any]) -> OrderedDAG[T]:
        """Build a graph from a mapping of vertex to successor collection.

        Every key is registered first, then each edge is inserted through
        ``add_edge`` so the acyclicity check applies to the input.

        Args:
            vertices: Mapping from vertex to an iterable of its successors.

        Returns:
            A new OrderedDAG instance.

        Raises:
            CycleDetectedError: If the mapping describes a cycle.

        """
        dag: OrderedDAG[T] = cls()
        for vertex in vertices:
            dag.add_vertex(vertex)
        for vertex in sorted(vertices):
            for successor in sorted(vertices[vertex]):
                dag.add_edge(vertex, successor)
        return dag

    def to_dict(self) -> dict[T, list[T]]:
        """Return the graph as a plain ``{vertex: [successor, ...]}`` mapping, sorted."""
        return {vertex: sorted(self._vertices[vertex]) for vertex in sorted(self._vertices)}

    def copy(self) -> OrderedDAG[T]:
        """Return an independent copy of the graph."""
        dag: OrderedDAG[T] = type(self)()
        dag._vertices = {vertex: set(successors) for vertex, successors in self._vertices.items()}
        return dag

    # -- registration and queries ------------------------------------------

    def vertices(self) -> list[T]:
        """Get all registered vertices in sorted order."""
        return sorted(self._vertices)

    def edges(self) -> list[tuple[T, T]]:
        """Get all ``(source, target)`` edges in sorted order."""
        return [(vertex, successor) for vertex, successors in self.to_dict().items() for successor in successors]

    def add_vertex(self, x: T) -> frozenset[T] | None:
        """Register ``x`` with an empty successor set.

        Re-adding a registered vertex is a mutation: its outgoing edges are
        dropped.

        Returns:
            The previous successor set of ``x``, or None if ``x`` was new.

        """
        previous = self._vertices.get(x)
        self._vertices[x] = set()
        return None if previous is None else frozenset(previous)

    def get_vertex_value(self, x: T) -> frozenset[T] | None:
        """Get the successor set of ``x``, or None if ``x`` is not registered."""
        successors = self._vertices.get(x)
        return None if successors is None else frozenset(successors)

    def connections(self, x: T) -> frozenset[T] | None:
        """Get the vertices ``x`` points to, or None if ``x`` is not registered."""
        return self.get_vertex_value(x)

    def adjacent(self, x: T, y: T) -> bool:
        """Check whether the edge ``x -> y`` exists.

        Both endpoints must be registered, even though an edge target in
        general does not need to be.

        Raises:
            VertexNotFoundError: If ``y`` or ``x`` is not registered.

        """
        self._require(y)
        return y in self._require(x)

    # -- edges ---------------------------------------------------------------

    def add_edge(self, x: T, y: T) -> frozenset[T]:
        """Add the edge ``x -> y`` unless it would create a cycle.

        The edge closes a cycle exactly when ``x`` is already reachable from
        ``y``, so only the part of the graph reachable from ``y`` is searched.
        ``y`` does not have to be registered. Adding an existing edge is a
        no-op that still succeeds.

        Returns:
            The successor set of ``x`` before the insertion.

        Raises:
            VertexNotFoundError: If ``x`` is not registered.
            CycleDetectedError: If ``y`` can reach ``x`` (including ``x == y``).

        """
        successors = self._require(x)
        if is_reachable(self._vertices, y, x):
            logger.debug(f"Rejected edge {x!r} -> {y!r}: cycle")
            raise CycleDetectedError(x, y)
        previous = frozenset(successors)
        successors.add(y)
        return previous

    def remove_edge(self, x: T, y: T) -> frozenset[T]:
        """Remove the edge ``x -> y``.

        Removing an edge that does not exist succeeds and changes nothing.

        Returns:
            The successor set of ``x`` before the removal.

        Raises:
            VertexNotFoundError: If ``y`` or ``x`` is not registered.

        """
        self._require(y)
        successors = self._require(x)
        previous = frozenset(successors)
        successors.discard(y)
        return previous

    # -- vertex removal ------------------------------------------------------

    def remove_vertex(self, x: T) -> frozenset[T]:
        """Remove ``x`` and every edge pointing into it.

        The vertices ``x`` points to are left in place.

        Returns:
            The successor set ``x`` had when it was removed.

        Raises:
            VertexNotFoundError: If ``x`` is not registered. The graph is unchanged.

        """
        self._require(x)
        for vertex, successors in self._vertices.items():
            if vertex != x and x in successors:
                self.remove_edge(vertex, x)
        removed = frozenset(self._vertices.pop(x))
        logger.debug(f"Removed vertex {x!r}")
        return removed

    def prune(self, x: T) -> list[T]:
        """Remove ``x`` and every vertex reachable from it.

        Each vertex is removed with ``remove_vertex``, so incoming edges from
        vertices outside the pruned set are cleaned up as well. A successor
        that is not registered by the time it is reached (never registered, or
        already removed through another path) is skipped.

        Returns:
            The removed vertices, in removal order.

        Raises:
            VertexNotFoundError: If ``x`` is not registered.

        """
        self._require(x)
        removed: list[T] = []
        stack = [x]
        while stack:
            current = stack.pop()
            if current not in self._vertices:
                continue
            successors = self.remove_vertex(current)
            removed.append(current)
            # Reverse so successors are pruned in ascending order
            stack.extend(sorted(successors, reverse=True))
        logger.debug(f"Pruned {len(removed)} vertices starting at {x!r}")
        return removed

    # -- helpers -------------------------------------------------------------

    def _require(self, x: T) -> set[T]:
        try:
            return self._vertices[x]
        except KeyError:
            raise VertexNotFoundError(x) from None

    def __len__(self) -> int:
        """Return the number of registered vertices."""
        return len(self._vertices)

    def __contains__(self, x: object) -> bool:
        """Check if a vertex is registered."""
        return x in self._vertices

    def __iter__(self) -> Iterator[T]:
        return iter(self.vertices())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderedDAG):
            return NotImplemented
        return self._vertices == other._vertices

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"

    def __str__(self) -> str:
        lines = []
        for vertex, successors in self.to_dict().items():
            targets = ", ".join(str(successor) for successor in successors)
            lines.append(f"{vertex} -> {targets}" if targets else f"{vertex}")
        return "\n".join(lines)
