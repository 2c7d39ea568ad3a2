"""Graph algorithms over successor maps."""

from collections.abc import Collection, Hashable, Mapping


def is_reachable[T: Hashable](successors: Mapping[T, Collection[T]], start: T, goal: T) -> bool:
    """Check whether ``goal`` can be reached from ``start`` along successor edges.

    The search only expands vertices that are keys of ``successors``. A vertex
    that appears as a successor but has no entry of its own ends its branch.
    A path of length zero counts, so ``is_reachable(g, a, a)`` is always True.

    Args:
        successors: Mapping from vertex to the vertices it points to.
        start: Vertex the search begins at.
        goal: Vertex being looked for.

    Returns:
        True if a directed path ``start -> ... -> goal`` exists.

    Example:
        >>> is_reachable({"a": {"b"}, "b": {"c"}}, "a", "c")
        True
        >>> is_reachable({"a": {"b"}, "b": {"c"}}, "c", "a")
        False

    """
    visited: set[T] = set()
    stack = [start]
    while stack:
        current = stack.pop()
        if current == goal:
            return True
        if current in visited:
            continue
        visited.add(current)
        # Unregistered vertices have no outgoing edges to follow
        for successor in successors.get(current, ()):
            if successor not in visited:
                stack.append(successor)
    return False
