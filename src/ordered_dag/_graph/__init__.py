"""Graph module providing the ordered DAG container.

This module contains:
- OrderedDAG[T]: A mutable directed acyclic graph keyed by an ordered vertex type
- is_reachable: Reachability search used to reject cycle-closing edges
"""

from ._algorithms import is_reachable
from ._ordered_dag import OrderedDAG, SupportsOrdering

__all__ = ["OrderedDAG", "SupportsOrdering", "is_reachable"]
