"""Directed acyclic graph container keyed by an ordered vertex type."""

__all__ = [
    "CycleDetectedError",
    "DagError",
    "GraphDocument",
    "GraphFormatError",
    "OrderedDAG",
    "SupportsOrdering",
    "VertexNotFoundError",
    "VertexRecord",
    "document_to_graph",
    "dumps_json",
    "dumps_toml",
    "graph_to_document",
    "is_reachable",
    "load_graph",
    "loads_json",
    "loads_toml",
    "save_graph",
]

from ._errors import CycleDetectedError, DagError, GraphFormatError, VertexNotFoundError
from ._graph import OrderedDAG, SupportsOrdering, is_reachable
from ._io import (
    GraphDocument,
    VertexRecord,
    document_to_graph,
    dumps_json,
    dumps_toml,
    graph_to_document,
    load_graph,
    loads_json,
    loads_toml,
    save_graph,
)
