"""Structured encoding of OrderedDAG to and from TOML and JSON documents.

A document lists one record per registered vertex, sorted by vertex, with the
vertex's successors sorted as well:

    [[vertices]]
    vertex = "a"
    successors = ["b", "c"]

Successors that are not registered themselves are written as-is, so a graph
survives an encode/decode round trip unchanged.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from ._errors import CycleDetectedError, GraphFormatError
from ._graph import OrderedDAG

logger = logging.getLogger(__name__)

type Vertex = StrictStr | StrictInt

SUFFIX_TOML = ".toml"
SUFFIX_JSON = ".json"


class VertexRecord(BaseModel):
    """A registered vertex and the vertices it points to."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    vertex: Vertex
    successors: list[Vertex] = Field(default_factory=list)


class GraphDocument(BaseModel):
    """Serializable form of an OrderedDAG."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    vertices: list[VertexRecord] = Field(default_factory=list)


def graph_to_document(dag: OrderedDAG[Any]) -> GraphDocument:
    """Convert a graph to its document form.

    Raises:
        GraphFormatError: If a vertex is neither a string nor an integer.

    """
    try:
        return GraphDocument(
            vertices=[
                VertexRecord(vertex=vertex, successors=successors) for vertex, successors in dag.to_dict().items()
            ],
        )
    except ValidationError as e:
        msg = f"Graph cannot be encoded: {e}"
        raise GraphFormatError(msg) from e


def document_to_graph(document: GraphDocument) -> OrderedDAG[Any]:
    """Rebuild a graph from its document form.

    All listed vertices are registered before any edge is inserted, and every
    edge goes through ``OrderedDAG.add_edge``, so a document describing a cycle
    is rejected.

    Raises:
        GraphFormatError: If a vertex is listed twice, the vertices cannot be
            ordered against each other, or the edges form a cycle.

    """
    vertices: dict[Any, list[Any]] = {}
    for record in document.vertices:
        if record.vertex in vertices:
            msg = f"Vertex {record.vertex!r} is listed more than once"
            raise GraphFormatError(msg)
        vertices[record.vertex] = record.successors

    types = {type(vertex) for vertex in vertices} | {type(s) for successors in vertices.values() for s in successors}
    if len(types) > 1:
        msg = "Vertices are not mutually comparable: document mixes string and integer vertices"
        raise GraphFormatError(msg)

    try:
        return OrderedDAG.from_dict(vertices)
    except CycleDetectedError as e:
        msg = f"Document does not describe an acyclic graph: {e}"
        raise GraphFormatError(msg) from e


def _validate(data: Any) -> GraphDocument:
    try:
        return GraphDocument.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid graph document: {e}"
        raise GraphFormatError(msg) from e


def dumps_toml(dag: OrderedDAG[Any]) -> str:
    """Encode a graph as a TOML string."""
    return tomli_w.dumps(graph_to_document(dag).model_dump())


def loads_toml(text: str) -> OrderedDAG[Any]:
    """Decode a graph from a TOML string.

    Raises:
        GraphFormatError: If the text is not valid TOML or not a valid graph.

    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML: {e}"
        raise GraphFormatError(msg) from e
    return document_to_graph(_validate(data))


def dumps_json(dag: OrderedDAG[Any]) -> str:
    """Encode a graph as an indented JSON string."""
    return graph_to_document(dag).model_dump_json(indent=2)


def loads_json(text: str) -> OrderedDAG[Any]:
    """Decode a graph from a JSON string.

    Raises:
        GraphFormatError: If the text is not valid JSON or not a valid graph.

    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON: {e}"
        raise GraphFormatError(msg) from e
    return document_to_graph(_validate(data))


def _format_for(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in (SUFFIX_TOML, SUFFIX_JSON):
        msg = f"Unsupported graph file extension '{path.suffix}' (expected .toml or .json)"
        raise GraphFormatError(msg)
    return suffix


def save_graph(dag: OrderedDAG[Any], output_path: Path | str) -> None:
    """Write a graph to a TOML or JSON file, chosen by the file extension.

    Args:
        dag: The graph to write.
        output_path: Destination path ending in ``.toml`` or ``.json``.

    """
    output_path = Path(output_path)
    if _format_for(output_path) == SUFFIX_TOML:
        output_path.write_text(dumps_toml(dag), encoding="utf-8")
    else:
        output_path.write_text(dumps_json(dag) + "\n", encoding="utf-8")

    logger.debug(f"Saved graph with {len(dag)} vertices to {output_path}")


def load_graph(input_path: Path | str) -> OrderedDAG[Any]:
    """Read a graph from a TOML or JSON file, chosen by the file extension.

    Args:
        input_path: Path ending in ``.toml`` or ``.json``.

    Returns:
        The decoded graph.

    Raises:
        GraphFormatError: If the extension is unsupported or the contents are invalid.

    """
    input_path = Path(input_path)
    suffix = _format_for(input_path)
    try:
        text = input_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read graph file {input_path}: {e}"
        raise GraphFormatError(msg) from e
    if suffix == SUFFIX_TOML:
        dag = loads_toml(text)
    else:
        dag = loads_json(text)

    logger.debug(f"Loaded graph with {len(dag)} vertices from {input_path}")
    return dag
