"""Flowchart document import/export.

Two JSON document shapes are understood:

- ``reactflow`` (lossy): ``{"nodes": [{"id", "data": {"label"}}],
  "edges": [{"source", "target", "id"}]}``. Positions, colors, edge labels and
  animation flags are not written.
- ``canvas`` (lossless): ``{"nodes": [{"id", "x", "y", "label", "type",
  "color"}], "lines": [{"from", "to", "id", "label", "animated"}]}`` where the
  node ``type`` carries its shape.

Reading discriminates on the ``lines`` key. Documents that parse as JSON but
are missing keys degrade to empty collections; text that is not JSON at all
raises `DocumentParseError`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.exceptions import DocumentParseError
from .layout import compute_layout
from .model import (
    DEFAULT_NODE_COLOR,
    LAYOUT_NODE_TYPE,
    Edge,
    Node,
    NodeId,
    Position,
    _unique_id,
    normalize_shape,
)

logger = logging.getLogger(__name__)

DocId = Union[int, str]


class DocumentVariant(str, Enum):
    REACTFLOW = "reactflow"
    CANVAS = "canvas"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


# -----------------------------------------------------------------------------
# Document schemas
# -----------------------------------------------------------------------------


class ReactFlowNodeData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    label: str = ""

    @field_validator("label", mode="before")
    @classmethod
    def coerce_label(cls, value: Any) -> str:
        return _text(value)


class ReactFlowNode(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: DocId
    data: ReactFlowNodeData = Field(default_factory=ReactFlowNodeData)


class ReactFlowEdge(BaseModel):
    model_config = ConfigDict(extra="ignore")

    source: DocId
    target: DocId
    id: Optional[DocId] = None
    label: str = ""
    animated: bool = False

    @field_validator("label", mode="before")
    @classmethod
    def coerce_label(cls, value: Any) -> str:
        return _text(value)


class CanvasNode(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: DocId
    x: Optional[float] = None
    y: Optional[float] = None
    label: str = ""
    type: str = "rectangle"
    color: Optional[str] = None

    @field_validator("label", mode="before")
    @classmethod
    def coerce_label(cls, value: Any) -> str:
        return _text(value)

    @field_validator("color", mode="before")
    @classmethod
    def coerce_color(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)


class CanvasLine(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    from_id: DocId = Field(alias="from")
    to_id: DocId = Field(alias="to")
    id: Optional[DocId] = None
    label: str = ""
    animated: bool = False

    @field_validator("label", mode="before")
    @classmethod
    def coerce_label(cls, value: Any) -> str:
        return _text(value)


ModelT = TypeVar("ModelT", bound=BaseModel)


# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------


def export_document(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    variant: Union[DocumentVariant, str] = DocumentVariant.REACTFLOW,
) -> str:
    variant = DocumentVariant(variant)
    if variant is DocumentVariant.CANVAS:
        payload: Dict[str, Any] = {
            "nodes": [
                CanvasNode(
                    id=node.id,
                    x=node.position.x,
                    y=node.position.y,
                    label=node.label,
                    type=node.shape,
                    color=node.color,
                ).model_dump()
                for node in nodes
            ],
            "lines": [
                CanvasLine(
                    from_id=edge.source,
                    to_id=edge.target,
                    id=edge.id,
                    label=edge.label,
                    animated=edge.animated,
                ).model_dump(by_alias=True)
                for edge in edges
            ],
        }
        return json.dumps(payload)

    payload = {
        "nodes": [
            ReactFlowNode(id=node.id, data=ReactFlowNodeData(label=node.label)).model_dump()
            for node in nodes
        ],
        "edges": [
            {"source": edge.source, "target": edge.target, "id": edge.id}
            for edge in edges
        ],
    }
    return json.dumps(payload, indent=2)


# -----------------------------------------------------------------------------
# Import
# -----------------------------------------------------------------------------


@dataclass
class ParsedDocument:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    variant: DocumentVariant = DocumentVariant.REACTFLOW
    # Node ids whose coordinates came from the document itself.
    positioned: Set[NodeId] = field(default_factory=set)


def _validate_items(raw: Any, model: Type[ModelT], kind: str) -> List[ModelT]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Document %s is not a list; treating as empty", kind)
        return []
    items: List[ModelT] = []
    for idx, item in enumerate(raw):
        try:
            items.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipped %s #%d: %s", kind, idx, exc.error_count())
    return items


def parse_document(text: Union[str, bytes]) -> ParsedDocument:
    """Decode a document into nodes and edges without touching positions."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise DocumentParseError("Document is not valid JSON", {"error": str(exc)}) from exc

    if not isinstance(data, dict):
        logger.warning("Document root is %s, not an object; importing nothing", type(data).__name__)
        return ParsedDocument()

    if "lines" in data:
        parsed = _parse_canvas(data)
    else:
        parsed = _parse_reactflow(data)
    _enforce_integrity(parsed)
    logger.info(
        "Parsed %s document: %d nodes, %d edges",
        parsed.variant.value, len(parsed.nodes), len(parsed.edges),
    )
    return parsed


def _parse_reactflow(data: Dict[str, Any]) -> ParsedDocument:
    parsed = ParsedDocument(variant=DocumentVariant.REACTFLOW)
    for doc_node in _validate_items(data.get("nodes"), ReactFlowNode, "node"):
        parsed.nodes.append(
            Node(id=doc_node.id, label=doc_node.data.label, color=DEFAULT_NODE_COLOR)
        )
    for doc_edge in _validate_items(data.get("edges"), ReactFlowEdge, "edge"):
        parsed.edges.append(
            Edge(
                id=_text(doc_edge.id),
                source=doc_edge.source,
                target=doc_edge.target,
                label=doc_edge.label,
                animated=doc_edge.animated,
            )
        )
    return parsed


def _parse_canvas(data: Dict[str, Any]) -> ParsedDocument:
    parsed = ParsedDocument(variant=DocumentVariant.CANVAS)
    for doc_node in _validate_items(data.get("nodes"), CanvasNode, "node"):
        node = Node(
            id=doc_node.id,
            label=doc_node.label,
            color=doc_node.color or DEFAULT_NODE_COLOR,
            shape=normalize_shape(doc_node.type),
        )
        if doc_node.x is not None and doc_node.y is not None:
            node.position = Position(x=doc_node.x, y=doc_node.y)
            parsed.positioned.add(node.id)
        parsed.nodes.append(node)
    for doc_line in _validate_items(data.get("lines"), CanvasLine, "line"):
        parsed.edges.append(
            Edge(
                id=_text(doc_line.id),
                source=doc_line.from_id,
                target=doc_line.to_id,
                label=doc_line.label,
                animated=doc_line.animated,
            )
        )
    return parsed


def _enforce_integrity(parsed: ParsedDocument) -> None:
    """Drop duplicate nodes and dangling edges; give every edge a unique id."""
    seen: Dict[NodeId, Node] = {}
    for node in parsed.nodes:
        if node.id in seen:
            logger.warning("Dropped duplicate node id %s", node.id)
            continue
        seen[node.id] = node
    parsed.nodes = list(seen.values())

    used: set = {str(node_id) for node_id in seen}
    edges: List[Edge] = []
    for edge in parsed.edges:
        if edge.source not in seen or edge.target not in seen:
            logger.warning(
                "Dropped edge %s: endpoint %s -> %s not in node set",
                edge.id or "<unnamed>", edge.source, edge.target,
            )
            continue
        edge_id = edge.id or f"e{edge.source}-{edge.target}"
        if edge_id in used:
            edge_id = _unique_id(edge_id, used)
        used.add(edge_id)
        edges.append(replace(edge, id=edge_id))
    parsed.edges = edges


def import_document(text: Union[str, bytes]) -> Tuple[List[Node], List[Edge]]:
    """Parse a document and position its nodes.

    Layout always runs over the imported shape. Canvas documents keep the
    coordinates they carry; every other node takes its layout position and
    the rendering-kind marker.
    """
    parsed = parse_document(text)
    positions = compute_layout(parsed.nodes, parsed.edges)
    nodes: List[Node] = []
    for node in parsed.nodes:
        if node.id in parsed.positioned:
            nodes.append(node)
        else:
            nodes.append(replace(node, position=positions[node.id], type=LAYOUT_NODE_TYPE))
    return nodes, parsed.edges
