"""Flowchart graph model, layout, documents and editing controller."""

from .model import Edge, GraphModel, Node, Position
from .layout import compute_layout, find_roots, layout_nodes
from .document import (
    DocumentVariant,
    ParsedDocument,
    export_document,
    import_document,
    parse_document,
)
from .controller import EdgeDraft, EditorController, NodeDraft, SelectionState

__all__ = [
    "Edge",
    "GraphModel",
    "Node",
    "Position",
    "compute_layout",
    "find_roots",
    "layout_nodes",
    "DocumentVariant",
    "ParsedDocument",
    "export_document",
    "import_document",
    "parse_document",
    "EdgeDraft",
    "EditorController",
    "NodeDraft",
    "SelectionState",
]
