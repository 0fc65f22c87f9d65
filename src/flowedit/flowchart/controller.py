"""Selection and edit controller.

The controller is the only mutator of a `GraphModel` in an interactive
session. It tracks which single node or edge is selected, keeps the staged
draft values for the edit panel, runs the two-click connect gesture, and
orchestrates document import/export through injected sinks and sources.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.interfaces import DocumentSink, DocumentSource
from .document import DocumentVariant, export_document, import_document
from .layout import compute_layout
from .model import DEFAULT_NODE_COLOR, Edge, GraphModel, Node, NodeId, Position

logger = logging.getLogger(__name__)


class SelectionState(str, Enum):
    IDLE = "idle"
    NODE_SELECTED = "node_selected"
    EDGE_SELECTED = "edge_selected"


@dataclass
class NodeDraft:
    label: str
    color: str


@dataclass
class EdgeDraft:
    label: str
    animated: bool


class EditorController:
    """Interactive editing session over one graph.

    Drafts are only written back on `apply`. Selecting another element, or
    clearing the selection, silently discards unapplied draft edits.
    """

    def __init__(
        self,
        graph: Optional[GraphModel] = None,
        *,
        variant: Union[DocumentVariant, str] = DocumentVariant.REACTFLOW,
        export_filename: str = "flowchart.json",
        default_color: str = DEFAULT_NODE_COLOR,
    ):
        self.graph = graph or GraphModel(default_color=default_color)
        self.variant = DocumentVariant(variant)
        self.export_filename = export_filename
        self.selected_node_id: Optional[NodeId] = None
        self.selected_edge_id: Optional[str] = None
        self.draft: Optional[Union[NodeDraft, EdgeDraft]] = None
        self.connecting_node: Optional[NodeId] = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def initialize(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        """Load a starting graph and lay it out."""
        self.graph.replace(nodes, edges)
        self.relayout()
        self._reset_interaction()

    def relayout(self) -> Dict[NodeId, Position]:
        positions = compute_layout(self.graph.nodes, self.graph.edges)
        self.graph.apply_positions(positions)
        return positions

    # ------------------------------------------------------------------
    # Selection state machine
    # ------------------------------------------------------------------

    @property
    def state(self) -> SelectionState:
        if self.selected_node_id is not None:
            return SelectionState.NODE_SELECTED
        if self.selected_edge_id is not None:
            return SelectionState.EDGE_SELECTED
        return SelectionState.IDLE

    def select_node(self, node_id: NodeId) -> bool:
        node = self.graph.get_node(node_id)
        if node is None:
            return False
        self.selected_edge_id = None
        self.selected_node_id = node_id
        self.draft = NodeDraft(label=node.label, color=node.color)
        return True

    def select_edge(self, edge_id: str) -> bool:
        edge = self.graph.get_edge(edge_id)
        if edge is None:
            return False
        self.selected_node_id = None
        self.selected_edge_id = edge_id
        self.draft = EdgeDraft(label=edge.label or "", animated=edge.animated)
        return True

    def clear_selection(self) -> None:
        self.selected_node_id = None
        self.selected_edge_id = None
        self.draft = None

    def edit_draft(self, **fields: Any) -> bool:
        """Update staged values.

        Fields the selected kind does not have, and `animated` values that
        are not booleans, are ignored.
        """
        if self.draft is None:
            return False
        for name, value in fields.items():
            if value is None or not hasattr(self.draft, name):
                continue
            if name == "animated" and not isinstance(value, bool):
                continue
            setattr(self.draft, name, value)
        return True

    def apply(self) -> bool:
        """Write the staged draft back to the graph and return to idle."""
        if isinstance(self.draft, NodeDraft) and self.selected_node_id is not None:
            self.graph.update_node(
                self.selected_node_id, label=self.draft.label, color=self.draft.color
            )
        elif isinstance(self.draft, EdgeDraft) and self.selected_edge_id is not None:
            self.graph.update_edge(
                self.selected_edge_id, label=self.draft.label, animated=self.draft.animated
            )
        else:
            return False
        self.clear_selection()
        return True

    def delete_selected(self) -> bool:
        if self.selected_node_id is not None:
            self.delete_node(self.selected_node_id)
        elif self.selected_edge_id is not None:
            self.delete_edge(self.selected_edge_id)
        else:
            return False
        self.clear_selection()
        return True

    # ------------------------------------------------------------------
    # Connect gesture
    # ------------------------------------------------------------------

    def click_connect(self, node_id: NodeId) -> Optional[Edge]:
        """Handle one click of the two-click connect gesture."""
        if self.connecting_node is None:
            if not self.graph.has_node(node_id):
                return None
            self.connecting_node = node_id
            return None

        source_id = self.connecting_node
        self.connecting_node = None
        if source_id == node_id:
            logger.debug("Connect gesture cancelled on %s", node_id)
            return None
        return self.graph.add_edge(source_id, node_id)

    def cancel_connect(self) -> None:
        self.connecting_node = None

    # ------------------------------------------------------------------
    # Direct edits
    # ------------------------------------------------------------------

    def create_node(self, label: Optional[str] = None, color: Optional[str] = None) -> NodeId:
        return self.graph.add_node(label, color).id

    def delete_node(self, node_id: NodeId) -> None:
        if not self.graph.remove_node(node_id):
            return
        if self.connecting_node == node_id:
            self.connecting_node = None
        if self.selected_node_id == node_id:
            self.clear_selection()
        elif self.selected_edge_id is not None and self.graph.get_edge(self.selected_edge_id) is None:
            self.clear_selection()

    def create_edge(self, source_id: NodeId, target_id: NodeId, label: str = "") -> Optional[str]:
        edge = self.graph.add_edge(source_id, target_id, label)
        return edge.id if edge else None

    def delete_edge(self, edge_id: str) -> None:
        if self.graph.remove_edge(edge_id) and self.selected_edge_id == edge_id:
            self.clear_selection()

    def update_node_fields(self, node_id: NodeId, fields: Mapping[str, Any]) -> None:
        self.graph.update_node(
            node_id,
            label=fields.get("label"),
            color=fields.get("color"),
            shape=fields.get("shape"),
        )

    def update_edge_fields(self, edge_id: str, fields: Mapping[str, Any]) -> None:
        self.graph.update_edge(edge_id, label=fields.get("label"), animated=fields.get("animated"))

    def move_node(self, node_id: NodeId, x: float, y: float) -> None:
        """Reconcile a finished drag into the model; no re-layout."""
        self.graph.set_position(node_id, x, y)

    @staticmethod
    def compute_layout(nodes: Sequence[Node], edges: Sequence[Edge]) -> Dict[NodeId, Position]:
        return compute_layout(nodes, edges)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def export_document(self, variant: Optional[Union[DocumentVariant, str]] = None) -> str:
        return export_document(self.graph.nodes, self.graph.edges, variant or self.variant)

    def import_document(self, text: Union[str, bytes]) -> Tuple[List[Node], List[Edge]]:
        """Replace the graph with a document's contents.

        Raises `DocumentParseError` for text that is not JSON; the graph is
        left untouched in that case.
        """
        nodes, edges = import_document(text)
        self.graph.replace(nodes, edges)
        self._reset_interaction()
        return self.graph.nodes, self.graph.edges

    def save(self, sink: DocumentSink, filename: Optional[str] = None) -> str:
        text = self.export_document()
        name = filename or self.export_filename
        sink.write(text.encode("utf-8"), name)
        return name

    def load(self, source: DocumentSource) -> bool:
        data = source.read()
        if data is None:
            return False
        self.import_document(data)
        return True

    def _reset_interaction(self) -> None:
        self.clear_selection()
        self.connecting_node = None

    def snapshot(self) -> Dict[str, Any]:
        """Graph plus interaction state, for hosts that re-render from JSON."""
        draft = None
        if self.draft is not None:
            draft = dict(vars(self.draft))
        return {
            **self.graph.to_dict(),
            "selection": {
                "state": self.state.value,
                "node_id": self.selected_node_id,
                "edge_id": self.selected_edge_id,
                "draft": draft,
            },
            "connecting_node": self.connecting_node,
        }
