"""Flowchart graph model.

`GraphModel` owns the canonical node and edge collections and keeps them
referentially consistent: an edge never outlives either of its endpoints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace as dc_replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

logger = logging.getLogger(__name__)

NodeId = Union[str, int]

DEFAULT_NODE_COLOR = "#D3D3D3"
DEFAULT_POSITION = (100.0, 100.0)
ALLOWED_SHAPES = {"rectangle", "circle", "diamond"}
LAYOUT_NODE_TYPE = "custom"


def normalize_shape(value: Any) -> str:
    shape = str(value or "rectangle").lower()
    if shape not in ALLOWED_SHAPES:
        return "rectangle"
    return shape


def _unique_id(prefix: str, used: set) -> str:
    idx = 2
    candidate = f"{prefix}_{idx}"
    while candidate in used:
        idx += 1
        candidate = f"{prefix}_{idx}"
    return candidate


@dataclass
class Position:
    x: float = DEFAULT_POSITION[0]
    y: float = DEFAULT_POSITION[1]

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class Node:
    id: NodeId
    label: str
    color: str = DEFAULT_NODE_COLOR
    position: Position = field(default_factory=Position)
    shape: str = "rectangle"
    # Rendering-kind marker; set once the node has been through a layout pass.
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "color": self.color,
            "position": self.position.to_dict(),
            "shape": self.shape,
            "type": self.type,
        }


@dataclass
class Edge:
    id: str
    source: NodeId
    target: NodeId
    label: str = ""
    animated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "animated": self.animated,
        }


class GraphModel:
    """Authoritative node/edge store for one editing session.

    Ids handed out by the model are never reused, even after the element
    they named is deleted. Imported ids are registered as used as well, so
    a later `add_node` cannot collide with anything the session has seen.
    """

    def __init__(
        self,
        nodes: Optional[Iterable[Node]] = None,
        edges: Optional[Iterable[Edge]] = None,
        *,
        default_color: str = DEFAULT_NODE_COLOR,
    ):
        self.default_color = default_color
        self._nodes: Dict[NodeId, Node] = {}
        self._edges: Dict[str, Edge] = {}
        # String forms, so an imported integer id 1 also reserves "1".
        self._used_ids: Set[str] = set()
        self._node_seq = 0
        if nodes is not None or edges is not None:
            self.replace(nodes or [], edges or [])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def get_node(self, node_id: NodeId) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edges.get(edge_id)

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._nodes

    def edges_for(self, node_id: NodeId) -> List[Edge]:
        """Edges with `node_id` as source or target."""
        return [
            edge for edge in self._edges.values()
            if edge.source == node_id or edge.target == node_id
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "edges": [edge.to_dict() for edge in self._edges.values()],
        }

    # ------------------------------------------------------------------
    # Node mutations
    # ------------------------------------------------------------------

    def add_node(
        self,
        label: Optional[str] = None,
        color: Optional[str] = None,
        *,
        position: Optional[Tuple[float, float]] = None,
        shape: Optional[str] = None,
    ) -> Node:
        node_id = self._next_node_id()
        x, y = position if position is not None else DEFAULT_POSITION
        node = Node(
            id=node_id,
            label=label if label is not None else f"Node {len(self._nodes) + 1}",
            color=color or self.default_color,
            position=Position(x=float(x), y=float(y)),
            shape=normalize_shape(shape),
        )
        self._nodes[node_id] = node
        logger.debug("Added node %s (%s)", node_id, node.label)
        return node

    def remove_node(self, node_id: NodeId) -> bool:
        if node_id not in self._nodes:
            return False
        del self._nodes[node_id]
        dangling = [edge.id for edge in self.edges_for(node_id)]
        for edge_id in dangling:
            del self._edges[edge_id]
        logger.debug("Removed node %s and %d attached edge(s)", node_id, len(dangling))
        return True

    def update_node(
        self,
        node_id: NodeId,
        *,
        label: Optional[str] = None,
        color: Optional[str] = None,
        shape: Optional[str] = None,
    ) -> Optional[Node]:
        node = self._nodes.get(node_id)
        if node is None:
            return None
        if label is not None:
            node.label = label
        if color is not None:
            node.color = color
        if shape is not None:
            node.shape = normalize_shape(shape)
        logger.debug("Updated node %s", node_id)
        return node

    def set_position(self, node_id: NodeId, x: float, y: float) -> Optional[Node]:
        """Move a node, e.g. at the end of a drag or resize gesture."""
        node = self._nodes.get(node_id)
        if node is None:
            return None
        node.position = Position(x=float(x), y=float(y))
        return node

    def apply_positions(self, positions: Mapping[NodeId, Position]) -> None:
        """Write a layout result into the nodes and tag them as laid out."""
        for node_id, position in positions.items():
            node = self._nodes.get(node_id)
            if node is None:
                continue
            node.position = Position(x=position.x, y=position.y)
            node.type = LAYOUT_NODE_TYPE

    # ------------------------------------------------------------------
    # Edge mutations
    # ------------------------------------------------------------------

    def add_edge(
        self,
        source_id: NodeId,
        target_id: NodeId,
        label: str = "",
        *,
        animated: bool = False,
    ) -> Optional[Edge]:
        if source_id not in self._nodes or target_id not in self._nodes:
            logger.debug("Skipped edge %s -> %s: unknown endpoint", source_id, target_id)
            return None
        edge_id = self._next_edge_id(source_id, target_id)
        edge = Edge(
            id=edge_id,
            source=source_id,
            target=target_id,
            label=label or "",
            animated=animated,
        )
        self._edges[edge_id] = edge
        logger.debug("Added edge %s", edge_id)
        return edge

    def remove_edge(self, edge_id: str) -> bool:
        if edge_id not in self._edges:
            return False
        del self._edges[edge_id]
        logger.debug("Removed edge %s", edge_id)
        return True

    def update_edge(
        self,
        edge_id: str,
        *,
        label: Optional[str] = None,
        animated: Optional[bool] = None,
    ) -> Optional[Edge]:
        edge = self._edges.get(edge_id)
        if edge is None:
            return None
        if label is not None:
            edge.label = label
        if animated is not None:
            edge.animated = animated
        logger.debug("Updated edge %s", edge_id)
        return edge

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def replace(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> None:
        """Swap in new collections wholesale (document import).

        Duplicate node ids keep the first occurrence; edges whose endpoints
        are missing, or whose id collides with a node or an earlier edge,
        are dropped.
        """
        new_nodes: Dict[NodeId, Node] = {}
        node_keys: Set[str] = set()
        for node in nodes:
            if str(node.id) in node_keys:
                logger.warning("Dropped duplicate node id %s", node.id)
                continue
            node_keys.add(str(node.id))
            new_nodes[node.id] = dc_replace(node, position=dc_replace(node.position))

        new_edges: Dict[str, Edge] = {}
        for edge in edges:
            if edge.source not in new_nodes or edge.target not in new_nodes:
                logger.warning(
                    "Dropped edge %s: endpoint %s -> %s not in node set",
                    edge.id, edge.source, edge.target,
                )
                continue
            if edge.id in new_edges or edge.id in node_keys:
                logger.warning("Dropped edge with conflicting id %s", edge.id)
                continue
            new_edges[edge.id] = dc_replace(edge)

        self._nodes = new_nodes
        self._edges = new_edges
        self._used_ids.update(node_keys)
        self._used_ids.update(new_edges)
        logger.info("Graph replaced: %d nodes, %d edges", len(new_nodes), len(new_edges))

    # ------------------------------------------------------------------
    # Id allocation
    # ------------------------------------------------------------------

    def _next_node_id(self) -> str:
        self._node_seq += 1
        candidate = str(self._node_seq)
        while candidate in self._used_ids:
            self._node_seq += 1
            candidate = str(self._node_seq)
        self._used_ids.add(candidate)
        return candidate

    def _next_edge_id(self, source_id: NodeId, target_id: NodeId) -> str:
        candidate = f"e{source_id}-{target_id}"
        if candidate in self._used_ids:
            candidate = _unique_id(candidate, self._used_ids)
        self._used_ids.add(candidate)
        return candidate
