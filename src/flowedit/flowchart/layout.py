"""Top-down hierarchical flowchart layout."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Sequence, Tuple

from .model import DEFAULT_POSITION, LAYOUT_NODE_TYPE, Edge, Node, NodeId, Position

X_SPACING = 200
Y_SPACING = 100
ROOT_Y = 100


def _children(nodes: Sequence[Node], edges: Iterable[Edge]) -> Dict[NodeId, List[NodeId]]:
    children: Dict[NodeId, List[NodeId]] = {node.id: [] for node in nodes}
    for edge in edges:
        children.setdefault(edge.source, []).append(edge.target)
    return children


def _incoming_counts(nodes: Sequence[Node], edges: Iterable[Edge]) -> Dict[NodeId, int]:
    incoming: Dict[NodeId, int] = {node.id: 0 for node in nodes}
    for edge in edges:
        incoming[edge.target] = incoming.get(edge.target, 0) + 1
    return incoming


def find_roots(nodes: Sequence[Node], edges: Iterable[Edge]) -> List[NodeId]:
    """Node ids with no incoming edges, in node order."""
    incoming = _incoming_counts(nodes, edges)
    return [node.id for node in nodes if incoming[node.id] == 0]


def compute_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    *,
    x_spacing: float = X_SPACING,
    y_spacing: float = Y_SPACING,
    root_y: float = ROOT_Y,
    default_position: Tuple[float, float] = DEFAULT_POSITION,
) -> Dict[NodeId, Position]:
    """Place every node from graph shape alone.

    Each root starts a depth-first walk at ``(index * 2 * x_spacing, root_y)``.
    A node's children are centred under it one level down. The visited set is
    shared across all roots, so a node reachable along several paths keeps the
    first position it was given. Nodes the walk never reaches (isolated, or
    only reachable through a cycle without a root) get ``default_position``.

    Prior node positions are ignored and never modified.
    """
    nodes = list(nodes)
    edges = list(edges)
    children = _children(nodes, edges)
    placed: Dict[NodeId, Tuple[float, float]] = {}
    visited: set = set()

    for root_index, root_id in enumerate(find_roots(nodes, edges)):
        stack: List[Tuple[NodeId, float, float]] = [
            (root_id, root_index * x_spacing * 2, root_y)
        ]
        while stack:
            node_id, x, y = stack.pop()
            if node_id in visited:
                continue
            visited.add(node_id)
            placed[node_id] = (x, y)

            kids = children.get(node_id, [])
            start_x = x - ((len(kids) - 1) * x_spacing) / 2
            # Reversed so the first child is popped (and claims shared
            # descendants) before its siblings.
            for index in range(len(kids) - 1, -1, -1):
                stack.append((kids[index], start_x + index * x_spacing, y + y_spacing))

    positions: Dict[NodeId, Position] = {}
    for node in nodes:
        x, y = placed.get(node.id, default_position)
        positions[node.id] = Position(x=float(x), y=float(y))
    return positions


def layout_nodes(nodes: Sequence[Node], edges: Sequence[Edge]) -> List[Node]:
    """Return copies of ``nodes`` positioned by `compute_layout` and tagged for rendering."""
    positions = compute_layout(nodes, edges)
    return [
        replace(node, position=positions[node.id], type=LAYOUT_NODE_TYPE)
        for node in nodes
    ]
