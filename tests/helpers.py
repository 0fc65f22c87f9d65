"""Graph builders shared by the test suite."""

from typing import List, Tuple

from flowedit.flowchart.model import Edge, Node


def make_graph(labels: List[str], links: List[Tuple[str, str]]) -> Tuple[List[Node], List[Edge]]:
    """Build node/edge lists where node ids equal their labels."""
    nodes = [Node(id=label, label=label) for label in labels]
    edges = [Edge(id=f"e{src}-{dst}", source=src, target=dst) for src, dst in links]
    return nodes, edges
