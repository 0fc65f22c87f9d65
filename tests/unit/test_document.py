"""Tests for document export/import in both variants."""

import json

import pytest

from flowedit.core.exceptions import DocumentParseError
from flowedit.flowchart.document import (
    DocumentVariant,
    export_document,
    import_document,
    parse_document,
)
from flowedit.flowchart.model import Edge, Node, Position

CANVAS_DOC = {
    "nodes": [
        {"id": 1, "x": 100, "y": 100, "label": "Start", "type": "circle"},
        {"id": 2, "x": 300, "y": 100, "label": "Process", "type": "rectangle"},
        {"id": 3, "x": 500, "y": 100, "label": "Decision", "type": "diamond"},
    ],
    "lines": [{"from": 1, "to": 2}, {"from": 2, "to": 3}],
}


class TestReactFlowExport:
    def test_export_keeps_only_ids_and_labels(self):
        nodes = [Node(id="1", label="A", color="#123456", position=Position(x=5, y=6))]
        edges = [Edge(id="e1", source="1", target="1", label="loop", animated=True)]

        document = json.loads(export_document(nodes, edges))

        assert document == {
            "nodes": [{"id": "1", "data": {"label": "A"}}],
            "edges": [{"source": "1", "target": "1", "id": "e1"}],
        }

    def test_round_trip_preserves_ids_labels_and_endpoints(self):
        nodes = [Node(id="1", label="A")]
        edges = [Edge(id="e1", source="1", target="1")]

        new_nodes, new_edges = import_document(export_document(nodes, edges))

        assert [(n.id, n.label) for n in new_nodes] == [("1", "A")]
        assert [(e.id, e.source, e.target) for e in new_edges] == [("e1", "1", "1")]


class TestReactFlowImport:
    def test_import_recomputes_positions(self):
        text = json.dumps({
            "nodes": [
                {"id": "A", "data": {"label": "A"}, "position": {"x": 7, "y": 7}},
                {"id": "B", "data": {"label": "B"}},
                {"id": "C", "data": {"label": "C"}},
            ],
            "edges": [
                {"id": "ab", "source": "A", "target": "B"},
                {"id": "ac", "source": "A", "target": "C"},
            ],
        })

        nodes, _ = import_document(text)

        by_id = {node.id: node for node in nodes}
        assert by_id["A"].position == Position(x=0, y=100)
        assert by_id["B"].position == Position(x=-100, y=200)
        assert by_id["C"].position == Position(x=100, y=200)
        assert all(node.type == "custom" for node in nodes)

    @pytest.mark.parametrize("text", ["{}", '{"edges": []}', "[1, 2]", '{"nodes": 5, "edges": null}'])
    def test_missing_keys_degrade_to_empty(self, text):
        assert import_document(text) == ([], [])

    def test_nodes_without_edges_key(self):
        nodes, edges = import_document('{"nodes": [{"id": "1", "data": {"label": "A"}}]}')

        assert [node.id for node in nodes] == ["1"]
        assert edges == []

    @pytest.mark.parametrize("text", ["", "not json", "{\"nodes\": ["])
    def test_unparsable_text_raises(self, text):
        with pytest.raises(DocumentParseError):
            import_document(text)

    def test_bad_items_and_dangling_edges_are_skipped(self):
        text = json.dumps({
            "nodes": [{"id": "1", "data": {"label": "A"}}, "junk", {"data": {"label": "no id"}}],
            "edges": [
                {"id": "ok", "source": "1", "target": "1"},
                {"id": "dangling", "source": "1", "target": "2"},
                {"source": "1"},
            ],
        })

        nodes, edges = import_document(text)

        assert [node.id for node in nodes] == ["1"]
        assert [edge.id for edge in edges] == ["ok"]

    def test_missing_or_clashing_edge_ids_are_generated(self):
        text = json.dumps({
            "nodes": [{"id": "1", "data": {"label": "A"}}, {"id": "2", "data": {"label": "B"}}],
            "edges": [
                {"source": "1", "target": "2"},
                {"id": "2", "source": "2", "target": "1"},
            ],
        })

        _, edges = import_document(text)

        assert [edge.id for edge in edges] == ["e1-2", "2_2"]

    def test_bytes_input(self):
        nodes, _ = import_document(b'{"nodes": [{"id": "x", "data": {"label": "X"}}], "edges": []}')
        assert nodes[0].label == "X"


class TestCanvasVariant:
    def test_reader_detects_lines_key(self):
        parsed = parse_document(json.dumps(CANVAS_DOC))

        assert parsed.variant is DocumentVariant.CANVAS
        assert [node.id for node in parsed.nodes] == [1, 2, 3]
        assert [node.shape for node in parsed.nodes] == ["circle", "rectangle", "diamond"]
        assert [(e.source, e.target) for e in parsed.edges] == [(1, 2), (2, 3)]
        assert [e.id for e in parsed.edges] == ["e1-2", "e2-3"]

    def test_stored_coordinates_are_kept(self):
        nodes, _ = import_document(json.dumps(CANVAS_DOC))

        assert [(n.position.x, n.position.y) for n in nodes] == [(100, 100), (300, 100), (500, 100)]

    def test_nodes_without_coordinates_are_laid_out(self):
        doc = {"nodes": [{"id": 1, "label": "Start"}, {"id": 2, "label": "Next"}], "lines": [{"from": 1, "to": 2}]}

        nodes, _ = import_document(json.dumps(doc))

        assert nodes[1].position == Position(x=0, y=200)
        assert nodes[1].type == "custom"

    def test_export_is_lossless(self):
        nodes = [
            Node(id=1, label="Start", color="#abcdef", position=Position(x=10, y=20), shape="circle"),
            Node(id=2, label="End", position=Position(x=30, y=40)),
        ]
        edges = [Edge(id="go", source=1, target=2, label="next", animated=True)]

        text = export_document(nodes, edges, DocumentVariant.CANVAS)
        new_nodes, new_edges = import_document(text)

        assert "lines" in json.loads(text)
        assert [(n.id, n.label, n.color, n.shape, n.position) for n in new_nodes] == [
            (n.id, n.label, n.color, n.shape, n.position) for n in nodes
        ]
        assert new_edges == edges

    def test_variant_accepts_string(self):
        text = export_document([Node(id="1", label="A")], [], "canvas")
        assert json.loads(text)["nodes"][0]["type"] == "rectangle"

    def test_non_string_color_still_exports(self):
        text = export_document([Node(id=1, label="A", color=123)], [], DocumentVariant.CANVAS)

        assert json.loads(text)["nodes"][0]["color"] == "123"
