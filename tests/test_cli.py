"""Tests for the flowedit command line."""

import json

from flowedit.cli import main
from flowedit.config.settings import get_settings


def _write_doc(path):
    path.write_text(json.dumps({
        "nodes": [
            {"id": "A", "data": {"label": "A"}},
            {"id": "B", "data": {"label": "B"}},
            {"id": "C", "data": {"label": "C"}},
        ],
        "edges": [
            {"id": "ab", "source": "A", "target": "B"},
            {"id": "ac", "source": "A", "target": "C"},
        ],
    }))


def test_layout_prints_positions(tmp_path, capsys):
    doc = tmp_path / "flow.json"
    _write_doc(doc)

    assert main(["layout", str(doc)]) == 0

    positions = json.loads(capsys.readouterr().out)
    assert positions["B"] == {"x": -100, "y": 200}


def test_convert_to_canvas(tmp_path):
    source = tmp_path / "flow.json"
    target = tmp_path / "converted" / "canvas.json"
    _write_doc(source)

    assert main(["convert", str(source), str(target), "--variant", "canvas"]) == 0

    document = json.loads(target.read_text())
    assert [(line["from"], line["to"]) for line in document["lines"]] == [("A", "B"), ("A", "C")]


def test_missing_file_returns_error(tmp_path, capsys):
    assert main(["layout", str(tmp_path / "missing.json")]) == 1
    assert "Failed to read document" in capsys.readouterr().err


def test_invalid_environment_returns_error(tmp_path, monkeypatch, capsys):
    doc = tmp_path / "flow.json"
    _write_doc(doc)
    monkeypatch.setenv("FLOWEDIT_DOCUMENT_VARIANT", "svg")
    get_settings.cache_clear()
    try:
        assert main(["layout", str(doc)]) == 1
    finally:
        get_settings.cache_clear()

    assert "Invalid flowedit settings" in capsys.readouterr().err
