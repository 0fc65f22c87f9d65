"""Shared fixtures for flowedit tests."""

import pytest

from flowedit.config.settings import Settings
from flowedit.flowchart.controller import EditorController
from flowedit.flowchart.model import GraphModel

from tests.helpers import make_graph


@pytest.fixture
def graph() -> GraphModel:
    return GraphModel()


@pytest.fixture
def controller() -> EditorController:
    return EditorController()


@pytest.fixture
def abc_controller() -> EditorController:
    """Controller holding A -> B, A -> C, already laid out."""
    ctrl = EditorController()
    nodes, edges = make_graph(["A", "B", "C"], [("A", "B"), ("A", "C")])
    ctrl.initialize(nodes, edges)
    return ctrl


@pytest.fixture
def settings() -> Settings:
    return Settings(log_level="WARNING", rate_limit="1000 per minute")
