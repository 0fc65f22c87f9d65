"""flowedit - flowchart edit model with automatic hierarchical layout."""

from typing import TYPE_CHECKING

__all__ = ["Settings", "GraphModel", "EditorController"]

if TYPE_CHECKING:
    from .config.settings import Settings
    from .flowchart.controller import EditorController
    from .flowchart.model import GraphModel


def __getattr__(name: str):
    if name == "Settings":
        from .config.settings import Settings

        return Settings
    if name == "GraphModel":
        from .flowchart.model import GraphModel

        return GraphModel
    if name == "EditorController":
        from .flowchart.controller import EditorController

        return EditorController
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
