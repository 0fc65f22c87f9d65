"""Flask app factory for the editor API."""

from __future__ import annotations

from typing import Optional

from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from ..config.settings import Settings, get_settings
from ..flowchart.controller import EditorController
from ..utils.logging import configure_logging
from .routes import register_routes


def create_app(
    settings: Optional[Settings] = None,
    controller: Optional[EditorController] = None,
) -> Flask:
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    app = Flask(__name__)
    CORS(app, origins=settings.cors_origin_list())
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit],
        storage_uri="memory://",
    )
    limiter.init_app(app)

    controller = controller or EditorController(
        variant=settings.document_variant,
        export_filename=settings.export_filename,
        default_color=settings.default_node_color,
    )
    register_routes(app, controller=controller)
    return app
