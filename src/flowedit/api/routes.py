"""HTTP routes for the editor API."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Type, TypeVar

from flask import Flask, Response, jsonify, request
from pydantic import ValidationError

from ..core.exceptions import DocumentParseError
from ..flowchart.controller import EditorController
from ..flowchart.document import DocumentVariant
from ..flowchart.model import NodeId
from .schemas import (
    ConnectBody,
    DraftFields,
    EdgeCreate,
    EdgeFields,
    NodeFields,
    PositionBody,
    RequestBody,
    SelectionBody,
)

logger = logging.getLogger("flowedit.api")

BodyT = TypeVar("BodyT", bound=RequestBody)


def _resolve_node_id(controller: EditorController, raw: Any) -> Optional[NodeId]:
    """Map a path or body id onto an existing node id.

    Canvas documents use integer ids, which arrive as strings in URLs.
    """
    if raw is None or isinstance(raw, (dict, list)):
        return None
    if controller.graph.has_node(raw):
        return raw
    text = str(raw)
    if controller.graph.has_node(text):
        return text
    if text.lstrip("-").isdigit() and controller.graph.has_node(int(text)):
        return int(text)
    return None


def _not_found(kind: str, ident: Any):
    return jsonify({"error": f"{kind} not found: {ident}"}), 404


def _body(model: Type[BodyT]) -> BodyT:
    """Validate the JSON body; a missing body counts as an empty object."""
    data = request.get_json(silent=True)
    return model.model_validate({} if data is None else data)


def register_routes(app: Flask, *, controller: EditorController) -> None:
    # One action at a time, run to completion.
    lock = threading.Lock()

    @app.before_request
    def log_request() -> None:
        logger.info("HTTP %s %s from %s", request.method, request.path, request.remote_addr)

    @app.errorhandler(DocumentParseError)
    def handle_parse_error(exc: DocumentParseError):
        logger.warning("Rejected document: %s", exc)
        return jsonify({"error": exc.message, "context": exc.context}), 400

    @app.errorhandler(ValidationError)
    def handle_bad_body(exc: ValidationError):
        details = [
            {"loc": ".".join(str(part) for part in error["loc"]), "msg": error["msg"]}
            for error in exc.errors()
        ]
        return jsonify({"error": "Invalid request body", "details": details}), 400

    @app.get("/api/health")
    def health():
        return jsonify({"status": "healthy"})

    @app.get("/api/graph")
    def get_graph():
        with lock:
            return jsonify(controller.snapshot())

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    @app.post("/api/nodes")
    def create_node():
        body = _body(NodeFields)
        with lock:
            node_id = controller.create_node(body.label, body.color)
            if body.shape is not None:
                controller.update_node_fields(node_id, {"shape": body.shape})
            return jsonify(controller.graph.get_node(node_id).to_dict()), 201

    @app.patch("/api/nodes/<node_id>")
    def update_node(node_id: str):
        body = _body(NodeFields)
        with lock:
            resolved = _resolve_node_id(controller, node_id)
            if resolved is None:
                return _not_found("Node", node_id)
            controller.update_node_fields(resolved, body.model_dump(exclude_none=True))
            return jsonify(controller.graph.get_node(resolved).to_dict())

    @app.delete("/api/nodes/<node_id>")
    def delete_node(node_id: str):
        with lock:
            resolved = _resolve_node_id(controller, node_id)
            if resolved is None:
                return _not_found("Node", node_id)
            controller.delete_node(resolved)
            return jsonify({"deleted": resolved})

    @app.put("/api/nodes/<node_id>/position")
    def move_node(node_id: str):
        body = _body(PositionBody)
        with lock:
            resolved = _resolve_node_id(controller, node_id)
            if resolved is None:
                return _not_found("Node", node_id)
            controller.move_node(resolved, body.x, body.y)
            return jsonify(controller.graph.get_node(resolved).to_dict())

    # -------------------------------------------------------------------------
    # Edges
    # -------------------------------------------------------------------------

    @app.post("/api/edges")
    def create_edge():
        body = _body(EdgeCreate)
        with lock:
            source = _resolve_node_id(controller, body.source)
            target = _resolve_node_id(controller, body.target)
            edge_id = None
            if source is not None and target is not None:
                edge_id = controller.create_edge(source, target, body.label or "")
            if edge_id is None:
                return jsonify({"error": "source and target must be existing nodes"}), 400
            return jsonify(controller.graph.get_edge(edge_id).to_dict()), 201

    @app.patch("/api/edges/<edge_id>")
    def update_edge(edge_id: str):
        body = _body(EdgeFields)
        with lock:
            if controller.graph.get_edge(edge_id) is None:
                return _not_found("Edge", edge_id)
            controller.update_edge_fields(edge_id, body.model_dump(exclude_none=True))
            return jsonify(controller.graph.get_edge(edge_id).to_dict())

    @app.delete("/api/edges/<edge_id>")
    def delete_edge(edge_id: str):
        with lock:
            if controller.graph.get_edge(edge_id) is None:
                return _not_found("Edge", edge_id)
            controller.delete_edge(edge_id)
            return jsonify({"deleted": edge_id})

    # -------------------------------------------------------------------------
    # Selection and gestures
    # -------------------------------------------------------------------------

    @app.get("/api/selection")
    def get_selection():
        with lock:
            return jsonify(controller.snapshot()["selection"])

    @app.post("/api/selection")
    def select():
        body = _body(SelectionBody)
        with lock:
            if body.kind == "node":
                resolved = _resolve_node_id(controller, body.id)
                ok = resolved is not None and controller.select_node(resolved)
            else:
                ok = controller.select_edge(str(body.id))
            if not ok:
                return _not_found(body.kind.capitalize(), body.id)
            return jsonify(controller.snapshot()["selection"])

    @app.patch("/api/selection/draft")
    def edit_draft():
        body = _body(DraftFields)
        with lock:
            if not controller.edit_draft(**body.model_dump(exclude_none=True)):
                return jsonify({"error": "Nothing selected"}), 409
            return jsonify(controller.snapshot()["selection"])

    @app.post("/api/selection/apply")
    def apply_selection():
        with lock:
            applied = controller.apply()
            return jsonify({"applied": applied, **controller.graph.to_dict()})

    @app.post("/api/selection/delete")
    def delete_selection():
        with lock:
            deleted = controller.delete_selected()
            return jsonify({"deleted": deleted, **controller.graph.to_dict()})

    @app.delete("/api/selection")
    def clear_selection():
        with lock:
            controller.clear_selection()
            return jsonify(controller.snapshot()["selection"])

    @app.post("/api/connect")
    def connect():
        body = _body(ConnectBody)
        with lock:
            resolved = _resolve_node_id(controller, body.node_id)
            if resolved is None:
                return _not_found("Node", body.node_id)
            edge = controller.click_connect(resolved)
            return jsonify({
                "edge": edge.to_dict() if edge else None,
                "connecting_node": controller.connecting_node,
            })

    # -------------------------------------------------------------------------
    # Layout and documents
    # -------------------------------------------------------------------------

    @app.post("/api/layout")
    def relayout():
        with lock:
            controller.relayout()
            return jsonify(controller.graph.to_dict())

    @app.get("/api/document")
    def export_document():
        raw_variant = request.args.get("variant")
        try:
            variant = DocumentVariant(raw_variant) if raw_variant else None
        except ValueError:
            return jsonify({"error": f"Unknown document variant: {raw_variant}"}), 400
        with lock:
            text = controller.export_document(variant)
        return Response(
            text,
            mimetype="application/json",
            headers={"Content-Disposition": f'attachment; filename="{controller.export_filename}"'},
        )

    @app.post("/api/document")
    def import_document():
        body = request.get_data()
        with lock:
            controller.import_document(body)
            return jsonify(controller.graph.to_dict())
