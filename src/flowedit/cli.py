"""CLI entrypoint for flowedit."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config.settings import get_settings
from .core.exceptions import FlowEditException
from .flowchart.controller import EditorController
from .flowchart.document import DocumentVariant
from .storage.files import FileDocumentSink, FileDocumentSource
from .utils.logging import configure_logging

logger = logging.getLogger(__name__)


def _load(path: Path) -> EditorController:
    settings = get_settings()
    controller = EditorController(
        variant=settings.document_variant,
        export_filename=settings.export_filename,
        default_color=settings.default_node_color,
    )
    controller.load(FileDocumentSource(path))
    return controller


def cmd_layout(args: argparse.Namespace) -> int:
    controller = _load(Path(args.document))
    positions = {
        str(node.id): node.position.to_dict() for node in controller.graph.nodes
    }
    print(json.dumps(positions, indent=2))
    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    controller = _load(Path(args.source))
    if args.variant:
        controller.variant = DocumentVariant(args.variant)
    target = Path(args.target)
    controller.save(FileDocumentSink(target.parent), target.name)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from .api.app import create_app

    settings = get_settings()
    app = create_app(settings)
    app.run(host=args.host or settings.host, port=args.port or settings.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flowedit", description="Flowchart layout and document tools")
    sub = parser.add_subparsers(dest="command", required=True)

    layout = sub.add_parser("layout", help="Print laid-out node positions for a document")
    layout.add_argument("document")
    layout.set_defaults(func=cmd_layout)

    convert = sub.add_parser("convert", help="Re-export a document, optionally in another variant")
    convert.add_argument("source")
    convert.add_argument("target")
    convert.add_argument("--variant", choices=[v.value for v in DocumentVariant])
    convert.set_defaults(func=cmd_convert)

    serve = sub.add_parser("serve", help="Run the HTTP editor API")
    serve.add_argument("--host")
    serve.add_argument("--port", type=int)
    serve.set_defaults(func=cmd_serve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = get_settings()
        configure_logging(level=settings.log_level, json_logs=settings.json_logs)
        return args.func(args)
    except FlowEditException as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
