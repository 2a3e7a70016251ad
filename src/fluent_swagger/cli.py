"""Command line interface for rendering a registry as a Swagger document."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .document import (
    SUPPORTED_FORMATS,
    DocumentError,
    DocumentInfo,
    build_document,
    check_definitions,
    dump_document,
    format_problems,
    write_document,
)
from .module_loading import AppLoadError, load_registry
from .registry import RegistryError
from .schema_generation import SchemaGenerationError


class CLIError(RuntimeError):
    """Raised when CLI execution fails."""


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="fluent-swagger",
        description="Render the Swagger 2.0 document for a metadata registry",
    )
    parser.add_argument(
        "--app",
        required=True,
        help="Registry location as 'package.module:attribute' or 'path/to/file.py:attribute'",
    )
    parser.add_argument("--output", help="Write the document here instead of stdout")
    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument("--title", default="API", help="Document title")
    parser.add_argument("--version", default="1.0.0", help="Document version")
    parser.add_argument("--description", help="Document description")
    parser.add_argument("--host", help="Host serving the API")
    parser.add_argument("--base-path", help="Base path prefixed to every route")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Check generated definitions against the JSON Schema draft-4 metaschema",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    info = DocumentInfo(
        title=args.title,
        version=args.version,
        description=args.description,
        host=args.host,
        base_path=args.base_path,
    )

    try:
        registry = load_registry(args.app)
        document = build_document(registry, info)
        if args.output:
            output_path = Path(args.output)
            if not output_path.parent.is_dir():
                raise CLIError(f"Output directory does not exist: {output_path.parent}")
            write_document(document, output_path, args.format)
        else:
            sys.stdout.write(dump_document(document, args.format))
    except (
        AppLoadError,
        RegistryError,
        DocumentError,
        SchemaGenerationError,
        CLIError,
    ) as exc:
        parser.error(str(exc))
        return 2

    if args.check:
        problems = check_definitions(document.get("definitions", {}))
        if problems:
            print(format_problems(problems), file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
