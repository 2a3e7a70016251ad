"""Assemble, check and render Swagger 2.0 documents from a registry."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from jsonschema import Draft4Validator

from .json_types import SchemaDocument
from .registry import MetadataRegistry

SWAGGER_VERSION = "2.0"
SUPPORTED_FORMATS: tuple[str, ...] = ("json", "yaml")
_FALLBACK_RESPONSE_DESCRIPTION = "Default response"


class DocumentError(RuntimeError):
    """Raised when a document cannot be rendered or written."""


@dataclass(frozen=True)
class DocumentInfo:
    """Top-level document fields that do not belong to any endpoint."""

    title: str = "API"
    version: str = "1.0.0"
    description: Optional[str] = None
    host: Optional[str] = None
    base_path: Optional[str] = None
    schemes: tuple[str, ...] = ()


@dataclass(frozen=True)
class DefinitionProblem:
    """A definition that is not a well-formed draft-4 schema."""

    key: str
    message: str


def build_document(
    registry: MetadataRegistry,
    info: Optional[DocumentInfo] = None,
) -> dict[str, Any]:
    """Build the Swagger 2.0 document for every endpoint in ``registry``.

    Args:
        registry (MetadataRegistry): Registry whose endpoints are documented.
        info (Optional[DocumentInfo]): Title, version and host details.

    Returns:
        dict[str, Any]: Swagger 2.0 document with shared ``definitions``.
    """
    info = info or DocumentInfo()
    info_section: dict[str, Any] = {"title": info.title, "version": info.version}
    if info.description:
        info_section["description"] = info.description

    document: dict[str, Any] = {"swagger": SWAGGER_VERSION, "info": info_section}
    if info.host:
        document["host"] = info.host
    if info.base_path:
        document["basePath"] = info.base_path
    if info.schemes:
        document["schemes"] = list(info.schemes)

    paths: dict[str, dict[str, Any]] = {}
    for endpoint in registry.endpoints():
        operation = endpoint.metadata.to_swagger()
        operation.setdefault(
            "responses", {"default": {"description": _FALLBACK_RESPONSE_DESCRIPTION}}
        )
        paths.setdefault(endpoint.path, {})[endpoint.method] = operation
    document["paths"] = paths

    definitions = registry.cache.definitions()
    if definitions:
        document["definitions"] = definitions
    return document


def dump_document(document: Mapping[str, Any], fmt: str = "json") -> str:
    """Render a document as JSON or YAML text."""
    if fmt == "json":
        return json.dumps(document, indent=2) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(dict(document), sort_keys=False, allow_unicode=True)
    raise DocumentError(
        f"Unsupported document format {fmt!r}; expected one of {', '.join(SUPPORTED_FORMATS)}"
    )


def write_document(document: Mapping[str, Any], path: Path, fmt: str = "json") -> None:
    """Render ``document`` and write it to ``path`` as UTF-8."""
    content = dump_document(document, fmt)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"Failed to write document {path}: {exc}") from exc


def check_definitions(definitions: Mapping[str, SchemaDocument]) -> tuple[DefinitionProblem, ...]:
    """Check each definition against the JSON Schema draft-4 metaschema.

    Swagger 2.0 schema objects are an extended subset of draft 4, so keywords
    left in a newer dialect (numeric ``exclusiveMinimum`` and the like) show
    up here.
    """
    metaschema_validator = Draft4Validator(Draft4Validator.META_SCHEMA)
    problems: list[DefinitionProblem] = []
    for key, schema in definitions.items():
        for error in metaschema_validator.iter_errors(schema):
            location = "/".join(str(part) for part in error.absolute_path) or "<root>"
            problems.append(DefinitionProblem(key=key, message=f"{location}: {error.message}"))
    return tuple(problems)


def format_problems(problems: tuple[DefinitionProblem, ...]) -> str:
    """Render definition problems as CLI output text."""
    lines = [f"Definition problems: {len(problems)}"]
    for problem in problems:
        lines.append(f"- {problem.key}: {problem.message}")
    return "\n".join(lines)
