"""Naming helpers for schema definitions and operation identifiers."""

from __future__ import annotations

import keyword
import re

_IDENTIFIER_SANITIZE_RE = re.compile(r"[^0-9a-zA-Z_]+")
_MULTIPLE_UNDERSCORES_RE = re.compile(r"_+")
_PATH_PARAM_RE = re.compile(r"^\{(?P<name>[^{}]+)\}$")
_TYPE_NAME_SANITIZE_RE = re.compile(r"[^0-9a-zA-Z_]+")


def sanitize_identifier(raw: str, *, lowercase: bool = True) -> str:
    """Convert arbitrary text into a valid Python identifier."""
    text = raw.lower() if lowercase else raw
    text = _IDENTIFIER_SANITIZE_RE.sub("_", text)
    text = _MULTIPLE_UNDERSCORES_RE.sub("_", text).strip("_")
    if not text:
        text = "root"
    if text[0].isdigit():
        text = f"x_{text}"
    if keyword.iskeyword(text):
        text = f"{text}_"
    return text


def operation_name(method: str, path: str) -> str:
    """Build a default ``operationId`` from an HTTP method and route pattern.

    Args:
        method (str): HTTP method, any case.
        path (str): Route pattern such as ``/users/{user_id}/posts``.

    Returns:
        str: Identifier such as ``get_users__by_user_id__posts``.
    """
    segments = [segment for segment in path.split("/") if segment]
    normalized_segments: list[str] = []
    for segment in segments:
        match = _PATH_PARAM_RE.match(segment)
        if match:
            param_name = sanitize_identifier(match.group("name"))
            normalized_segments.append(f"by_{param_name}")
            continue
        normalized_segments.append(sanitize_identifier(segment))

    route_name = "__".join(segment for segment in normalized_segments if segment) or "root"
    return f"{sanitize_identifier(method)}_{route_name}"


def type_name(raw: str) -> str:
    """Return a human-readable definition name for a type reference.

    Module qualification is folded into PascalCase and generic arguments are
    spelled out, e.g. ``Page[Item]`` becomes ``PageOfItem`` and
    ``Mapping[str, int]`` becomes ``MappingOfStrAndInt``.

    Args:
        raw (str): Type reference as rendered by the schema generator.

    Returns:
        str: Name safe to use as a ``definitions`` key.
    """
    base, arguments = _split_generic(raw.strip())
    name = _qualified_name(base)
    if arguments:
        name = f"{name}Of" + "And".join(type_name(argument) for argument in arguments)
    return name or "Model"


def _qualified_name(dotted: str) -> str:
    parts = [_TYPE_NAME_SANITIZE_RE.sub("", part) for part in dotted.split(".")]
    return "".join(part[:1].upper() + part[1:] for part in parts if part)


def _split_generic(raw: str) -> tuple[str, list[str]]:
    start = raw.find("[")
    if start == -1 or not raw.endswith("]"):
        return raw, []

    arguments: list[str] = []
    depth = 0
    current: list[str] = []
    for char in raw[start + 1 : -1]:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == "," and depth == 0:
            arguments.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    if current:
        arguments.append("".join(current).strip())
    return raw[:start], [argument for argument in arguments if argument]
