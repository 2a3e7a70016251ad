"""Generate Swagger 2.0 schema documents from Python types.

The default generator builds a JSON Schema with pydantic and rewrites the
2020-12 keywords pydantic emits into their Swagger 2.0 equivalents. Nested
models are hoisted out of the document so they can be published alongside
it in the ``definitions`` section.
"""

from __future__ import annotations

from collections.abc import Callable
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from pydantic import TypeAdapter
from pydantic.errors import PydanticUserError
from pydantic.json_schema import GenerateJsonSchema

from .json_types import SchemaDocument
from .naming import type_name

SWAGGER2_REF_TEMPLATE = "#/definitions/{model}"

# Keys whose values are literal JSON data rather than nested schemas.
_LITERAL_KEYS = {"default", "enum", "const", "example", "examples", "required"}
# Keys whose values map names to schemas.
_SCHEMA_MAP_KEYS = {"properties", "patternProperties", "definitions", "$defs"}
_NULL_SCHEMA = {"type": "null"}


class SchemaGenerationError(RuntimeError):
    """Raised when no schema document can be generated for a type."""


@dataclass(frozen=True)
class SchemaGeneratorSettings:
    """Fixed configuration handed to the schema generator."""

    dialect: Literal["swagger2"] = "swagger2"
    ref_template: str = SWAGGER2_REF_TEMPLATE
    mode: Literal["validation", "serialization"] = "validation"
    by_alias: bool = True
    type_name_generator: Callable[[str], str] = field(default=type_name)


@dataclass(frozen=True)
class GeneratedSchema:
    """A generated schema plus the nested definitions it refers to."""

    schema: SchemaDocument
    definitions: dict[str, SchemaDocument] = field(default_factory=dict)


type SchemaGenerator = Callable[[Any, SchemaGeneratorSettings], GeneratedSchema]


def generate_schema(model_type: Any, settings: SchemaGeneratorSettings) -> GeneratedSchema:
    """Generate a Swagger 2.0 schema document for ``model_type``.

    Args:
        model_type (Any): Class or type expression pydantic can describe.
        settings (SchemaGeneratorSettings): Generator configuration.

    Returns:
        GeneratedSchema: The schema and its hoisted nested definitions.
    """
    try:
        adapter = TypeAdapter(model_type)
        raw_schema = adapter.json_schema(
            by_alias=settings.by_alias,
            ref_template=settings.ref_template,
            schema_generator=_generator_class(settings.type_name_generator),
            mode=settings.mode,
        )
    except PydanticUserError as exc:
        raise SchemaGenerationError(
            f"Unable to generate a schema for {model_type!r}: {exc}"
        ) from exc

    document = deepcopy(raw_schema)
    nested = document.pop("$defs", None)
    definitions: dict[str, SchemaDocument] = {}
    if isinstance(nested, dict):
        for name, nested_schema in nested.items():
            definitions[name] = to_swagger2(nested_schema)
    return GeneratedSchema(schema=to_swagger2(document), definitions=definitions)


def _generator_class(naming: Callable[[str], str]) -> type[GenerateJsonSchema]:
    class _NamedJsonSchema(GenerateJsonSchema):
        def normalize_name(self, name: str) -> str:
            return naming(name)

    return _NamedJsonSchema


def to_swagger2(node: Any, *, parent_key: Optional[str] = None) -> Any:
    """Rewrite a JSON Schema 2020-12 node into the Swagger 2.0 dialect."""
    if isinstance(node, list):
        return [to_swagger2(item) for item in node]
    if not isinstance(node, dict):
        return node
    if parent_key in _SCHEMA_MAP_KEYS:
        return {name: to_swagger2(value) for name, value in node.items()}

    converted: dict[str, Any] = {}
    for key, value in node.items():
        if key in _LITERAL_KEYS:
            converted[key] = deepcopy(value)
        else:
            converted[key] = to_swagger2(value, parent_key=key)

    converted.pop("$schema", None)
    converted = _collapse_nullable_any_of(converted)
    _collapse_type_list(converted)
    _const_to_enum(converted)
    _exclusive_bounds_to_flags(converted)
    _examples_to_example(converted)
    _prefix_items_to_items(converted)
    _discriminator_to_property_name(converted)
    for keyword in ("anyOf", "oneOf"):
        if keyword in converted:
            converted[f"x-{keyword}"] = converted.pop(keyword)
    return converted


def _collapse_nullable_any_of(schema: dict[str, Any]) -> dict[str, Any]:
    any_of = schema.get("anyOf")
    if not isinstance(any_of, list) or _NULL_SCHEMA not in any_of:
        return schema

    options = [option for option in any_of if option != _NULL_SCHEMA]
    siblings = {key: value for key, value in schema.items() if key != "anyOf"}
    if len(options) != 1 or not isinstance(options[0], dict):
        return {**siblings, "anyOf": options, "x-nullable": True}

    option = options[0]
    # Swagger 2.0 ignores siblings of $ref, so keep the reference under allOf.
    base: dict[str, Any] = {"allOf": [option]} if "$ref" in option else dict(option)
    return {**base, **siblings, "x-nullable": True}


def _collapse_type_list(schema: dict[str, Any]) -> None:
    schema_type = schema.get("type")
    if not isinstance(schema_type, list):
        return
    members = [member for member in schema_type if member != "null"]
    if len(members) != len(schema_type):
        schema["x-nullable"] = True
    if len(members) == 1:
        schema["type"] = members[0]
    elif not members:
        schema.pop("type")
    else:
        schema["type"] = members


def _const_to_enum(schema: dict[str, Any]) -> None:
    if "const" in schema:
        value = schema.pop("const")
        schema.setdefault("enum", [value])


def _exclusive_bounds_to_flags(schema: dict[str, Any]) -> None:
    for exclusive_key, bound_key in (
        ("exclusiveMinimum", "minimum"),
        ("exclusiveMaximum", "maximum"),
    ):
        value = schema.get(exclusive_key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        schema[bound_key] = value
        schema[exclusive_key] = True


def _examples_to_example(schema: dict[str, Any]) -> None:
    examples = schema.pop("examples", None)
    if isinstance(examples, list) and examples and "example" not in schema:
        schema["example"] = examples[0]


def _prefix_items_to_items(schema: dict[str, Any]) -> None:
    prefix_items = schema.pop("prefixItems", None)
    if isinstance(schema.get("items"), bool):
        schema.pop("items")
    if isinstance(prefix_items, list) and prefix_items and "items" not in schema:
        schema["items"] = prefix_items[0]


def _discriminator_to_property_name(schema: dict[str, Any]) -> None:
    discriminator = schema.get("discriminator")
    if isinstance(discriminator, dict) and isinstance(discriminator.get("propertyName"), str):
        schema["discriminator"] = discriminator["propertyName"]
