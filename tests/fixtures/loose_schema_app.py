"""Registry whose generator emits a definition that is not valid draft 4."""

from __future__ import annotations

from typing import Any

from fluent_swagger import MetadataRegistry, SchemaGeneratorSettings, SchemaReferenceCache
from fluent_swagger.schema_generation import GeneratedSchema


class Measurement:
    """Plain class described by the generator below."""


def _numeric_bounds_generator(model_type: Any, settings: SchemaGeneratorSettings) -> GeneratedSchema:
    return GeneratedSchema(schema={"type": "number", "exclusiveMinimum": 0})


registry = MetadataRegistry(cache=SchemaReferenceCache(generator=_numeric_bounds_generator))

registry.describe("get", "/measurements/latest").with_default_response(Measurement)
