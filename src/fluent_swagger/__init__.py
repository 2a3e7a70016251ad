"""Fluent Swagger 2.0 metadata for HTTP endpoints with shared schema definitions."""

from __future__ import annotations

from .builder import EndpointBuilder
from .document import DocumentInfo, build_document, dump_document
from .model_types import (
    EndpointMetadata,
    ParameterLocation,
    RequestParameter,
    ResponseInfo,
    SchemaRef,
)
from .registry import MetadataRegistry, RegistryError
from .schema_cache import SchemaReferenceCache, default_cache, reset_default_cache, type_key
from .schema_generation import SchemaGenerationError, SchemaGeneratorSettings, generate_schema

__all__ = [
    "DocumentInfo",
    "EndpointBuilder",
    "EndpointMetadata",
    "MetadataRegistry",
    "ParameterLocation",
    "RegistryError",
    "RequestParameter",
    "ResponseInfo",
    "SchemaGenerationError",
    "SchemaGeneratorSettings",
    "SchemaRef",
    "SchemaReferenceCache",
    "build_document",
    "default_cache",
    "dump_document",
    "generate_schema",
    "reset_default_cache",
    "type_key",
]
