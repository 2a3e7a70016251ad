"""Tests for the endpoint registry and Swagger document assembly."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import yaml

from fluent_swagger.document import (
    DocumentError,
    DocumentInfo,
    build_document,
    check_definitions,
    dump_document,
    format_problems,
    write_document,
)
from fluent_swagger.registry import MetadataRegistry, RegistryError
from fluent_swagger.schema_cache import type_key

from . import catalog_models
from .sample_models import Item, Order


def _collect_refs(node: Any) -> Iterator[str]:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            yield ref
        for value in node.values():
            yield from _collect_refs(value)
    elif isinstance(node, list):
        for item in node:
            yield from _collect_refs(item)


def _order_registry() -> MetadataRegistry:
    registry = MetadataRegistry()
    (
        registry.describe("GET", "/orders/{order_id}")
        .with_description("Fetch an order", None, "orders")
        .with_request_parameter("order_id", type="integer")
        .with_default_response(Order)
        .with_response("404", "Order not found")
    )
    (
        registry.describe("post", "/orders", name="createOrder")
        .with_description("Create an order", None, "orders")
        .with_request_model(Order)
        .with_response_model("201", Order, "Created")
    )
    registry.describe("delete", "/orders/{order_id}").with_summary("Delete an order")
    return registry


def test_describe_creates_one_record_per_route() -> None:
    """Each route owns one record; describing it twice is rejected."""
    registry = MetadataRegistry()
    builder = registry.describe("GET", "/items")

    assert registry.get("get", "/items") is builder.metadata
    assert builder.metadata.name == "get_items"
    assert builder.cache is registry.cache
    with pytest.raises(RegistryError):
        registry.describe("get", "/items")


def test_describe_rejects_unknown_methods() -> None:
    """Only HTTP methods Swagger 2.0 can document are accepted."""
    with pytest.raises(RegistryError):
        MetadataRegistry().describe("fetch", "/items")


def test_build_document_groups_operations_by_path() -> None:
    """Operations are nested under their path and method."""
    registry = _order_registry()
    document = build_document(
        registry,
        DocumentInfo(title="Orders", version="2.1.0", host="api.example.com", base_path="/v2"),
    )

    assert document["swagger"] == "2.0"
    assert document["info"] == {"title": "Orders", "version": "2.1.0"}
    assert document["host"] == "api.example.com"
    assert document["basePath"] == "/v2"
    assert list(document["paths"]) == ["/orders/{order_id}", "/orders"]
    assert set(document["paths"]["/orders/{order_id}"]) == {"get", "delete"}

    get_operation = document["paths"]["/orders/{order_id}"]["get"]
    assert get_operation["operationId"] == "get_orders__by_order_id"
    assert get_operation["tags"] == ["orders"]
    assert get_operation["responses"]["200"]["schema"] == {
        "$ref": f"#/definitions/{type_key(Order)}"
    }
    assert document["paths"]["/orders"]["post"]["operationId"] == "createOrder"


def test_operations_without_responses_get_a_default() -> None:
    """Swagger 2.0 requires at least one response per operation."""
    document = build_document(_order_registry())

    delete_operation = document["paths"]["/orders/{order_id}"]["delete"]
    assert delete_operation["responses"] == {"default": {"description": "Default response"}}


def test_every_reference_resolves_to_a_definition() -> None:
    """All ``$ref`` pointers in the document name a published definition."""
    document = build_document(_order_registry())
    definitions = document["definitions"]

    refs = set(_collect_refs(document["paths"])) | set(_collect_refs(definitions))
    assert refs == {f"#/definitions/{type_key(Order)}", "#/definitions/Item"}
    assert {ref.removeprefix("#/definitions/") for ref in refs} <= set(definitions)


def test_shared_model_is_defined_once() -> None:
    """Binding a model on several routes yields one definition entry."""
    registry = MetadataRegistry()
    registry.describe("get", "/a").with_default_response(Item)
    registry.describe("get", "/b").with_request_model(Item)

    document = build_document(registry)

    assert list(document["definitions"]) == [type_key(Item)]
    assert len(registry.cache) == 1


def test_same_named_nested_models_resolve_to_their_own_schemas() -> None:
    """References from each endpoint reach the nested model it was built from."""
    registry = MetadataRegistry()
    registry.describe("get", "/orders").with_default_response(Order)
    registry.describe("get", "/shipments").with_default_response(catalog_models.Shipment)

    document = build_document(registry)
    definitions = document["definitions"]

    shipment = definitions[type_key(catalog_models.Shipment)]
    item_ref = shipment["properties"]["items"]["items"]["$ref"]
    assert "weight" in definitions[item_ref.removeprefix("#/definitions/")]["properties"]
    order = definitions[type_key(Order)]
    order_item_ref = order["properties"]["items"]["items"]["$ref"]
    assert "quantity" in definitions[order_item_ref.removeprefix("#/definitions/")]["properties"]
    refs = set(_collect_refs(document))
    assert {ref.removeprefix("#/definitions/") for ref in refs} <= set(definitions)
    assert check_definitions(definitions) == ()


def test_generated_definitions_pass_draft4_check() -> None:
    """Definitions rewritten for Swagger 2.0 are valid draft-4 schemas."""
    document = build_document(_order_registry())

    assert check_definitions(document["definitions"]) == ()


def test_check_definitions_reports_draft_2020_keywords() -> None:
    """Numeric exclusive bounds are reported as draft-4 problems."""
    problems = check_definitions(
        {"Bad": {"type": "integer", "minimum": 0, "exclusiveMinimum": 0}}
    )

    assert len(problems) == 1
    assert problems[0].key == "Bad"
    assert "exclusiveMinimum" in problems[0].message
    assert format_problems(problems).startswith("Definition problems: 1")


def test_dump_document_renders_yaml_and_json() -> None:
    """JSON and YAML renderings carry the same content."""
    document = build_document(_order_registry())

    assert json.loads(dump_document(document, "json")) == document
    assert yaml.safe_load(dump_document(document, "yaml")) == document


def test_dump_document_rejects_unknown_format() -> None:
    """Only JSON and YAML output are supported."""
    with pytest.raises(DocumentError):
        dump_document({"swagger": "2.0"}, "xml")


def test_write_document_reports_os_errors(tmp_path: Path) -> None:
    """Write failures are wrapped in ``DocumentError``."""
    with pytest.raises(DocumentError):
        write_document({"swagger": "2.0"}, tmp_path / "missing" / "swagger.json")

    target = tmp_path / "swagger.yaml"
    write_document({"swagger": "2.0"}, target, "yaml")
    assert yaml.safe_load(target.read_text(encoding="utf-8")) == {"swagger": "2.0"}
