"""Petstore registry used by the CLI tests."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from fluent_swagger import MetadataRegistry


class Pet(BaseModel):
    id: int
    name: str = Field(min_length=1)
    tag: Optional[str] = None


class NewPet(BaseModel):
    name: str
    tag: Optional[str] = None


class Error(BaseModel):
    code: int
    message: str


registry = MetadataRegistry()

(
    registry.describe("get", "/pets", name="listPets")
    .with_description("List all pets", None, "pets")
    .with_summary("List pets")
    .with_request_parameter("limit", type="integer", format="int32", required=False, location="query")
    .with_default_response(Pet, "A page of pets")
    .with_response_model("500", Error, "Unexpected error")
)

(
    registry.describe("post", "/pets", name="createPet")
    .with_description("Create a pet", None, "pets")
    .with_request_model(NewPet, description="Pet to add")
    .with_response_model("201", Pet, "Created")
    .with_response_model("500", Error, "Unexpected error")
)

(
    registry.describe("get", "/pets/{pet_id}")
    .with_description("Find a pet by id")
    .with_request_parameter("pet_id", type="integer", format="int64")
    .with_response_model("200", Pet)
    .with_response("404", "Pet not found")
)
