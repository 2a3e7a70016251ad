"""Endpoint metadata records and their Swagger 2.0 serialized shape."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class ParameterLocation(str, Enum):
    """Where a request parameter is read from."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    BODY = "body"
    FORM_DATA = "formData"


class _SwaggerModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_swagger(self) -> dict[str, Any]:
        """Return the Swagger 2.0 mapping for this record."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SchemaRef(_SwaggerModel):
    """A ``$ref`` pointer into the document's ``definitions`` section."""

    ref: str = Field(alias="$ref")


class ResponseInfo(_SwaggerModel):
    """Documented response for one status code."""

    description: Optional[str] = None
    schema_ref: Optional[SchemaRef] = Field(default=None, alias="schema")


class ParameterItems(_SwaggerModel):
    """Element type of an array parameter."""

    type: str


class RequestParameter(_SwaggerModel):
    """One bound request input.

    A parameter either carries a primitive ``type`` (optionally ``"array"``
    with ``items``) or, for body parameters, a ``schema_ref``. Constraint
    fields and the location are stored verbatim and never checked against
    the declared type or the known locations.
    """

    name: str
    location: Union[ParameterLocation, str] = Field(default=ParameterLocation.PATH, alias="in")
    type: Optional[str] = None
    items: Optional[ParameterItems] = None
    required: bool = True
    format: Optional[str] = None
    description: Optional[str] = None
    default_value: Any = Field(default=None, alias="default")
    maximum: Any = None
    exclusive_maximum: Any = None
    minimum: Any = None
    exclusive_minimum: Any = None
    max_length: Any = None
    min_length: Any = None
    max_items: Any = None
    min_items: Any = None
    pattern: Any = None
    unique_items: Any = None
    enum_values: Any = Field(default=None, alias="enum")
    multiple_of: Any = None
    schema_ref: Optional[SchemaRef] = Field(default=None, alias="schema")

    @model_validator(mode="after")
    def check_binding(self) -> RequestParameter:
        if self.schema_ref is not None and self.type is not None:
            raise ValueError(
                f"Parameter {self.name!r} cannot carry both a schema reference and a type"
            )
        if self.schema_ref is None and self.type is None:
            raise ValueError(f"Parameter {self.name!r} needs either a schema reference or a type")
        return self

    @property
    def item_type(self) -> Optional[str]:
        """Element type for array parameters."""
        return self.items.type if self.items is not None else None

    @property
    def is_schema_bound(self) -> bool:
        """Whether this parameter is bound to a model definition."""
        return self.schema_ref is not None


class EndpointMetadata(_SwaggerModel):
    """Documentation fields accumulated for one HTTP endpoint."""

    name: Optional[str] = Field(default=None, alias="operationId")
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[list[str]] = None
    content_types: Optional[list[str]] = Field(default=None, alias="produces")
    request_parameters: list[RequestParameter] = Field(default_factory=list, alias="parameters")
    responses: dict[str, ResponseInfo] = Field(default_factory=dict)

    def to_swagger(self) -> dict[str, Any]:
        """Return the Swagger 2.0 operation object, omitting empty sections."""
        payload = super().to_swagger()
        if not payload.get("parameters"):
            payload.pop("parameters", None)
        if not payload.get("responses"):
            payload.pop("responses", None)
        return payload
