"""Fluent builder that accumulates Swagger metadata for one endpoint."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Optional, Union

from .model_types import (
    EndpointMetadata,
    Number,
    ParameterItems,
    ParameterLocation,
    RequestParameter,
    ResponseInfo,
    SchemaRef,
)
from .schema_cache import SchemaReferenceCache, default_cache

DEFAULT_TAGS: tuple[str, ...] = ("default",)
DEFAULT_CONTENT_TYPES: tuple[str, ...] = ("application/json",)
DEFAULT_RESPONSE_DESCRIPTION = "Default response"


class EndpointBuilder:
    """Chainable mutators over an :class:`EndpointMetadata` record.

    Every ``with_*`` method updates the record in place and returns the
    builder. Arguments are never checked against each other; shaping a
    sensible combination is left to the caller. Model bindings go through the
    schema cache, so the record only ever stores ``$ref`` pointers.
    """

    def __init__(
        self,
        metadata: Optional[EndpointMetadata] = None,
        *,
        cache: Optional[SchemaReferenceCache] = None,
    ) -> None:
        self._metadata = metadata if metadata is not None else EndpointMetadata()
        self._cache = cache if cache is not None else default_cache()

    @property
    def metadata(self) -> EndpointMetadata:
        """The record being built."""
        return self._metadata

    @property
    def cache(self) -> SchemaReferenceCache:
        """The schema cache model bindings resolve through."""
        return self._cache

    def with_response_model(
        self,
        status_code: str,
        model_type: Any,
        description: Optional[str] = None,
    ) -> EndpointBuilder:
        """Document ``status_code`` as returning ``model_type``."""
        self._metadata.responses[str(status_code)] = ResponseInfo(
            description=description,
            schema_ref=self._schema_ref(model_type),
        )
        return self

    def with_default_response(
        self,
        model_type: Any,
        description: str = DEFAULT_RESPONSE_DESCRIPTION,
    ) -> EndpointBuilder:
        """Document the ``200`` response as returning ``model_type``."""
        return self.with_response_model("200", model_type, description)

    def with_response(self, status_code: str, description: str) -> EndpointBuilder:
        """Document ``status_code`` with a description and no body schema."""
        self._metadata.responses[str(status_code)] = ResponseInfo(description=description)
        return self

    def with_request_parameter(
        self,
        name: str,
        type: str = "string",  # pylint: disable=redefined-builtin
        format: Optional[str] = None,  # pylint: disable=redefined-builtin
        required: bool = True,
        description: Optional[str] = None,
        default_value: Any = None,
        maximum: Optional[Number] = None,
        exclusive_maximum: Optional[bool] = None,
        minimum: Optional[Number] = None,
        exclusive_minimum: Optional[bool] = None,
        max_length: Optional[int] = None,
        min_length: Optional[int] = None,
        max_items: Optional[int] = None,
        min_items: Optional[int] = None,
        pattern: Optional[str] = None,
        unique_items: Optional[bool] = None,
        enum_values: Optional[Iterable[Any]] = None,
        multiple_of: Optional[Number] = None,
        location: Union[ParameterLocation, str] = ParameterLocation.PATH,
        is_array: bool = False,
    ) -> EndpointBuilder:
        """Append a primitive or array request parameter.

        When ``is_array`` is set, ``type`` describes the elements and the
        parameter itself is declared as ``"array"``. Parameters are appended
        in call order; repeated names produce repeated entries.

        Args:
            name (str): Parameter name.
            type (str): Primitive type, or element type when ``is_array``.
            format (Optional[str]): Swagger format modifier, e.g. ``int64``.
            required (bool): Whether the parameter must be supplied.
            description (Optional[str]): Human-readable description.
            default_value (Any): Default value, stored as given.
            maximum (Optional[Number]): Upper numeric bound.
            exclusive_maximum (Optional[bool]): Whether ``maximum`` is exclusive.
            minimum (Optional[Number]): Lower numeric bound.
            exclusive_minimum (Optional[bool]): Whether ``minimum`` is exclusive.
            max_length (Optional[int]): Maximum string length.
            min_length (Optional[int]): Minimum string length.
            max_items (Optional[int]): Maximum array length.
            min_items (Optional[int]): Minimum array length.
            pattern (Optional[str]): Regular expression the value must match.
            unique_items (Optional[bool]): Whether array items must be unique.
            enum_values (Optional[Iterable[Any]]): Allowed values.
            multiple_of (Optional[Number]): Required numeric divisor.
            location (Union[ParameterLocation, str]): Where the value is read from.
            is_array (bool): Whether the parameter is an array of ``type``.

        Returns:
            EndpointBuilder: This builder.
        """
        items: Optional[ParameterItems] = None
        if is_array:
            items = ParameterItems(type=type)
            type = "array"

        self._metadata.request_parameters.append(
            RequestParameter(
                name=name,
                location=location,
                type=type,
                items=items,
                required=required,
                format=format,
                description=description,
                default_value=default_value,
                maximum=maximum,
                exclusive_maximum=exclusive_maximum,
                minimum=minimum,
                exclusive_minimum=exclusive_minimum,
                max_length=max_length,
                min_length=min_length,
                max_items=max_items,
                min_items=min_items,
                pattern=pattern,
                unique_items=unique_items,
                enum_values=list(enum_values) if enum_values is not None else None,
                multiple_of=multiple_of,
            )
        )
        return self

    def with_request_model(
        self,
        model_type: Any,
        name: str = "body",
        description: Optional[str] = None,
        required: bool = True,
        location: Union[ParameterLocation, str] = ParameterLocation.BODY,
    ) -> EndpointBuilder:
        """Append a parameter whose payload is described by ``model_type``."""
        self._metadata.request_parameters.append(
            RequestParameter(
                name=name,
                location=location,
                required=required,
                description=description,
                schema_ref=self._schema_ref(model_type),
            )
        )
        return self

    def with_description(
        self,
        description: str,
        content_types: Optional[Sequence[str]] = None,
        *tags: str,
    ) -> EndpointBuilder:
        """Set the description, filling tags and content types once.

        Tags and content types are only written while still unset: the first
        call applies the given values or the defaults (``["default"]`` and
        ``["application/json"]``), later calls leave them alone. Use
        :meth:`with_tags` to replace tags afterwards.
        """
        if self._metadata.tags is None:
            self._metadata.tags = list(tags) if tags else list(DEFAULT_TAGS)

        if self._metadata.content_types is None:
            self._metadata.content_types = (
                list(content_types) if content_types is not None else list(DEFAULT_CONTENT_TYPES)
            )

        self._metadata.description = description
        return self

    def with_summary(self, summary: str) -> EndpointBuilder:
        """Set the summary, replacing any previous one."""
        self._metadata.summary = summary
        return self

    def with_tags(self, tags: Iterable[str]) -> EndpointBuilder:
        """Replace the tags unconditionally."""
        self._metadata.tags = list(tags)
        return self

    def _schema_ref(self, model_type: Any) -> SchemaRef:
        return SchemaRef(ref=self._cache.reference(model_type))
