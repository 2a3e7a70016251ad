"""In-process registry of documented routes sharing one schema cache."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Optional

from .builder import EndpointBuilder
from .model_types import EndpointMetadata
from .naming import operation_name
from .schema_cache import SchemaReferenceCache

logger = logging.getLogger(__name__)

_HTTP_METHODS: tuple[str, ...] = (
    "get",
    "put",
    "post",
    "delete",
    "patch",
    "head",
    "options",
)


class RegistryError(RuntimeError):
    """Raised when a route cannot be registered."""


@dataclass(frozen=True)
class RegisteredEndpoint:
    """A route and the metadata record that documents it."""

    method: str
    path: str
    metadata: EndpointMetadata


class MetadataRegistry:
    """Own the metadata records for a set of routes.

    Each route gets exactly one record, created by :meth:`describe`. All
    builders handed out share the registry's cache, so a model bound on
    several routes is generated once and referenced identically.
    """

    def __init__(self, cache: Optional[SchemaReferenceCache] = None) -> None:
        self._cache = cache if cache is not None else SchemaReferenceCache()
        self._endpoints: dict[tuple[str, str], RegisteredEndpoint] = {}

    @property
    def cache(self) -> SchemaReferenceCache:
        """Schema cache shared by every endpoint in this registry."""
        return self._cache

    def describe(self, method: str, path: str, name: Optional[str] = None) -> EndpointBuilder:
        """Create the metadata record for a route and return its builder.

        Args:
            method (str): HTTP method, any case.
            path (str): Route pattern, e.g. ``/users/{user_id}``.
            name (Optional[str]): ``operationId``; derived from the route when omitted.

        Returns:
            EndpointBuilder: Builder over the new record.

        Raises:
            RegistryError: The method is unknown or the route is already described.
        """
        normalized_method = method.strip().lower()
        if normalized_method not in _HTTP_METHODS:
            raise RegistryError(f"Unsupported HTTP method for {path}: {method}")

        route = (normalized_method, path)
        if route in self._endpoints:
            raise RegistryError(
                f"Endpoint already described: {normalized_method.upper()} {path}"
            )

        metadata = EndpointMetadata(name=name or operation_name(normalized_method, path))
        self._endpoints[route] = RegisteredEndpoint(
            method=normalized_method,
            path=path,
            metadata=metadata,
        )
        logger.debug("Described endpoint %s %s", normalized_method.upper(), path)
        return EndpointBuilder(metadata, cache=self._cache)

    def get(self, method: str, path: str) -> Optional[EndpointMetadata]:
        """Return the record for a route, if it was described."""
        endpoint = self._endpoints.get((method.strip().lower(), path))
        return endpoint.metadata if endpoint is not None else None

    def endpoints(self) -> Iterator[RegisteredEndpoint]:
        """Yield registered endpoints in registration order."""
        yield from self._endpoints.values()

    def __len__(self) -> int:
        return len(self._endpoints)
