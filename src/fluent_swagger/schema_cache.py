"""Memoizing store of generated schema definitions keyed by type identity."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from copy import deepcopy
from typing import Any, Optional

from .json_types import SchemaDocument
from .schema_generation import (
    GeneratedSchema,
    SchemaGenerator,
    SchemaGeneratorSettings,
    generate_schema,
)

logger = logging.getLogger(__name__)

DEFINITIONS_PREFIX = "#/definitions/"


def type_key(model_type: Any) -> str:
    """Return the fully-qualified name used as a type's cache key.

    Classes are keyed by ``module.qualname``. Parametrized pydantic generics
    are keyed by their origin plus the keys of their arguments, since their
    own ``__qualname__`` only carries the short argument names. Other type
    expressions such as ``list[Item]`` fall back to their ``repr``, which
    already spells out qualified arguments.
    """
    generic_metadata = getattr(model_type, "__pydantic_generic_metadata__", None)
    if generic_metadata and generic_metadata.get("origin") is not None:
        arguments = ", ".join(type_key(argument) for argument in generic_metadata["args"])
        return f"{type_key(generic_metadata['origin'])}[{arguments}]"
    if isinstance(model_type, type):
        module = getattr(model_type, "__module__", None)
        qualname = getattr(model_type, "__qualname__", model_type.__name__)
        if module and module != "builtins":
            return f"{module}.{qualname}"
        return qualname
    return repr(model_type)


def definition_ref(key: str) -> str:
    """Build the ``$ref`` string pointing at a definitions key."""
    return f"{DEFINITIONS_PREFIX}{key}"


def _rename_refs(node: Any, renamed_refs: Mapping[str, str]) -> Any:
    if isinstance(node, list):
        return [_rename_refs(item, renamed_refs) for item in node]
    if not isinstance(node, dict):
        return node
    rewritten: dict[str, Any] = {}
    for key, value in node.items():
        if key == "$ref" and isinstance(value, str):
            rewritten[key] = renamed_refs.get(value, value)
        else:
            rewritten[key] = _rename_refs(value, renamed_refs)
    return rewritten


class SchemaReferenceCache:
    """Convert each bound type into a schema document at most once.

    Keys are fully-qualified type names and are stable for the cache's
    lifetime; entries are never evicted. Resolution holds a lock across the
    check-generate-insert sequence so concurrent callers never generate the
    same key twice. A failed generation stores nothing and is retried by the
    next resolution of the same type.

    Nested definitions share one namespace across entries. When a new
    generation brings a nested name that is already published with a
    different schema, the newcomer is published under a numbered name
    (``Item2``) and its references are rewritten to match.
    """

    def __init__(
        self,
        *,
        generator: Optional[SchemaGenerator] = None,
        settings: Optional[SchemaGeneratorSettings] = None,
    ) -> None:
        self._generator: SchemaGenerator = generator or generate_schema
        self._settings = settings or SchemaGeneratorSettings()
        self._entries: dict[str, GeneratedSchema] = {}
        self._nested: dict[str, SchemaDocument] = {}
        self._lock = threading.RLock()

    @property
    def settings(self) -> SchemaGeneratorSettings:
        """Generator configuration applied to every resolution."""
        return self._settings

    def resolve(self, model_type: Any) -> str:
        """Return the reference key for ``model_type``, generating on first use.

        Args:
            model_type (Any): Type whose schema should be registered.

        Returns:
            str: The fully-qualified key the schema is stored under.

        Raises:
            SchemaGenerationError: The generator could not describe the type.
        """
        key = type_key(model_type)
        with self._lock:
            if key in self._entries:
                return key

            try:
                generated = self._generator(model_type, self._settings)
            except Exception:
                logger.debug("Schema generation failed for %s", key)
                raise
            generated = self._claim_nested_names(key, generated)
            self._entries[key] = generated
            for name, schema in generated.definitions.items():
                self._nested.setdefault(name, schema)
            logger.debug(
                "Generated schema for %s with %d nested definition(s)",
                key,
                len(generated.definitions),
            )
            return key

    def reference(self, model_type: Any) -> str:
        """Resolve ``model_type`` and return its ``#/definitions/...`` pointer."""
        return definition_ref(self.resolve(model_type))

    def get(self, key: str) -> Optional[SchemaDocument]:
        """Return a copy of the schema stored under ``key``, if any."""
        with self._lock:
            entry = self._entries.get(key)
            return deepcopy(entry.schema) if entry is not None else None

    def keys(self) -> list[str]:
        """Return cached keys in insertion order."""
        with self._lock:
            return list(self._entries)

    def definitions(self) -> dict[str, SchemaDocument]:
        """Return every definition a document needs, keyed for ``$ref`` lookup.

        Top-level entries are keyed by fully-qualified type name, followed by
        the nested definitions under their published names.
        """
        with self._lock:
            merged = {key: deepcopy(entry.schema) for key, entry in self._entries.items()}
            for name, schema in self._nested.items():
                merged.setdefault(name, deepcopy(schema))
        return merged

    def clear(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._entries.clear()
            self._nested.clear()

    def _claim_nested_names(self, key: str, generated: GeneratedSchema) -> GeneratedSchema:
        # Renaming one definition changes the schemas that point at it, so
        # keep checking until every definition matches its published name.
        renamed: dict[str, str] = {}
        tried: dict[str, set[str]] = {}
        while True:
            renamed_refs = self._renamed_refs(renamed)
            conflicts: list[tuple[str, SchemaDocument]] = []
            for name, schema in generated.definitions.items():
                candidate = _rename_refs(schema, renamed_refs)
                published = self._nested.get(renamed.get(name, name))
                if published is not None and published != candidate:
                    conflicts.append((name, candidate))
            if not conflicts:
                break
            for name, candidate in conflicts:
                attempted = tried.setdefault(name, {renamed.get(name, name)})
                renamed[name] = self._free_nested_name(
                    name, candidate, generated.definitions, renamed, attempted
                )
                attempted.add(renamed[name])

        if not renamed:
            return generated
        for original, published_name in renamed.items():
            logger.debug(
                "Nested definition %s of %s is published as %s", original, key, published_name
            )
        renamed_refs = self._renamed_refs(renamed)
        return GeneratedSchema(
            schema=_rename_refs(generated.schema, renamed_refs),
            definitions={
                renamed.get(name, name): _rename_refs(schema, renamed_refs)
                for name, schema in generated.definitions.items()
            },
        )

    def _free_nested_name(
        self,
        name: str,
        schema: SchemaDocument,
        local_names: Mapping[str, SchemaDocument],
        renamed: Mapping[str, str],
        attempted: set[str],
    ) -> str:
        taken = set(local_names) | {
            published for original, published in renamed.items() if original != name
        }
        suffix = 2
        while True:
            candidate = f"{name}{suffix}"
            suffix += 1
            if candidate in taken or candidate in attempted:
                continue
            published = self._nested.get(candidate)
            if published is None or published == schema:
                return candidate

    def _renamed_refs(self, renamed: Mapping[str, str]) -> dict[str, str]:
        template = self._settings.ref_template
        return {
            template.format(model=original): template.format(model=published)
            for original, published in renamed.items()
        }

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())


_default_cache: Optional[SchemaReferenceCache] = None
_default_cache_lock = threading.Lock()


def default_cache() -> SchemaReferenceCache:
    """Return the process-wide cache, creating it on first use."""
    global _default_cache
    with _default_cache_lock:
        if _default_cache is None:
            _default_cache = SchemaReferenceCache()
        return _default_cache


def reset_default_cache() -> None:
    """Discard the process-wide cache so the next call starts fresh."""
    global _default_cache
    with _default_cache_lock:
        _default_cache = None
