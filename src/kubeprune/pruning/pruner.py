#!/usr/bin/env python3
"""
KUBEPRUNE PRUNER - The Surgeon
------------------------------
Schema-driven manifest pruning. Walks a manifest alongside its resource
schema and deletes, in place:

1. Fields marked read-only (status, uid, resourceVersion, ...).
2. Values deep-equal to their declared default.
3. Containers emptied by the two rules above.

Keys the schema does not describe are never touched.

Author: KubePrune Team
"""

import logging
from typing import Any, FrozenSet, Mapping, Optional

from kubeprune.core.errors import MissingSchema
from kubeprune.core.models import (
    ArraySchema,
    ObjectSchema,
    PruneResult,
    ReferenceSchema,
    SchemaNode,
)
from kubeprune.pruning.resolver import (
    UNKNOWN_SCHEMA,
    resolve,
    strip_injected_metadata,
)


def deep_equal(a: Any, b: Any) -> bool:
    """Structural equality that, unlike ==, keeps booleans and numbers apart."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if a.keys() != b.keys():
            return False
        return all(deep_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(deep_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, (Mapping, list)) or isinstance(b, (Mapping, list)):
        return False
    return a == b


class Pruner:
    """
    Holds the per-operation context (registry, logger) for one clean pass.
    """

    def __init__(self, registry: Any, logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.logger = logger if logger is not None else logging.getLogger("kubeprune.pruner")

    def clean(self, value: Any, schema: SchemaNode,
              resolving: FrozenSet[str] = frozenset()) -> PruneResult:
        had_entries = isinstance(value, (dict, list)) and bool(value)
        crossed = []

        if isinstance(schema, ReferenceSchema):
            if schema.has_default and deep_equal(value, schema.default):
                return PruneResult.DROP
            resolution = resolve(
                schema, self.registry, resolving,
                on_reference=crossed.append,
                log=self.logger,
            )
            if resolution.schema is UNKNOWN_SCHEMA:
                self._strip_metadata(crossed, value)
                return self._collapsed(value, had_entries)
            schema, resolving = resolution

        # Defaults compare against the value as written, before any stripping.
        if schema.has_default and deep_equal(value, schema.default):
            return PruneResult.DROP

        self._strip_metadata(crossed, value)

        if isinstance(schema, ArraySchema) and isinstance(value, list):
            return self._clean_sequence(value, schema, resolving, had_entries)

        if isinstance(schema, ObjectSchema) and isinstance(value, dict):
            return self._clean_mapping(value, schema, resolving, had_entries)

        return PruneResult.KEPT

    @staticmethod
    def _strip_metadata(names, value: Any) -> None:
        for name in names:
            strip_injected_metadata(name, value)

    @staticmethod
    def _collapsed(value: Any, had_entries: bool) -> PruneResult:
        if had_entries and not value:
            return PruneResult.EMPTIED
        return PruneResult.KEPT

    def _clean_sequence(self, value: list, schema: ArraySchema,
                        resolving: FrozenSet[str], had_entries: bool = True) -> PruneResult:
        if schema.items is None or not value:
            return self._collapsed(value, had_entries)

        # Walk backwards so deletions do not shift the indexes still to visit.
        for index in range(len(value) - 1, -1, -1):
            if self.clean(value[index], schema.items, resolving).removes:
                del value[index]

        return PruneResult.EMPTIED if not value else PruneResult.KEPT

    def _clean_mapping(self, value: dict, schema: ObjectSchema,
                       resolving: FrozenSet[str], had_entries: bool = True) -> PruneResult:
        # A mapping the denylist emptied arrives here with nothing left to walk.
        if not value:
            return self._collapsed(value, had_entries)

        for key in list(value.keys()):
            prop = schema.properties.get(key)
            if prop is None:
                continue
            if self._is_read_only(prop, resolving):
                self.logger.debug("Dropping read-only field %s", key)
                del value[key]
                continue
            if self.clean(value[key], prop, resolving).removes:
                del value[key]

        return PruneResult.EMPTIED if not value else PruneResult.KEPT

    def _is_read_only(self, prop: SchemaNode, resolving: FrozenSet[str]) -> bool:
        if prop.read_only:
            return True
        if isinstance(prop, ReferenceSchema):
            target = resolve(prop, self.registry, resolving, log=self.logger).schema
            return target is not UNKNOWN_SCHEMA and target.read_only
        return False


def clean(value: Any, schema: SchemaNode, registry: Any,
          logger: Optional[logging.Logger] = None) -> PruneResult:
    """Prunes `value` in place against `schema`; see Pruner.clean."""
    return Pruner(registry, logger=logger).clean(value, schema)


def clean_object(obj: Any, registry: Any, logger: Optional[logging.Logger] = None) -> Any:
    """
    Prunes a whole manifest in place and returns it.

    The manifest itself is never dropped, even if every field it holds would be.

    Raises:
        UnknownGroup, UnknownVersion, UnknownKind: the cluster does not serve it.
        MissingSchema: the resource is served but has no schema attached.
    """
    resource = registry.lookup(obj)
    if resource.schema is None:
        raise MissingSchema(resource.api_version, resource.kind)

    pruner = Pruner(registry, logger=logger)
    result = pruner.clean(obj, resource.schema)
    pruner.logger.debug(
        "Cleaned %s %s (%s)", resource.api_version, resource.kind, result.value)
    return obj
