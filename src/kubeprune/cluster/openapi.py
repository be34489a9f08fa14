#!/usr/bin/env python3
"""
KUBEPRUNE OPENAPI LOADER
------------------------
Turns the JSON schemas published at /openapi/v2 into the SchemaNode
Definition Graph. Only what pruning needs is kept: structure, defaults,
readOnly flags and the x-kubernetes-group-version-kind extension.

Author: KubePrune Team
"""

import logging
from typing import Any, Callable, Dict, Mapping

from kubeprune.core.models import (
    ArraySchema,
    GroupVersionKind,
    ObjectSchema,
    ReferenceSchema,
    ScalarSchema,
    SchemaNode,
)
from kubeprune.pruning.resolver import definition_name

logger = logging.getLogger("kubeprune.cluster")

GVK_EXTENSION = "x-kubernetes-group-version-kind"


def parse_schema(raw: Mapping[str, Any]) -> SchemaNode:
    """Converts one JSON schema into the matching SchemaNode variant."""
    # OpenAPI v3 wraps a $ref in a single-member allOf to give it siblings
    # (default, description...).
    all_of = raw.get("allOf")
    if isinstance(all_of, list) and len(all_of) == 1 and "$ref" not in raw:
        merged = dict(all_of[0])
        merged.update({k: v for k, v in raw.items() if k != "allOf"})
        raw = merged

    if "$ref" in raw:
        node: SchemaNode = ReferenceSchema(target=definition_name(raw["$ref"]))
    elif raw.get("type") == "array" or "items" in raw:
        items = raw.get("items")
        node = ArraySchema(items=parse_schema(items) if isinstance(items, Mapping) else None)
    elif raw.get("type") == "object" or "properties" in raw:
        node = ObjectSchema(properties={
            name: parse_schema(prop)
            for name, prop in (raw.get("properties") or {}).items()
            if isinstance(prop, Mapping)
        })
    else:
        node = ScalarSchema()

    if "default" in raw:
        node.default = raw["default"]
    node.read_only = bool(raw.get("readOnly", False))
    node.group_version_kinds = [
        GroupVersionKind(gvk.get("group", ""), gvk.get("version", ""), gvk.get("kind", ""))
        for gvk in raw.get(GVK_EXTENSION) or []
    ]
    return node


def parse_definitions(document: Mapping[str, Any]) -> Dict[str, SchemaNode]:
    """Parses the definitions of an OpenAPI v2 document (or v3 components.schemas)."""
    raw_definitions = document.get("definitions")
    if raw_definitions is None:
        raw_definitions = (document.get("components") or {}).get("schemas") or {}

    definitions = {name: parse_schema(raw) for name, raw in raw_definitions.items()}
    logger.debug("Parsed %d schema definitions", len(definitions))
    return definitions


def load_definitions(fetch: Callable[[str], Any]) -> Dict[str, SchemaNode]:
    return parse_definitions(fetch("/openapi/v2") or {})
