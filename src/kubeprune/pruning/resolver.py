#!/usr/bin/env python3
"""
KUBEPRUNE RESOLVER - Reference Chasing
--------------------------------------
Follows $ref indirection through the Definition Graph and applies the
hand-maintained metadata denylists when a well-known reference
(ObjectMeta, LabelSelector) is crossed.

The denylists are not schema-derived: the API has no way to say "this label
was injected by a controller".

Author: KubePrune Team
"""

import logging
from typing import Any, Callable, FrozenSet, NamedTuple, Optional

from kubeprune.core.errors import UnresolvedReference
from kubeprune.core.models import ReferenceSchema, SchemaNode

logger = logging.getLogger("kubeprune.pruner")

REF_PREFIXES = ("#/definitions/", "#/components/schemas/")

INJECTED_LABELS = (
    "controller-uid",
    "job-name",
    "pod-template-hash",
)

INJECTED_ANNOTATIONS = (
    "cni.projectcalico.org/containerID",
    "cni.projectcalico.org/podIP",
    "cni.projectcalico.org/podIPs",
    "kubernetes.io/psp",
    "kubectl.kubernetes.io/last-applied-configuration",
    "deployment.kubernetes.io/revision",
)


class _UnknownSchema(SchemaNode):
    """Returned when a reference chain cannot be followed."""

    def __repr__(self) -> str:
        return "UNKNOWN_SCHEMA"


UNKNOWN_SCHEMA = _UnknownSchema()


class Resolution(NamedTuple):
    schema: SchemaNode
    names: FrozenSet[str]  # reference names now on the active call stack


def definition_name(ref: str) -> str:
    """'#/definitions/io.k8s.api.core.v1.Pod' -> 'io.k8s.api.core.v1.Pod'."""
    for prefix in REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


def short_name(name: str) -> str:
    return name.rsplit(".", 1)[-1]


def resolve(node: SchemaNode, registry: Any, resolving: FrozenSet[str] = frozenset(),
            on_reference: Optional[Callable[[str], None]] = None,
            log: Optional[logging.Logger] = None) -> Resolution:
    """
    Replaces `node` with its target while it is a ReferenceSchema.

    Fails softly: a missing target or a name already being resolved higher up
    the stack yields UNKNOWN_SCHEMA, and the caller leaves that subtree alone.
    """
    log = log or logger
    while isinstance(node, ReferenceSchema):
        name = definition_name(node.target)
        if name in resolving:
            log.debug("Reference cycle through %s, leaving subtree as-is", name)
            return Resolution(UNKNOWN_SCHEMA, resolving)
        if on_reference is not None:
            on_reference(name)
        target = registry.definitions.get(name)
        if target is None:
            log.debug("%s", UnresolvedReference(name))
            return Resolution(UNKNOWN_SCHEMA, resolving)
        resolving = resolving | {name}
        node = target
    return Resolution(node, resolving)


def strip_injected_metadata(name: str, value: Any) -> None:
    """Removes controller-injected labels/annotations for well-known references."""
    if not isinstance(value, dict):
        return
    kind = short_name(name)
    if kind == "ObjectMeta":
        _strip_keys(value, "labels", INJECTED_LABELS)
        _strip_keys(value, "annotations", INJECTED_ANNOTATIONS)
    elif kind == "LabelSelector":
        _strip_keys(value, "matchLabels", INJECTED_LABELS)


def _strip_keys(holder: dict, field: str, denylist) -> None:
    mapping = holder.get(field)
    if not isinstance(mapping, dict) or not mapping:
        return
    for key in denylist:
        mapping.pop(key, None)
    if not mapping:
        del holder[field]
