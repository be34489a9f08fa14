"""
KubePrune: schema-driven cleaning of Kubernetes manifests.
"""

from kubeprune.core.errors import (
    KubePruneError,
    MissingSchema,
    UnknownGroup,
    UnknownKind,
    UnknownVersion,
    UnresolvedReference,
)
from kubeprune.core.models import (
    ArraySchema,
    Group,
    GroupVersion,
    GroupVersionKind,
    ObjectSchema,
    PruneResult,
    ReferenceSchema,
    Resource,
    ScalarSchema,
    SchemaNode,
)
from kubeprune.pruning.pruner import clean, clean_object
from kubeprune.pruning.resolver import resolve
from kubeprune.registry.registry import Registry
from kubeprune.secrets.transcoder import to_edit_form, to_wire_form

__version__ = "0.1.0"

__all__ = [
    "ArraySchema", "Group", "GroupVersion", "GroupVersionKind", "KubePruneError",
    "MissingSchema", "ObjectSchema", "PruneResult", "ReferenceSchema", "Registry",
    "Resource", "ScalarSchema", "SchemaNode", "UnknownGroup", "UnknownKind",
    "UnknownVersion", "UnresolvedReference", "clean", "clean_object", "resolve",
    "to_edit_form", "to_wire_form",
]
