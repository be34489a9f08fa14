#!/usr/bin/env python3
"""
KUBEPRUNE CORE MODELS
---------------------
Defines the fundamental data structures used across the KubePrune engine:
the schema nodes of the Definition Graph and the discovery records
(Group -> GroupVersion -> Resource) they get attached to.

Author: KubePrune Team
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class _NoDefault:
    """Marks a schema node that declares no default (distinct from a null default)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __bool__(self) -> bool:
        return False


NO_DEFAULT = _NoDefault()


@dataclass(frozen=True)
class GroupVersionKind:
    """Kubernetes' three-part identifier for a resource type."""
    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


@dataclass
class SchemaNode:
    """
    A node of the OpenAPI-derived Definition Graph.

    Never instantiated directly: one of ObjectSchema, ArraySchema,
    ReferenceSchema or ScalarSchema is always used.
    """
    default: Any = NO_DEFAULT
    read_only: bool = False
    group_version_kinds: List[GroupVersionKind] = field(default_factory=list)

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT


@dataclass
class ObjectSchema(SchemaNode):
    properties: Dict[str, SchemaNode] = field(default_factory=dict)


@dataclass
class ArraySchema(SchemaNode):
    items: Optional[SchemaNode] = None


@dataclass
class ReferenceSchema(SchemaNode):
    target: str = ""


@dataclass
class ScalarSchema(SchemaNode):
    pass


class PruneResult(Enum):
    """Outcome of cleaning one value against its schema."""
    KEPT = "kept"
    EMPTIED = "emptied"  # container that lost every entry to pruning
    DROP = "drop"

    @property
    def removes(self) -> bool:
        """True when the parent holding this value must delete it."""
        return self is not PruneResult.KEPT


class RegistryState(Enum):
    UNBUILT = "unbuilt"
    READY = "ready"


@dataclass
class Resource:
    """One API resource kind as reported by discovery."""
    group: str
    version: str
    kind: str
    name: str                           # plural resource name, e.g. 'deployments'
    namespaced: bool = False
    schema: Optional[SchemaNode] = None # attached by Registry.attach

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @property
    def gvk(self) -> GroupVersionKind:
        return GroupVersionKind(self.group, self.version, self.kind)


@dataclass
class GroupVersion:
    version: str
    resources_by_kind: Dict[str, Resource] = field(default_factory=dict)


@dataclass
class Group:
    name: str                           # '' is the legacy/core group
    versions: Dict[str, GroupVersion] = field(default_factory=dict)
    preferred_version: Optional[str] = None
