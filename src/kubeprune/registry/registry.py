#!/usr/bin/env python3
"""
KUBEPRUNE REGISTRY - The Cartographer
-------------------------------------
Correlates API discovery records (groups, versions, resource kinds) with the
OpenAPI Definition Graph and answers "which resource is this manifest?".

The registry is built exactly once through Registry.attach() and is read-only
afterwards, so it can be shared between any number of clean operations.

Author: KubePrune Team
"""

import logging
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from kubeprune.core.errors import (
    InvalidManifest,
    RegistryNotReady,
    UnknownGroup,
    UnknownKind,
    UnknownVersion,
)
from kubeprune.core.models import (
    Group,
    ObjectSchema,
    RegistryState,
    Resource,
    SchemaNode,
)


def split_api_version(api_version: str) -> Tuple[str, str]:
    """'apps/v1' -> ('apps', 'v1'); 'v1' -> ('', 'v1')."""
    group, sep, version = api_version.partition("/")
    if not sep:
        return "", api_version
    return group, version


class Registry:
    """
    Top-level container of discovery groups and schema definitions.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.groups: Dict[str, Group] = {}
        self.definitions: Dict[str, SchemaNode] = {}
        self.state = RegistryState.UNBUILT
        self.logger = logger if logger is not None else logging.getLogger("kubeprune.registry")

    @property
    def ready(self) -> bool:
        return self.state is RegistryState.READY

    @classmethod
    def attach(cls, definitions: Mapping[str, SchemaNode], groups: Mapping[str, Group],
               logger: Optional[logging.Logger] = None) -> "Registry":
        """
        Attaches each resource-root definition to the Resource its
        x-kubernetes-group-version-kind triples name.

        Triples naming groups, versions or kinds that discovery did not report
        are skipped: discovery and OpenAPI data are fetched independently and
        routinely disagree (disabled API groups, CRDs without schemas).
        """
        registry = cls(logger=logger)
        registry.definitions = dict(definitions)
        registry.groups = dict(groups)
        log = registry.logger

        attached = 0
        for name, definition in registry.definitions.items():
            if not definition.group_version_kinds:
                continue

            # Status is always server-managed, whatever the schema says.
            if isinstance(definition, ObjectSchema) and "status" in definition.properties:
                definition.properties["status"].read_only = True

            for gvk in definition.group_version_kinds:
                group = registry.groups.get(gvk.group)
                if group is None:
                    log.debug("Skipping %s: group %r not served", name, gvk.group)
                    continue
                group_version = group.versions.get(gvk.version)
                if group_version is None:
                    log.debug("Skipping %s: version %s not served", name, gvk.api_version)
                    continue
                resource = group_version.resources_by_kind.get(gvk.kind)
                if resource is None:
                    log.debug("Skipping %s: kind %s not served in %s", name, gvk.kind, gvk.api_version)
                    continue
                if resource.schema is not None and resource.schema is not definition:
                    log.debug("Replacing schema of %s %s with %s", gvk.api_version, gvk.kind, name)
                resource.schema = definition
                attached += 1

        registry.state = RegistryState.READY
        log.info("Registry ready: %d groups, %d definitions, %d schemas attached",
                 len(registry.groups), len(registry.definitions), attached)
        return registry

    def lookup(self, obj_or_group_version: Union[Mapping[str, Any], str],
               kind: Optional[str] = None) -> Resource:
        """
        Finds the Resource for a manifest object, or for an explicit
        (group_version, kind) pair.
        """
        if not self.ready:
            raise RegistryNotReady()

        if isinstance(obj_or_group_version, str):
            group_version = obj_or_group_version
            if kind is None:
                raise InvalidManifest("kind is required when looking up by group version")
        else:
            group_version, kind = _identity(obj_or_group_version)

        group_name, version = split_api_version(group_version)

        group = self.groups.get(group_name)
        if group is None:
            raise UnknownGroup(group_name)

        gv = group.versions.get(version)
        if gv is None:
            raise UnknownVersion(group_name, version)

        resource = gv.resources_by_kind.get(kind)
        if resource is None:
            raise UnknownKind(group_version, kind)

        return resource

    @staticmethod
    def resource_uri(resource: Resource, namespace: Optional[str] = None) -> str:
        """API path of a resource collection, e.g. 'apis/apps/v1/namespaces/default/deployments'."""
        if resource.group == "":
            uri = "api"
        else:
            uri = "apis/" + resource.group
        uri += "/" + resource.version
        if resource.namespaced:
            uri += "/namespaces/" + (namespace or "default")
        return uri + "/" + resource.name

    def object_uri(self, obj: Mapping[str, Any]) -> str:
        resource = self.lookup(obj)
        metadata = obj.get("metadata") or {}
        name = metadata.get("name")
        if not name:
            raise InvalidManifest("metadata.name is missing")
        return self.resource_uri(resource, metadata.get("namespace")) + "/" + name

    def resources(self) -> Iterator[Resource]:
        for group_name in sorted(self.groups):
            group = self.groups[group_name]
            for version in sorted(group.versions):
                gv = group.versions[version]
                for kind in sorted(gv.resources_by_kind):
                    yield gv.resources_by_kind[kind]


def _identity(obj: Mapping[str, Any]) -> Tuple[str, str]:
    if not isinstance(obj, Mapping):
        raise InvalidManifest(f"expected a mapping, got {type(obj).__name__}")
    api_version = obj.get("apiVersion")
    kind = obj.get("kind")
    if not isinstance(api_version, str) or not api_version:
        raise InvalidManifest("apiVersion is missing")
    if not isinstance(kind, str) or not kind:
        raise InvalidManifest("kind is missing")
    return api_version, kind
