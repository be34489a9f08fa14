#!/usr/bin/env python3
"""
KUBEPRUNE DISCOVERY
-------------------
Builds the Group -> GroupVersion -> Resource tree from the API server's
discovery endpoints (/api, /apis, and one resource list per group version).

Author: KubePrune Team
"""

import logging
from typing import Any, Callable, Dict, Mapping

from kubeprune.core.errors import APIError
from kubeprune.core.models import Group, GroupVersion, Resource

logger = logging.getLogger("kubeprune.cluster")

Fetch = Callable[[str], Any]


def parse_resource_list(group: str, version: str, payload: Mapping[str, Any]) -> GroupVersion:
    """Converts an APIResourceList into a GroupVersion, skipping subresources."""
    group_version = GroupVersion(version=version)
    for entry in payload.get("resources") or []:
        name = entry.get("name", "")
        kind = entry.get("kind")
        # 'pods/log', 'deployments/scale' ...
        if not name or "/" in name or not kind:
            continue
        group_version.resources_by_kind[kind] = Resource(
            group=group,
            version=version,
            kind=kind,
            name=name,
            namespaced=bool(entry.get("namespaced", False)),
        )
    return group_version


def discover_group(fetch: Fetch, name: str, versions, preferred=None) -> Group:
    group = Group(name=name, preferred_version=preferred)
    prefix = "/api" if name == "" else f"/apis/{name}"
    for version in versions:
        try:
            payload = fetch(f"{prefix}/{version}")
        except APIError as e:
            # Aggregated APIs (metrics-server...) regularly answer 503.
            logger.warning("Skipping %s/%s: %s", prefix, version, e)
            continue
        group.versions[version] = parse_resource_list(name, version, payload or {})
    return group


def discover_all_groups(fetch: Fetch) -> Dict[str, Group]:
    """
    Queries the core group and every named group.

    Args:
        fetch: callable returning parsed JSON for an API path.
    """
    groups: Dict[str, Group] = {}

    core = fetch("/api") or {}
    core_versions = core.get("versions") or []
    groups[""] = discover_group(fetch, "", core_versions,
                                preferred=core_versions[0] if core_versions else None)

    group_list = fetch("/apis") or {}
    for entry in group_list.get("groups") or []:
        name = entry.get("name")
        if not name:
            continue
        versions = [v["version"] for v in entry.get("versions") or [] if v.get("version")]
        preferred = (entry.get("preferredVersion") or {}).get("version")
        groups[name] = discover_group(fetch, name, versions, preferred=preferred)

    logger.info("Discovered %d API groups", len(groups))
    return groups
