#!/usr/bin/env python3
"""
KUBEPRUNE ERRORS
----------------
Typed failures raised by the registry, the pruning engine and the
cluster adapters. Every failure carries enough context (group/version/kind,
reference name or HTTP status) to be diagnosed from its message alone.

Author: KubePrune Team
"""

from typing import Optional


class KubePruneError(Exception):
    """Base class for every error raised by KubePrune."""


class RegistryNotReady(KubePruneError):
    def __init__(self):
        super().__init__("Registry has not been attached yet")


class InvalidManifest(KubePruneError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid manifest: {reason}")


class LookupFailure(KubePruneError):
    """A manifest names a group, version or kind the cluster does not serve."""


class UnknownGroup(LookupFailure):
    def __init__(self, group: str):
        self.group = group
        super().__init__(f"Unknown group {group!r}")


class UnknownVersion(LookupFailure):
    def __init__(self, group: str, version: str):
        self.group = group
        self.version = version
        group_version = f"{group}/{version}" if group else version
        super().__init__(f"Unknown version {group_version}")


class UnknownKind(LookupFailure):
    def __init__(self, group_version: str, kind: str):
        self.group_version = group_version
        self.kind = kind
        super().__init__(f"Unknown kind {kind} in group version {group_version}")


class MissingSchema(KubePruneError):
    def __init__(self, api_version: str, kind: str):
        self.api_version = api_version
        self.kind = kind
        super().__init__(f"No definition for {api_version} {kind}")


class UnresolvedReference(KubePruneError):
    """
    Soft failure: a $ref points at a definition that is not in the graph.
    The resolver logs it and pruning below that point stops.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unresolved schema reference {name}")


class ManifestParseError(KubePruneError):
    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        location = f" (line {line})" if line is not None else ""
        super().__init__(f"Unable to parse manifest{location}: {message}")


class APIError(KubePruneError):
    """Non-2xx answer from the Kubernetes API server."""

    def __init__(self, status: int, reason: str = "", message: Optional[str] = None):
        self.status = status
        self.reason = reason
        super().__init__(message or f"{status} {reason}".strip())
