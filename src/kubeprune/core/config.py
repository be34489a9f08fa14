#!/usr/bin/env python3
"""
KUBEPRUNE CONFIGURATION
-----------------------
Run-time settings resolved from CLI flags, with environment fallbacks:

    KUBEPRUNE_API_URL   API server URL (e.g. a running `kubectl proxy`)
    KUBEPRUNE_SNAPSHOT  JSON snapshot of API responses (offline mode)

Author: KubePrune Team
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from kubeprune.cluster.client import ClusterClient, SnapshotSource

ENV_API_URL = "KUBEPRUNE_API_URL"
ENV_SNAPSHOT = "KUBEPRUNE_SNAPSHOT"


@dataclass
class KubePruneConfig:
    api_url: Optional[str] = None
    context: Optional[str] = None       # kubeconfig context, used when no URL/snapshot
    snapshot_path: Optional[str] = None
    decode_secrets: bool = False
    verbose: bool = False

    @classmethod
    def from_args(cls, args: Any, environ: Optional[Mapping[str, str]] = None) -> "KubePruneConfig":
        environ = os.environ if environ is None else environ
        return cls(
            api_url=getattr(args, "api_url", None) or environ.get(ENV_API_URL) or None,
            context=getattr(args, "context", None),
            snapshot_path=getattr(args, "snapshot", None) or environ.get(ENV_SNAPSHOT) or None,
            decode_secrets=bool(getattr(args, "decode_secrets", False)),
            verbose=bool(getattr(args, "verbose", False)),
        )

    def source(self):
        """The object the registry is built from; it exposes get_json(path)."""
        if self.snapshot_path:
            return SnapshotSource.from_file(self.snapshot_path)
        if self.api_url:
            return ClusterClient.from_url(self.api_url)
        return ClusterClient.from_kubeconfig(self.context)
