#!/usr/bin/env python3
"""
KUBEPRUNE CLUSTER CLIENT - The Courier
--------------------------------------
Thin transport over the official Kubernetes client. It only knows how to GET
a path and hand back parsed JSON; discovery, OpenAPI loading and pruning are
built on top of that single capability.

SnapshotSource serves the same interface from a JSON file mapping API paths
to recorded response bodies, for offline use and tests.

Author: KubePrune Team
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from kubeprune.core.errors import APIError, KubePruneError
from kubeprune.core.models import Resource
from kubeprune.registry.registry import Registry

logger = logging.getLogger("kubeprune.cluster")


def _normalize_path(path: str) -> str:
    return "/" + path.lstrip("/")


def api_error_from_exception(exc: ApiException) -> APIError:
    """Builds an APIError, preferring the message of a v1 Status body."""
    message = None
    try:
        body = json.loads(exc.body or "")
        if isinstance(body, dict) and body.get("apiVersion") == "v1" and body.get("kind") == "Status":
            message = body.get("message")
    except (TypeError, ValueError):
        pass
    return APIError(exc.status or 0, exc.reason or "", message)


class ClusterClient:
    """
    GETs JSON documents from a live API server.
    """

    def __init__(self, api_client: client.ApiClient):
        self.api_client = api_client

    @classmethod
    def from_url(cls, api_url: str) -> "ClusterClient":
        """For an API endpoint that needs no credentials, e.g. a running `kubectl proxy`."""
        configuration = client.Configuration()
        configuration.host = api_url.rstrip("/")
        return cls(client.ApiClient(configuration))

    @classmethod
    def from_kubeconfig(cls, context: Optional[str] = None) -> "ClusterClient":
        try:
            api_client = config.new_client_from_config(context=context)
        except config.ConfigException as e:
            raise KubePruneError(f"Unable to load kubeconfig: {e}") from e
        return cls(api_client)

    def get_json(self, path: str) -> Any:
        path = _normalize_path(path)
        logger.debug("GET %s", path)
        try:
            return self.api_client.call_api(
                path, "GET",
                header_params={"Accept": "application/json"},
                response_type="object",
                auth_settings=["BearerToken"],
                _return_http_data_only=True,
            )
        except ApiException as e:
            logger.error("GET %s failed with %s", path, e.status)
            raise api_error_from_exception(e) from e

    def list_objects(self, resource: Resource, namespace: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Lists a resource collection. List items come back without apiVersion
        and kind, so both are filled in from the resource.
        """
        object_list = self.get_json(Registry.resource_uri(resource, namespace))
        items = object_list.get("items") or []
        for obj in items:
            obj["apiVersion"] = resource.api_version
            obj["kind"] = resource.kind
        return items


class SnapshotSource:
    """
    Serves recorded API responses: {"/api": {...}, "/apis": {...}, "/openapi/v2": {...}}.
    """

    def __init__(self, responses: Dict[str, Any]):
        self.responses = {_normalize_path(k): v for k, v in responses.items()}

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SnapshotSource":
        snapshot_path = Path(path)
        try:
            with open(snapshot_path, "r", encoding="utf-8") as f:
                responses = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Unable to load snapshot from %s", snapshot_path)
            raise KubePruneError(f"Failed to load snapshot {snapshot_path}: {e}") from e
        if not isinstance(responses, dict):
            raise KubePruneError(f"Snapshot {snapshot_path} must be a JSON object keyed by API path")
        return cls(responses)

    def get_json(self, path: str) -> Any:
        path = _normalize_path(path)
        if path not in self.responses:
            raise APIError(404, "Not Found", f"{path} is not recorded in the snapshot")
        return self.responses[path]
