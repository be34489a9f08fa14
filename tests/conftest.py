"""
Shared fixtures: a miniature OpenAPI document and discovery answers shaped
like a real API server's, small enough to reason about in assertions.
"""

import pytest

from kubeprune.cluster.client import SnapshotSource
from kubeprune.core.engine import build_registry

META = "io.k8s.apimachinery.pkg.apis.meta.v1."
CORE = "io.k8s.api.core.v1."
APPS = "io.k8s.api.apps.v1."


def ref(name):
    return {"$ref": "#/definitions/" + name}


def gvk(group, version, kind):
    return {"x-kubernetes-group-version-kind": [{"group": group, "version": version, "kind": kind}]}


def openapi_document():
    return {
        "swagger": "2.0",
        "definitions": {
            META + "ObjectMeta": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "namespace": {"type": "string"},
                    "labels": {"type": "object", "additionalProperties": {"type": "string"}},
                    "annotations": {"type": "object", "additionalProperties": {"type": "string"}},
                    "uid": {"type": "string", "readOnly": True},
                    "resourceVersion": {"type": "string", "readOnly": True},
                    "creationTimestamp": {"$ref": "#/definitions/" + META + "Time", "readOnly": True},
                    "generation": {"type": "integer", "readOnly": True},
                },
            },
            META + "Time": {"type": "string", "format": "date-time"},
            META + "LabelSelector": {
                "type": "object",
                "properties": {
                    "matchLabels": {"type": "object", "additionalProperties": {"type": "string"}},
                },
            },
            CORE + "Pod": dict(
                type="object",
                properties={
                    "apiVersion": {"type": "string"},
                    "kind": {"type": "string"},
                    "metadata": ref(META + "ObjectMeta"),
                    "spec": ref(CORE + "PodSpec"),
                    "status": ref(CORE + "PodStatus"),
                },
                **gvk("", "v1", "Pod"),
            ),
            CORE + "PodSpec": {
                "type": "object",
                "properties": {
                    "containers": {"type": "array", "items": ref(CORE + "Container")},
                    "restartPolicy": {"type": "string", "default": "Always"},
                    "dnsPolicy": {"type": "string", "default": "ClusterFirst"},
                    "terminationGracePeriodSeconds": {"type": "integer", "default": 30},
                    "volumes": {"type": "array", "items": ref(CORE + "Volume")},
                },
            },
            CORE + "Volume": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "emptyDir": ref(CORE + "EmptyDirVolumeSource"),
                },
            },
            CORE + "EmptyDirVolumeSource": {
                "type": "object",
                "properties": {"medium": {"type": "string"}},
            },
            CORE + "Container": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "image": {"type": "string"},
                    "terminationMessagePath": {"type": "string", "default": "/dev/termination-log"},
                    "ports": {"type": "array", "items": ref(CORE + "ContainerPort")},
                },
            },
            CORE + "ContainerPort": {
                "type": "object",
                "properties": {
                    "containerPort": {"type": "integer"},
                    "protocol": {"type": "string", "default": "TCP"},
                },
            },
            CORE + "PodStatus": {
                "type": "object",
                "properties": {"phase": {"type": "string"}, "podIP": {"type": "string"}},
            },
            CORE + "Secret": dict(
                type="object",
                properties={
                    "apiVersion": {"type": "string"},
                    "kind": {"type": "string"},
                    "metadata": ref(META + "ObjectMeta"),
                    "data": {"type": "object", "additionalProperties": {"type": "string", "format": "byte"}},
                    "type": {"type": "string", "default": "Opaque"},
                },
                **gvk("", "v1", "Secret"),
            ),
            APPS + "Deployment": dict(
                type="object",
                properties={
                    "apiVersion": {"type": "string"},
                    "kind": {"type": "string"},
                    "metadata": ref(META + "ObjectMeta"),
                    "spec": ref(APPS + "DeploymentSpec"),
                    "status": {"type": "object", "properties": {"replicas": {"type": "integer"}}},
                },
                **gvk("apps", "v1", "Deployment"),
            ),
            APPS + "DeploymentSpec": {
                "type": "object",
                "properties": {
                    "replicas": {"type": "integer", "default": 1},
                    "revisionHistoryLimit": {"type": "integer", "default": 10},
                    "selector": ref(META + "LabelSelector"),
                    "template": ref(CORE + "PodTemplateSpec"),
                },
            },
            CORE + "PodTemplateSpec": {
                "type": "object",
                "properties": {
                    "metadata": ref(META + "ObjectMeta"),
                    "spec": ref(CORE + "PodSpec"),
                },
            },
            # Schema for a kind the cluster does not serve.
            "io.k8s.api.batch.v1beta1.CronJob": dict(type="object", **gvk("batch", "v1beta1", "CronJob")),
        },
    }


def api_responses():
    return {
        "/api": {"kind": "APIVersions", "versions": ["v1"]},
        "/apis": {
            "kind": "APIGroupList",
            "groups": [
                {
                    "name": "apps",
                    "versions": [{"groupVersion": "apps/v1", "version": "v1"}],
                    "preferredVersion": {"groupVersion": "apps/v1", "version": "v1"},
                },
                {
                    "name": "example.com",
                    "versions": [{"groupVersion": "example.com/v1", "version": "v1"}],
                    "preferredVersion": {"groupVersion": "example.com/v1", "version": "v1"},
                },
            ],
        },
        "/api/v1": {
            "kind": "APIResourceList",
            "groupVersion": "v1",
            "resources": [
                {"name": "pods", "kind": "Pod", "namespaced": True},
                {"name": "pods/log", "kind": "Pod", "namespaced": True},
                {"name": "secrets", "kind": "Secret", "namespaced": True},
                {"name": "namespaces", "kind": "Namespace", "namespaced": False},
            ],
        },
        "/apis/apps/v1": {
            "kind": "APIResourceList",
            "groupVersion": "apps/v1",
            "resources": [
                {"name": "deployments", "kind": "Deployment", "namespaced": True},
                {"name": "deployments/scale", "kind": "Scale", "namespaced": True},
            ],
        },
        "/apis/example.com/v1": {
            "kind": "APIResourceList",
            "groupVersion": "example.com/v1",
            "resources": [{"name": "widgets", "kind": "Widget", "namespaced": True}],
        },
        "/openapi/v2": openapi_document(),
    }


@pytest.fixture
def snapshot():
    return SnapshotSource(api_responses())


@pytest.fixture
def registry(snapshot):
    return build_registry(snapshot)
