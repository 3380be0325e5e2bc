"""
Cluster query gateways.

The pipeline only ever talks to a ClusterGateway. KubernetesGateway answers
from a live API server, SnapshotGateway from an offline dump of
`kubectl get pods,nodes,rs,sts,ds -A -o json`.
"""

import logging
import os
from typing import Any

import urllib3
import yaml
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from kubectl_pod_dive.errors import ConfigurationError, GatewayError
from kubectl_pod_dive.model import load_json, normalize_items

logger = logging.getLogger(__name__)


def parse_field_selector(selector: str | None) -> dict[str, str]:
    """
    Parse `key=value[,key=value]` into a dict. Only exact matches are supported.
    """
    terms: dict[str, str] = {}
    if not selector:
        return terms
    for term in selector.split(","):
        key, sep, value = term.partition("=")
        if not sep or not key.strip():
            raise GatewayError(f"Invalid field selector term '{term}'")
        terms[key.strip()] = value.strip()
    return terms


class ClusterGateway:
    """
    Read-only cluster queries needed by a dive.
    All objects are returned as camelCase dicts (the API's JSON shape).
    """

    def list_pods(
        self, namespace: str | None, field_selector: str | None = None
    ) -> list[dict[str, Any]]:
        raise NotImplementedError

    def get_node(self, name: str) -> dict[str, Any]:
        raise NotImplementedError

    def get_replica_set(self, namespace: str, name: str) -> dict[str, Any]:
        raise NotImplementedError

    def get_stateful_set(self, namespace: str, name: str) -> dict[str, Any]:
        raise NotImplementedError

    def get_daemon_set(self, namespace: str, name: str) -> dict[str, Any]:
        raise NotImplementedError


# ----------------------------
# Live cluster
# ----------------------------


def is_running_in_cluster() -> bool:
    return os.environ.get("KUBERNETES_SERVICE_HOST") is not None


def load_api_client(
    kubeconfig: str | None = None, context: str | None = None
) -> client.ApiClient:
    """
    Build an authenticated ApiClient.

    Explicit kubeconfig/context always use the kubeconfig file. Otherwise the
    in-cluster ServiceAccount is tried first when running inside a pod.
    """
    if not kubeconfig and not context and is_running_in_cluster():
        try:
            configuration = client.Configuration()
            config.load_incluster_config(client_configuration=configuration)
            logger.debug("Loaded in-cluster configuration")
            return client.ApiClient(configuration)
        except config.ConfigException as e:
            logger.warning("In-cluster config failed: %s, falling back to kubeconfig", e)

    try:
        api_client = config.new_client_from_config(
            config_file=kubeconfig, context=context
        )
    except (config.ConfigException, OSError) as e:
        raise ConfigurationError(
            f"Failed to read kubeconfig: {e}. "
            "Check your current context and that the kubeconfig file exists."
        ) from e

    logger.debug(
        "Loaded kubeconfig %s (context=%s)", kubeconfig or "default", context or "current"
    )
    return api_client


class KubernetesGateway(ClusterGateway):
    def __init__(
        self, api_client: client.ApiClient, request_timeout: float | None = None
    ):
        self.api_client = api_client
        self.core = client.CoreV1Api(api_client)
        self.apps = client.AppsV1Api(api_client)
        self.request_timeout = request_timeout

    @classmethod
    def connect(
        cls,
        kubeconfig: str | None = None,
        context: str | None = None,
        request_timeout: float | None = None,
    ) -> "KubernetesGateway":
        return cls(load_api_client(kubeconfig, context), request_timeout)

    def _call(self, what: str, func, *args, **kwargs) -> Any:
        if self.request_timeout:
            kwargs["_request_timeout"] = self.request_timeout
        try:
            result = func(*args, **kwargs)
        except ApiException as e:
            raise GatewayError(f"{what}: {e.status} {e.reason}") from e
        except urllib3.exceptions.HTTPError as e:
            raise GatewayError(f"{what}: {e}") from e
        return self.api_client.sanitize_for_serialization(result)

    def list_pods(self, namespace, field_selector=None):
        if namespace:
            pods = self._call(
                f"list pods in namespace {namespace}",
                self.core.list_namespaced_pod,
                namespace,
                field_selector=field_selector,
            )
        else:
            pods = self._call(
                "list pods in all namespaces",
                self.core.list_pod_for_all_namespaces,
                field_selector=field_selector,
            )
        return pods.get("items") or []

    def get_node(self, name):
        return self._call(f"get node {name}", self.core.read_node, name)

    def get_replica_set(self, namespace, name):
        return self._call(
            f"get replicaset {namespace}/{name}",
            self.apps.read_namespaced_replica_set,
            name,
            namespace,
        )

    def get_stateful_set(self, namespace, name):
        return self._call(
            f"get statefulset {namespace}/{name}",
            self.apps.read_namespaced_stateful_set,
            name,
            namespace,
        )

    def get_daemon_set(self, namespace, name):
        return self._call(
            f"get daemonset {namespace}/{name}",
            self.apps.read_namespaced_daemon_set,
            name,
            namespace,
        )


# ----------------------------
# Offline snapshot
# ----------------------------

# kind in a List document -> bucket name
_SNAPSHOT_KINDS = {
    "Pod": "pods",
    "Node": "nodes",
    "ReplicaSet": "replicasets",
    "StatefulSet": "statefulsets",
    "DaemonSet": "daemonsets",
}

_POD_FIELDS = {
    "metadata.name": lambda p: p.get("metadata", {}).get("name"),
    "metadata.namespace": lambda p: p.get("metadata", {}).get("namespace"),
    "spec.nodeName": lambda p: p.get("spec", {}).get("nodeName"),
}


def load_snapshot(path: str) -> dict[str, Any]:
    if path.endswith((".yaml", ".yml")):
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return load_json(path)


class SnapshotGateway(ClusterGateway):
    """
    Answers queries from an in-memory cluster snapshot.

    Accepts either a `kind: List` document or a mapping of
    pods/nodes/replicasets/statefulsets/daemonsets lists.
    """

    def __init__(self, snapshot: dict[str, Any]):
        self.objects: dict[str, list[dict[str, Any]]] = {
            bucket: [] for bucket in _SNAPSHOT_KINDS.values()
        }
        if snapshot.get("kind", "").endswith("List"):
            for item in normalize_items(snapshot):
                bucket = _SNAPSHOT_KINDS.get(item.get("kind", ""))
                if bucket is None:
                    logger.debug("Ignoring snapshot item of kind %s", item.get("kind"))
                    continue
                self.objects[bucket].append(item)
        else:
            for bucket in self.objects:
                self.objects[bucket].extend(normalize_items(snapshot.get(bucket)))

    @classmethod
    def from_file(cls, path: str) -> "SnapshotGateway":
        try:
            snapshot = load_snapshot(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to read cluster snapshot {path}: {e}"
            ) from e
        if not isinstance(snapshot, dict):
            raise ConfigurationError(
                f"Cluster snapshot {path} must be a mapping or a List document"
            )
        return cls(snapshot)

    def _get(self, bucket: str, name: str, namespace: str | None = None):
        for obj in self.objects[bucket]:
            metadata = obj.get("metadata", {})
            if metadata.get("name") != name:
                continue
            if namespace is not None and metadata.get("namespace") != namespace:
                continue
            return obj
        where = f"{namespace}/{name}" if namespace else name
        raise GatewayError(f"{bucket[:-1]} {where} not found in snapshot")

    def list_pods(self, namespace, field_selector=None):
        terms = parse_field_selector(field_selector)
        unsupported = set(terms) - set(_POD_FIELDS)
        if unsupported:
            raise GatewayError(
                f"Unsupported field selector keys: {sorted(unsupported)}"
            )
        if namespace:
            terms["metadata.namespace"] = namespace

        return [
            pod
            for pod in self.objects["pods"]
            if all(_POD_FIELDS[key](pod) == value for key, value in terms.items())
        ]

    def get_node(self, name):
        return self._get("nodes", name)

    def get_replica_set(self, namespace, name):
        return self._get("replicasets", name, namespace)

    def get_stateful_set(self, namespace, name):
        return self._get("statefulsets", name, namespace)

    def get_daemon_set(self, namespace, name):
        return self._get("daemonsets", name, namespace)
