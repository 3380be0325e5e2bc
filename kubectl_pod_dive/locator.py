import logging

from kubectl_pod_dive.errors import (
    GatewayError,
    PendingSchedulingError,
    PodNotFoundError,
)
from kubectl_pod_dive.gateway import ClusterGateway
from kubectl_pod_dive.model import PodRecord

logger = logging.getLogger(__name__)

_NOT_FOUND_HINT = (
    "Check your current context, that the API server is reachable "
    "and the spelling of the pod name."
)


def locate_pod(
    gateway: ClusterGateway, pod_name: str, namespace: str | None = None
) -> PodRecord:
    """
    Resolve a pod name to exactly one pod, cluster-wide unless a namespace is given.

    When the same name exists in several namespaces and no namespace was given,
    the first pod returned by the API is used.
    """
    if not pod_name:
        raise PodNotFoundError("A pod name is required!")

    selector = f"metadata.name={pod_name}"
    scope = f"namespace {namespace}" if namespace else "all namespaces"
    logger.debug("Looking up pod %s in %s", pod_name, scope)

    try:
        pods = gateway.list_pods(namespace or None, field_selector=selector)
    except GatewayError as e:
        raise PodNotFoundError(
            f"Failed to list pods in {scope} ({e}). {_NOT_FOUND_HINT}"
        ) from e

    # field selectors are exact already, the filter guards gateways that are not
    matches = [p for p in pods if p.get("metadata", {}).get("name") == pod_name]
    if not matches:
        raise PodNotFoundError(
            f"Pod {pod_name} was not found in {scope}. {_NOT_FOUND_HINT}"
        )

    if len(matches) > 1 and not namespace:
        namespaces = [p.get("metadata", {}).get("namespace") for p in matches]
        logger.warning(
            "Pod %s exists in namespaces %s, using %s (pass -n to choose)",
            pod_name,
            ", ".join(str(ns) for ns in namespaces),
            namespaces[0],
        )

    pod = PodRecord.from_dict(matches[0])
    if not pod.node_name:
        raise PendingSchedulingError(
            f"Pod {pod.namespace}/{pod.name} is not scheduled to any node yet "
            f"(phase {pod.phase}). Check its events with "
            f"'kubectl describe pod {pod.name} -n {pod.namespace}'."
        )

    return pod
