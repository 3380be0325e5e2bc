import logging

from kubectl_pod_dive.gateway import ClusterGateway
from kubectl_pod_dive.locator import locate_pod
from kubectl_pod_dive.model import DiveResult
from kubectl_pod_dive.node import profile_node
from kubectl_pod_dive.owners import resolve_owners
from kubectl_pod_dive.siblings import collect_siblings
from kubectl_pod_dive.tree import render_result

logger = logging.getLogger(__name__)


def dive(
    gateway: ClusterGateway, pod_name: str, namespace: str | None = None
) -> DiveResult:
    """
    Resolve a pod name into its node, owners and node siblings.

    Stages run one after another and the first failure aborts the dive:
    - locate the pod (PodNotFoundError, PendingSchedulingError)
    - profile its node (ClusterLookupError)
    - list its siblings on that node (ClusterLookupError)
    - resolve its owners (ClusterLookupError)
    """
    pod = locate_pod(gateway, pod_name, namespace)
    logger.debug("Found pod %s/%s on node %s", pod.namespace, pod.name, pod.node_name)

    node = profile_node(gateway, pod.node_name)
    siblings = collect_siblings(gateway, node.name, pod.name)
    owners = resolve_owners(gateway, pod.owner_references, pod.namespace)

    return DiveResult(pod=pod, node=node, owners=owners, siblings=siblings)


def run(
    gateway: ClusterGateway, pod_name: str, namespace: str | None = None
) -> list[str]:
    return render_result(dive(gateway, pod_name, namespace))
