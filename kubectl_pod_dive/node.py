import logging
from typing import Any

from kubectl_pod_dive.errors import ClusterLookupError, GatewayError
from kubectl_pod_dive.gateway import ClusterGateway
from kubectl_pod_dive.model import NodeReadiness, NodeRecord, find_condition

logger = logging.getLogger(__name__)

ROLE_LABEL = "kubernetes.io/role"
CONTROL_PLANE_ROLE = "master"
# newer clusters mark the role through label presence only
CONTROL_PLANE_LABELS = (
    "node-role.kubernetes.io/control-plane",
    "node-role.kubernetes.io/master",
)


def node_readiness(node: dict[str, Any]) -> NodeReadiness | None:
    condition = find_condition(node, "Ready")
    if condition is None:
        return None
    return NodeReadiness.from_status(condition.get("status"))


def node_role(labels: dict[str, str]) -> str | None:
    if labels.get(ROLE_LABEL) == CONTROL_PLANE_ROLE:
        return CONTROL_PLANE_ROLE
    if any(label in labels for label in CONTROL_PLANE_LABELS):
        return CONTROL_PLANE_ROLE
    return None


def profile_node(gateway: ClusterGateway, node_name: str) -> NodeRecord:
    logger.debug("Fetching node %s", node_name)
    try:
        node = gateway.get_node(node_name)
    except GatewayError as e:
        raise ClusterLookupError(
            f"Failed to get node {node_name} ({e}). "
            "Check that the API server is reachable and you may read nodes."
        ) from e

    labels = dict(node.get("metadata", {}).get("labels") or {})
    return NodeRecord(
        name=node.get("metadata", {}).get("name") or node_name,
        labels=labels,
        readiness=node_readiness(node),
        role=node_role(labels),
    )
