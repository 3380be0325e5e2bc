import logging

from kubectl_pod_dive.errors import ClusterLookupError, GatewayError
from kubectl_pod_dive.gateway import ClusterGateway
from kubectl_pod_dive.model import get_pod_name

logger = logging.getLogger(__name__)


def collect_siblings(
    gateway: ClusterGateway, node_name: str, exclude_name: str
) -> tuple[str, ...]:
    """
    Names of every pod on the node except exclude_name, in API order.
    """
    logger.debug("Listing pods on node %s", node_name)
    try:
        pods = gateway.list_pods(None, field_selector=f"spec.nodeName={node_name}")
    except GatewayError as e:
        raise ClusterLookupError(
            f"Failed to get sibling pods on node {node_name} ({e}). "
            "Check that the API server is reachable."
        ) from e

    return tuple(
        name for name in (get_pod_name(p) for p in pods) if name != exclude_name
    )
